import pytest

from anariscenes.device.reference import ReferenceDevice
from anariscenes.scene.textured_cube import scene_textured_cube


@pytest.fixture
def device():
    return ReferenceDevice("test")


@pytest.fixture
def cube(device):
    scene = scene_textured_cube(device)
    scene.commit()
    yield scene
    scene.release()
