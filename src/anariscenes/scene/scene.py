import logging
from abc import ABC, abstractmethod

import numpy as np

from ..config import AmbientLightConfig
from ..device.ownership import transfer
from ..device.types import DataType
from ..models.camera import Camera

log = logging.getLogger(__name__)

class TestScene(ABC):
    """
    A scene a harness can ask for: build it with commit(), hand world() to a
    renderer, and frame it with cameras(). The scene owns one reference to its
    world until release().
    """

    def __init__(self, device, ambient_light: AmbientLightConfig = None):
        self._device = device
        self._ambient = ambient_light or AmbientLightConfig()
        self._world = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
        return False

    @property
    def device(self):
        return self._device

    def world(self):
        return self._world

    @abstractmethod
    def commit(self): ...

    def bounds(self):
        return self._device.get_property(self._world, "bounds")

    def cameras(self):
        """One camera looking at the bounds center from the +xyz diagonal."""
        b = self.bounds()
        if b is None:
            b = np.array([[-1, -1, -1], [1, 1, 1]], dtype=np.float32)
        center = 0.5 * (b[0] + b[1])
        diag = float(np.linalg.norm(b[1] - b[0]))
        position = center + diag * np.ones(3, dtype=np.float32) / np.sqrt(3.0)
        return [Camera(position, center)]

    def set_default_ambient_light(self, world):
        d = self._device
        light = d.new_light("ambient")
        d.set_parameter(light, "color", tuple(self._ambient.color), DataType.float32_vec3)
        d.set_parameter(light, "intensity", float(self._ambient.intensity), DataType.float32)
        d.commit(light)
        lights = d.new_array1d([light], DataType.light)
        d.release(light)
        transfer(d, world, "light", lights)

    def release(self):
        if self._world is not None:
            log.debug("releasing world %r", self._world)
            self._device.release(self._world)
            self._world = None
