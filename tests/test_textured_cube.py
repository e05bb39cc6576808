import numpy as np
import pytest

from anariscenes.config import CameraConfig, TextureConfig, TexturedCubeConfig
from anariscenes.device.reference import ReferenceDevice
from anariscenes.device.types import ObjectType
from anariscenes.scene.primitives import QUAD_VERTICES
from anariscenes.scene.scene import TestScene as BaseScene
from anariscenes.scene.textured_cube import FACE_ROTATIONS, TexturedCube, face_transform, scene_textured_cube
from anariscenes.utils.transforms import transform_pts

# face centers in FACE_ROTATIONS order
EXPECTED_CENTERS = [
    (0, 0, 0.5),
    (0, 0, -0.5),
    (0.5, 0, 0),
    (-0.5, 0, 0),
    (0, -0.5, 0),
    (0, 0.5, 0),
]


def _instances(device, scene):
    arr = device.parameters(scene.world())["instance"]
    return device.array_data(arr)


def test_construction_creates_empty_world(device):
    scene = scene_textured_cube(device)
    assert isinstance(scene, BaseScene)
    assert scene.world().type == ObjectType.world
    assert device.parameters(scene.world()) == {}
    assert len(device.live_objects()) == 1
    scene.release()


def test_world_is_committed_with_six_instances(device, cube):
    assert device.is_committed(cube.world())
    insts = _instances(device, cube)
    assert len(insts) == 6
    assert all(device.is_committed(i) for i in insts)


def test_instances_share_one_group(device, cube):
    insts = _instances(device, cube)
    groups = {device.parameters(i)["group"].id for i in insts}
    assert len(groups) == 1
    group = device.parameters(insts[0])["group"]
    assert device.refcount(group) == 6


def test_each_instance_places_a_cube_face(device, cube):
    for inst, center in zip(_instances(device, cube), EXPECTED_CENTERS):
        M = device.parameters(inst)["transform"]
        P = transform_pts(M, QUAD_VERTICES)
        np.testing.assert_allclose(P.mean(axis=0), center, atol=1e-6)
        # the face lies in the plane through its center, normal to the center
        n = np.asarray(center, dtype=np.float32) * 2
        np.testing.assert_allclose(P @ n, 0.5, atol=1e-6)
        # and still spans the full unit square
        np.testing.assert_allclose(np.ptp(P, axis=0).max(), 1.0, atol=1e-6)


def test_face_transform_identity_is_pure_translation():
    M = face_transform(0.0, (0, 1, 0))
    np.testing.assert_array_equal(M[:3], np.eye(3))
    np.testing.assert_array_equal(M[3], [0, 0, 0.5])


def test_face_rotations_cover_all_faces():
    centers = {tuple(float(x) + 0.0 for x in np.round(face_transform(deg, ax)[3], 6)) for deg, ax in FACE_ROTATIONS}
    assert centers == {tuple(float(x) for x in c) for c in EXPECTED_CENTERS}


def test_surface_material_and_texture(device, cube):
    group = device.parameters(_instances(device, cube)[0])["group"]
    surfaces = device.array_data(device.parameters(group)["surface"])
    assert len(surfaces) == 1
    sp = device.parameters(surfaces[0])
    geom, mat = sp["geometry"], sp["material"]
    assert geom.subtype == "mesh" and mat.subtype == "matte"

    gp = device.parameters(geom)
    assert device.array_data(gp["vertex.position"]).shape == (4, 3)
    assert device.array_data(gp["vertex.texcoord"]).shape == (4, 2)
    assert device.array_data(gp["index"]).shape == (2, 3)

    tex = device.parameters(mat)["map_kd"]
    assert tex.subtype == "texture2d"
    tp = device.parameters(tex)
    assert tp["filter"] == "nearest"
    data = device.array_data(tp["data"])
    assert data.shape == (8, 8, 3)
    assert np.all(data[:, :-1] != data[:, 1:])
    assert np.all(data[:-1, :] != data[1:, :])


def test_default_ambient_light_attached(device, cube):
    lights = device.array_data(device.parameters(cube.world())["light"])
    assert len(lights) == 1
    assert lights[0].subtype == "ambient"
    lp = device.parameters(lights[0])
    np.testing.assert_array_equal(lp["color"], [1, 1, 1])
    assert lp["intensity"] == 1.0


def test_builder_keeps_only_the_world(device, cube):
    world = cube.world()
    assert device.refcount(world) == 1
    # world, instance array, 6 instances, group, surface array, surface, geometry,
    # 3 vertex arrays, material, sampler, texture array, light array, light
    assert len(device.live_objects()) == 20
    for inst in _instances(device, cube):
        assert device.refcount(inst) == 1


def test_release_frees_everything(device):
    scene = scene_textured_cube(device)
    scene.commit()
    scene.release()
    assert device.live_objects() == []
    assert scene.world() is None
    scene.release()


def test_context_manager_releases(device):
    with TexturedCube(device) as scene:
        scene.commit()
        assert len(device.live_objects()) == 20
    assert device.live_objects() == []


def test_cameras_single_fixed_camera(cube):
    cams = cube.cameras()
    assert len(cams) == 1
    cam = cams[0]
    np.testing.assert_array_equal(cam.position, [1.25, 1.25, 1.25])
    np.testing.assert_array_equal(cam.at, [0, 0, 0])
    np.testing.assert_array_equal(cam.up, [0, 1, 0])
    expect = (cam.at - cam.position) / np.linalg.norm(cam.at - cam.position)
    np.testing.assert_allclose(cam.direction, expect, atol=1e-7)
    np.testing.assert_allclose(np.linalg.norm(cam.direction), 1.0, atol=1e-6)


def test_cameras_is_a_pure_query(device):
    scene = scene_textured_cube(device)
    before = len(device.live_objects())
    assert len(scene.cameras()) == 1
    assert len(device.live_objects()) == before
    scene.release()


def test_bounds_are_the_unit_cube(cube):
    np.testing.assert_allclose(cube.bounds(), [[-0.5] * 3, [0.5] * 3], atol=1e-6)


def test_default_camera_frames_bounds(cube):
    cam, = BaseScene.cameras(cube)
    np.testing.assert_allclose(cam.at, [0, 0, 0], atol=1e-6)
    np.testing.assert_allclose(cam.position, [1, 1, 1], atol=1e-5)


def test_repeated_builds_are_identical():
    snaps = []
    for _ in range(2):
        d = ReferenceDevice()
        with scene_textured_cube(d) as scene:
            scene.commit()
            snaps.append(d.snapshot(scene.world()))
    assert snaps[0] == snaps[1]
    assert len(snaps[0]["parameters"]["instance"]["data"]) == 6


def test_config_changes_texture(device):
    cfg = TexturedCubeConfig(texture=TextureConfig(dim=4, filter="linear"))
    with TexturedCube(device, cfg) as scene:
        scene.commit()
        gp = device.parameters(device.parameters(_instances(device, scene)[0])["group"])
        surface = device.array_data(gp["surface"])[0]
        tex = device.parameters(device.parameters(surface)["material"])["map_kd"]
        assert device.parameters(tex)["filter"] == "linear"
        assert device.array_data(device.parameters(tex)["data"]).shape == (4, 4, 3)


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        TextureConfig(dim=1)
    with pytest.raises(ValueError):
        TextureConfig(filter="cubic")


@pytest.mark.parametrize("levels", [dict(light=0.5, dark=0.5), dict(light=1.5), dict(dark=-0.1)])
def test_texture_levels_must_make_a_checkerboard(levels):
    with pytest.raises(ValueError):
        TextureConfig(**levels)


@pytest.mark.parametrize("camera", [
    dict(position=[0, 0, 0], at=[0, 0, 0]),
    dict(position=[1, 1], at=[0, 0]),
    dict(up=[0, 1, 0, 0]),
    dict(up=[0, 0, 0]),
])
def test_camera_config_must_describe_a_3d_frame(camera):
    with pytest.raises(ValueError):
        CameraConfig(**camera)


def test_configured_camera_direction_is_unit(device):
    cfg = TexturedCubeConfig(camera=CameraConfig(position=[0, 2, 0], at=[0, 0, 0], up=[0, 0, 1]))
    with TexturedCube(device, cfg) as scene:
        cam, = scene.cameras()
        assert cam.direction.shape == (3,)
        np.testing.assert_allclose(cam.direction, [0, -1, 0])


def test_scene_base_is_abstract(device):
    with pytest.raises(TypeError):
        BaseScene(device)


def test_transforms_are_stored_as_mat3x4(device, cube):
    for inst in _instances(device, cube):
        M = device.parameters(inst)["transform"]
        assert M.shape == (4, 3)
        assert M.dtype == np.float32
