import logging

import numpy as np

from ..config import TexturedCubeConfig
from ..device.ownership import borrow, scoped, transfer
from ..device.types import DataType
from ..models.camera import Camera
from ..utils.transforms import rotate, to_mat4x3, translate
from .primitives import QUAD_INDICES, QUAD_TEXCOORDS, QUAD_VERTICES, make_checkerboard
from .scene import TestScene

log = logging.getLogger(__name__)

# (degrees, axis) turning the +z face onto each face of the cube
FACE_ROTATIONS = (
    (0.0,   (0, 1, 0)),
    (180.0, (0, 1, 0)),
    (90.0,  (0, 1, 0)),
    (270.0, (0, 1, 0)),
    (90.0,  (1, 0, 0)),
    (270.0, (1, 0, 0)),
)

def face_transform(degrees, axis, offset=0.5):
    """Push the quad out to z=offset, then rotate it into place; packed (4, 3)."""
    return to_mat4x3(rotate(np.radians(degrees), axis) @ translate((0.0, 0.0, offset)))

class TexturedCube(TestScene):
    """Six instances of one checkerboard-textured quad forming the shell of a unit cube."""

    def __init__(self, device, config: TexturedCubeConfig = None, ambient_light=None):
        super().__init__(device, ambient_light)
        self.config = config or TexturedCubeConfig()
        self._world = device.new_world()

    def _make_geometry(self):
        d = self._device
        geom = d.new_geometry("mesh")
        transfer(d, geom, "vertex.position", d.new_array1d(QUAD_VERTICES, DataType.float32_vec3))
        transfer(d, geom, "vertex.texcoord", d.new_array1d(QUAD_TEXCOORDS, DataType.float32_vec2))
        transfer(d, geom, "index", d.new_array1d(QUAD_INDICES, DataType.uint32_vec3))
        d.commit(geom)
        return geom

    def _make_material(self):
        d = self._device
        t = self.config.texture
        tex = d.new_sampler("texture2d")
        transfer(d, tex, "data", d.new_array2d(make_checkerboard(t.dim, t.light, t.dark), DataType.float32_vec3))
        d.set_parameter(tex, "filter", t.filter, DataType.string)
        d.commit(tex)

        mat = d.new_material(self.config.material)
        transfer(d, mat, "map_kd", tex)
        d.commit(mat)
        return mat

    def _make_group(self):
        d = self._device
        geom = self._make_geometry()
        mat = self._make_material()
        surface = d.new_surface()
        transfer(d, surface, "geometry", geom)
        transfer(d, surface, "material", mat)
        d.commit(surface)

        surfaces = d.new_array1d([surface], DataType.surface)
        group = d.new_group()
        borrow(d, group, "surface", surfaces)
        d.commit(group)

        d.release(surfaces)
        d.release(surface)
        return group

    def _make_instance(self, group, degrees, axis):
        d = self._device
        inst = d.new_instance()
        d.set_parameter(inst, "transform", face_transform(degrees, axis, self.config.face_offset),
                        DataType.float32_mat3x4)
        borrow(d, inst, "group", group)
        d.commit(inst)
        return inst

    def commit(self):
        d = self._device
        group = self._make_group()
        log.debug("textured cube: group %r ready", group)

        instances = [self._make_instance(group, deg, axis) for deg, axis in FACE_ROTATIONS]
        with scoped(d, group, *instances):
            transfer(d, self._world, "instance", d.new_array1d(instances, DataType.instance))

        self.set_default_ambient_light(self._world)
        d.commit(self._world)
        log.info("committed textured cube: %d instances", len(instances))

    def cameras(self):
        return [Camera.from_config(self.config.camera)]

def scene_textured_cube(device, config=None, ambient_light=None):
    return TexturedCube(device, config, ambient_light)
