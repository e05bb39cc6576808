"""
In-memory reference device.

Keeps the object graph a scene builds: reference counts, parameters, array
contents and commit state. Nothing is rendered. Tests and the command line
use it to inspect what a scene hands to a device.
"""
import itertools
import logging

import numpy as np

from .api import Device, DeviceError
from ..utils.transforms import from_mat4x3
from .types import DataType, Handle, ObjectType, object_type_of

log = logging.getLogger(__name__)

_device_ids = itertools.count(1)

# parameters an object must carry before it can be committed
_REQUIRED = {
    (ObjectType.geometry, "mesh"): ("vertex.position",),
    (ObjectType.sampler, "texture2d"): ("data",),
    (ObjectType.surface, None): ("geometry", "material"),
    (ObjectType.instance, None): ("group",),
}

class _Object:
    __slots__ = ("handle", "refs", "params", "data", "dtype", "committed")

    def __init__(self, handle, data=None, dtype=None):
        self.handle = handle
        self.refs = 1
        self.params = {}
        self.data = data
        self.dtype = dtype
        self.committed = False

class ReferenceDevice(Device):
    def __init__(self, name="reference"):
        self.name = name
        self._id = next(_device_ids)
        self._objects = {}

    def __repr__(self):
        return f"ReferenceDevice({self.name!r}, live={len(self._objects)})"

    # --- object creation ---------------------------------------------------

    def _new(self, type, subtype=None, data=None, dtype=None):
        h = Handle(self._id, type, subtype)
        self._objects[h.id] = _Object(h, data, dtype)
        log.debug("%s: created %r", self.name, h)
        return h

    def new_array1d(self, data, dtype):
        dtype = DataType(dtype)
        if dtype.is_object:
            elems = list(data)
            want = object_type_of(dtype)
            for e in elems:
                if self._get(e).handle.type != want:
                    raise DeviceError(f"array of {dtype.value} got {e!r}")
            for e in elems:
                self._get(e).refs += 1
            return self._new(ObjectType.array1d, data=elems, dtype=dtype)
        arr = np.array(data, dtype=dtype.numpy_dtype)
        n = dtype.components
        if arr.size % n:
            raise DeviceError(f"{arr.size} values do not make whole {dtype.value} elements")
        arr = arr.reshape(-1, n) if n > 1 else arr.reshape(-1)
        arr.setflags(write=False)
        return self._new(ObjectType.array1d, data=arr, dtype=dtype)

    def new_array2d(self, data, dtype):
        dtype = DataType(dtype)
        if dtype.is_object:
            raise DeviceError("2D arrays of objects are not supported")
        arr = np.array(data, dtype=dtype.numpy_dtype)
        n = dtype.components
        expect_ndim = 3 if n > 1 else 2
        if arr.ndim != expect_ndim or (n > 1 and arr.shape[2] != n):
            raise DeviceError(f"bad shape {arr.shape} for 2D array of {dtype.value}")
        arr.setflags(write=False)
        return self._new(ObjectType.array2d, data=arr, dtype=dtype)

    def new_geometry(self, subtype):
        return self._new(ObjectType.geometry, subtype)

    def new_sampler(self, subtype):
        return self._new(ObjectType.sampler, subtype)

    def new_material(self, subtype):
        return self._new(ObjectType.material, subtype)

    def new_light(self, subtype):
        return self._new(ObjectType.light, subtype)

    def new_surface(self):
        return self._new(ObjectType.surface)

    def new_group(self):
        return self._new(ObjectType.group)

    def new_instance(self):
        return self._new(ObjectType.instance)

    def new_world(self):
        return self._new(ObjectType.world)

    # --- parameters and lifetime -------------------------------------------

    def _get(self, h) -> _Object:
        if not isinstance(h, Handle):
            raise DeviceError(f"not a device handle: {h!r}")
        if h.device_id != self._id:
            raise DeviceError(f"{h!r} belongs to another device")
        try:
            return self._objects[h.id]
        except KeyError:
            raise DeviceError(f"{h!r} was already released") from None

    def set_parameter(self, obj, name, value, dtype=None):
        o = self._get(obj)
        if dtype is not None:
            value = self._typed_value(name, value, DataType(dtype))
        if isinstance(value, Handle):
            self._get(value).refs += 1
        elif isinstance(value, (list, tuple, np.ndarray)):
            value = np.array(value, dtype=np.float32)
        old = o.params.get(name)
        o.params[name] = value
        o.committed = False
        if isinstance(old, Handle):
            self.release(old)

    def _typed_value(self, name, value, dtype):
        if dtype.is_object:
            raise DeviceError(f"parameter '{name}': pass {dtype.value} handles untyped")
        if dtype == DataType.string:
            if not isinstance(value, str):
                raise DeviceError(f"parameter '{name}': expected string, got {value!r}")
            return value
        arr = np.array(value, dtype=dtype.numpy_dtype)
        if arr.size != dtype.components:
            raise DeviceError(f"parameter '{name}': {arr.size} values for {dtype.value}")
        if dtype == DataType.float32:
            return float(arr.reshape(()))
        return arr.reshape(4, 3) if dtype == DataType.float32_mat3x4 else arr.reshape(-1)

    def unset_parameter(self, obj, name):
        o = self._get(obj)
        old = o.params.pop(name, None)
        o.committed = False
        if isinstance(old, Handle):
            self.release(old)

    def commit(self, obj):
        o = self._get(obj)
        for name in _REQUIRED.get((o.handle.type, o.handle.subtype), ()):
            if name not in o.params:
                raise DeviceError(f"cannot commit {obj!r}: missing parameter '{name}'")
        o.committed = True

    def retain(self, obj):
        self._get(obj).refs += 1

    def release(self, obj):
        o = self._get(obj)
        o.refs -= 1
        if o.refs > 0:
            return
        del self._objects[o.handle.id]
        log.debug("%s: destroyed %r", self.name, o.handle)
        children = [v for v in o.params.values() if isinstance(v, Handle)]
        if o.dtype is not None and o.dtype.is_object:
            children += o.data
        for c in children:
            self.release(c)

    # --- queries -----------------------------------------------------------

    def get_property(self, obj, name):
        o = self._get(obj)
        if name == "bounds":
            return self._bounds(o)
        return None

    def _bounds(self, o):
        t = o.handle.type
        if t == ObjectType.geometry:
            pos = o.params.get("vertex.position")
            if pos is None:
                return None
            V = self._get(pos).data
            return np.stack([V.min(axis=0), V.max(axis=0)]).astype(np.float32)
        if t == ObjectType.surface:
            g = o.params.get("geometry")
            return None if g is None else self._bounds(self._get(g))
        if t == ObjectType.instance:
            g = o.params.get("group")
            b = None if g is None else self._bounds(self._get(g))
            M = o.params.get("transform")
            if b is None or M is None:
                return b
            corners = np.array([[x, y, z] for x in b[:, 0] for y in b[:, 1] for z in b[:, 2]], dtype=np.float32)
            T = from_mat4x3(np.asarray(M, dtype=np.float32).reshape(4, 3))
            P = corners @ T[:3, :3].T + T[:3, 3][None, :]
            return np.stack([P.min(axis=0), P.max(axis=0)]).astype(np.float32)
        if t in (ObjectType.group, ObjectType.world):
            boxes = []
            for key in ("surface", "instance"):
                arr = o.params.get(key)
                if arr is None:
                    continue
                for e in self._get(arr).data:
                    b = self._bounds(self._get(e))
                    if b is not None:
                        boxes.append(b)
            if not boxes:
                return None
            B = np.stack(boxes)
            return np.stack([B[:, 0].min(axis=0), B[:, 1].max(axis=0)]).astype(np.float32)
        return None

    def live_objects(self, type=None):
        hs = [o.handle for o in self._objects.values()]
        if type is not None:
            hs = [h for h in hs if h.type == ObjectType(type)]
        return hs

    def is_alive(self, h):
        return isinstance(h, Handle) and h.device_id == self._id and h.id in self._objects

    def refcount(self, h):
        return self._get(h).refs

    def is_committed(self, h):
        return self._get(h).committed

    def parameters(self, h):
        return dict(self._get(h).params)

    def array_data(self, h):
        o = self._get(h)
        if o.dtype is None:
            raise DeviceError(f"{h!r} is not an array")
        return list(o.data) if o.dtype.is_object else o.data

    def snapshot(self, h):
        """Plain-python view of h and everything it references (handle ids left out)."""
        o = self._get(h)
        out = {"type": o.handle.type.value}
        if o.handle.subtype is not None:
            out["subtype"] = o.handle.subtype
        if o.dtype is not None:
            out["dtype"] = o.dtype.value
            if o.dtype.is_object:
                out["data"] = [self.snapshot(e) for e in o.data]
            else:
                out["data"] = o.data.tolist()
            return out
        out["committed"] = o.committed
        out["parameters"] = {k: self._snapshot_value(v) for k, v in sorted(o.params.items())}
        return out

    def _snapshot_value(self, v):
        if isinstance(v, Handle):
            return self.snapshot(v)
        if isinstance(v, np.ndarray):
            return v.tolist()
        return v
