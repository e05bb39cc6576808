import enum
import itertools

class ObjectType(str, enum.Enum):
    array1d = "array1d"
    array2d = "array2d"
    geometry = "geometry"
    sampler = "sampler"
    material = "material"
    surface = "surface"
    group = "group"
    instance = "instance"
    light = "light"
    world = "world"

class DataType(str, enum.Enum):
    float32 = "float32"
    float32_vec2 = "float32_vec2"
    float32_vec3 = "float32_vec3"
    uint32_vec3 = "uint32_vec3"
    float32_mat3x4 = "float32_mat3x4"
    string = "string"
    # object element types
    surface = "surface"
    instance = "instance"
    light = "light"

    @property
    def is_object(self):
        return self in _OBJECT_TYPES

    @property
    def components(self):
        return _COMPONENTS.get(self, 1)

    @property
    def numpy_dtype(self):
        return "uint32" if self.value.startswith("uint32") else "float32"

_OBJECT_TYPES = {DataType.surface: ObjectType.surface,
                 DataType.instance: ObjectType.instance,
                 DataType.light: ObjectType.light}

_COMPONENTS = {DataType.float32_vec2: 2, DataType.float32_vec3: 3,
               DataType.uint32_vec3: 3, DataType.float32_mat3x4: 12}

def object_type_of(dtype: DataType) -> ObjectType:
    return _OBJECT_TYPES[dtype]

_ids = itertools.count(1)

class Handle:
    """Opaque reference to a device object; only meaningful to the device that issued it."""
    __slots__ = ("device_id", "id", "type", "subtype")

    def __init__(self, device_id, type: ObjectType, subtype=None):
        self.device_id = device_id
        self.id = next(_ids)
        self.type = ObjectType(type)
        self.subtype = subtype

    def __repr__(self):
        sub = f":{self.subtype}" if self.subtype else ""
        return f"<{self.type.value}{sub} #{self.id}>"
