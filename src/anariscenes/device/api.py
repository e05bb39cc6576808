from abc import ABC, abstractmethod

from .types import DataType, Handle

class DeviceError(RuntimeError):
    pass

class Device(ABC):
    """
    Object-creation / parameter / commit protocol of a rendering device.
    New objects start with one reference owned by the caller.
    """

    @abstractmethod
    def new_array1d(self, data, dtype: DataType) -> Handle: ...

    @abstractmethod
    def new_array2d(self, data, dtype: DataType) -> Handle: ...

    @abstractmethod
    def new_geometry(self, subtype: str) -> Handle: ...

    @abstractmethod
    def new_sampler(self, subtype: str) -> Handle: ...

    @abstractmethod
    def new_material(self, subtype: str) -> Handle: ...

    @abstractmethod
    def new_light(self, subtype: str) -> Handle: ...

    @abstractmethod
    def new_surface(self) -> Handle: ...

    @abstractmethod
    def new_group(self) -> Handle: ...

    @abstractmethod
    def new_instance(self) -> Handle: ...

    @abstractmethod
    def new_world(self) -> Handle: ...

    @abstractmethod
    def set_parameter(self, obj: Handle, name: str, value, dtype: DataType = None): ...

    @abstractmethod
    def unset_parameter(self, obj: Handle, name: str): ...

    @abstractmethod
    def commit(self, obj: Handle): ...

    @abstractmethod
    def retain(self, obj: Handle): ...

    @abstractmethod
    def release(self, obj: Handle): ...

    @abstractmethod
    def get_property(self, obj: Handle, name: str): ...
