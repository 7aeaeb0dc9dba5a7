"""Device registry module."""
from .devices import (
    DEVICE_TYPE_ORDER,
    DeviceDescriptor,
    DeviceNode,
    DeviceRecord,
    DeviceRegistry,
    DeviceType,
    get_device_registry,
    reset_device_registry,
)
from .errors import (
    ConflictError,
    DeviceNotFoundError,
    DuplicateDeviceError,
    EmptinessError,
    EmptyRegistryError,
    MissingReferenceError,
    RegistryError,
    RootAlreadyExistsError,
    UplinkNotFoundError,
    ValidationError,
)

__all__ = [
    "DEVICE_TYPE_ORDER",
    "DeviceDescriptor",
    "DeviceNode",
    "DeviceRecord",
    "DeviceRegistry",
    "DeviceType",
    "get_device_registry",
    "reset_device_registry",
    "ConflictError",
    "DeviceNotFoundError",
    "DuplicateDeviceError",
    "EmptinessError",
    "EmptyRegistryError",
    "MissingReferenceError",
    "RegistryError",
    "RootAlreadyExistsError",
    "UplinkNotFoundError",
    "ValidationError",
]
