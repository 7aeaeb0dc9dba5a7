"""
Exceptions raised by the device registry.

Every failure leaves the registry untouched. The class hierarchy mirrors the
failure categories so callers can catch a whole family at once:

- ValidationError: caller broke the input contract
- ConflictError: duplicate device, second root
- MissingReferenceError: uplink or device not registered
- EmptinessError: operation needs at least one device
"""


class RegistryError(Exception):
    """Base exception for registry errors."""

    def __init__(self, message: str, code: str = "REGISTRY_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(RegistryError):
    """Raised when a required argument is missing or malformed."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class ConflictError(RegistryError):
    """Raised when a registration would break the single-tree invariant."""


class DuplicateDeviceError(ConflictError):
    def __init__(self, mac_address: str):
        super().__init__(
            f"Device with '{mac_address}' MAC address already exists",
            code="DUPLICATE_DEVICE",
        )
        self.mac_address = mac_address


class RootAlreadyExistsError(ConflictError):
    def __init__(self):
        super().__init__(
            "Root device already exists, uplink MAC address is required",
            code="ROOT_ALREADY_EXISTS",
        )


class MissingReferenceError(RegistryError):
    """Raised when a named device is not in the registry."""

    def __init__(self, message: str, mac_address: str, code: str):
        super().__init__(message, code=code)
        self.mac_address = mac_address


class UplinkNotFoundError(MissingReferenceError):
    def __init__(self, mac_address: str):
        super().__init__(
            f"Uplink device with '{mac_address}' MAC address does not exist",
            mac_address=mac_address,
            code="UPLINK_NOT_FOUND",
        )


class DeviceNotFoundError(MissingReferenceError):
    def __init__(self, mac_address: str, reason: str = "cannot be found"):
        super().__init__(
            f"Device with '{mac_address}' MAC address {reason}",
            mac_address=mac_address,
            code="DEVICE_NOT_FOUND",
        )


class EmptinessError(RegistryError):
    """Raised when an operation needs a non-empty registry."""


class EmptyRegistryError(EmptinessError):
    def __init__(self):
        super().__init__(
            "Network deployment does not contain any devices",
            code="EMPTY_REGISTRY",
        )
