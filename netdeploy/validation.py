"""
MAC address format validation.

The registry treats MAC addresses as opaque keys; the API runs every address
through here before it reaches the registry.
"""

import re
from typing import Optional

from .registry.errors import ValidationError

MAC_ADDRESS_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$")


def is_valid_mac_address(value: Optional[str]) -> bool:
    """Check for six colon or hyphen separated hex pairs."""
    return isinstance(value, str) and MAC_ADDRESS_PATTERN.fullmatch(value) is not None


def validate_mac_address(value: Optional[str], field: str = "macAddress") -> str:
    """Return value unchanged, or raise ValidationError if it is not a MAC address."""
    if not is_valid_mac_address(value):
        raise ValidationError(f"Invalid MAC address: '{value}'", field=field)
    return value
