"""
NetDeploy - Networking device registry for a single deployment.

Tracks gateways, switches and access points together with their uplink
connections, and serves them as a sorted list or as a tree.

Example:
    >>> from netdeploy import DeviceRegistry, DeviceType
    >>> registry = DeviceRegistry()
    >>> registry.register_device(DeviceType.GATEWAY, "AA:AA:AA:AA:AA:AA")
    >>> registry.get_device_tree().mac_address
    'AA:AA:AA:AA:AA:AA'
"""

__version__ = "1.0.0"

from .config import Config, get_config
from .registry import DeviceRegistry, DeviceType, get_device_registry

__all__ = [
    "__version__",
    "Config",
    "get_config",
    "DeviceRegistry",
    "DeviceType",
    "get_device_registry",
]
