"""
Device Registry - Tracks the networking devices of a single deployment.

The registry holds one tree of devices:
- Each device is identified by its MAC address
- The first registered device is the root (no uplink)
- Every later device must name an already registered uplink

Nothing is persisted; the registry lives as long as the process.
"""

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from .errors import (
    DeviceNotFoundError,
    DuplicateDeviceError,
    EmptyRegistryError,
    RootAlreadyExistsError,
    UplinkNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class DeviceType(Enum):
    GATEWAY = "GATEWAY"
    SWITCH = "SWITCH"
    ACCESS_POINT = "ACCESS_POINT"


# Listing precedence: gateways, then switches, then access points
DEVICE_TYPE_ORDER: Dict[DeviceType, int] = {
    DeviceType.GATEWAY: 0,
    DeviceType.SWITCH: 1,
    DeviceType.ACCESS_POINT: 2,
}


@dataclass(frozen=True)
class DeviceRecord:
    """Stored state of one device. Replaced, never mutated."""
    device_type: DeviceType
    children: FrozenSet[str] = field(default_factory=frozenset)

    def with_child(self, mac_address: str) -> "DeviceRecord":
        return replace(self, children=self.children | {mac_address})


@dataclass
class DeviceDescriptor:
    """Flat view of a device, without its connections."""
    mac_address: str
    device_type: DeviceType

    def sort_key(self):
        return (DEVICE_TYPE_ORDER[self.device_type], self.mac_address)

    def to_dict(self) -> dict:
        return {
            "macAddress": self.mac_address,
            "deviceType": self.device_type.value,
        }


@dataclass
class DeviceNode:
    """A device together with all of its downlink devices."""
    mac_address: str
    device_type: DeviceType
    downlink_devices: List["DeviceNode"] = field(default_factory=list)

    def _header(self) -> dict:
        return {
            "macAddress": self.mac_address,
            "deviceType": self.device_type.value,
            "downlinkDevices": [],
        }

    def to_dict(self) -> dict:
        # Explicit stack: tree depth is bounded only by the deployment
        root = self._header()
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for child in node.downlink_devices:
                child_data = child._header()
                data["downlinkDevices"].append(child_data)
                stack.append((child, child_data))
        return root

    def to_json(self) -> str:
        """Serialize to a JSON document without recursing per level."""
        parts = []
        stack = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(
                '{"macAddress":%s,"deviceType":%s,"downlinkDevices":['
                % (json.dumps(item.mac_address), json.dumps(item.device_type.value))
            )
            stack.append("]}")
            for i in range(len(item.downlink_devices) - 1, -1, -1):
                stack.append(item.downlink_devices[i])
                if i > 0:
                    stack.append(",")
        return "".join(parts)

    def walk(self):
        """Yield this node and every node below it, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.downlink_devices))


def build_subtree(records: Dict[str, DeviceRecord], mac_address: str) -> DeviceNode:
    """
    Materialize the subtree rooted at mac_address from the adjacency mapping.

    Each returned node is a fresh object; downlinks are ordered by MAC
    address so repeated calls give identical output.
    """
    root = DeviceNode(mac_address=mac_address, device_type=records[mac_address].device_type)
    stack = [root]
    while stack:
        node = stack.pop()
        for child in sorted(records[node.mac_address].children):
            child_node = DeviceNode(mac_address=child, device_type=records[child].device_type)
            node.downlink_devices.append(child_node)
            stack.append(child_node)
    return root


class DeviceRegistry:
    """
    In-memory registry of a single network deployment tree.

    Any device type may act as uplink for any other type.
    Thread-safe via RLock.
    """

    def __init__(self):
        # Insertion order matters: the first key is the root
        self._devices: Dict[str, DeviceRecord] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def __contains__(self, mac_address: str) -> bool:
        with self._lock:
            return mac_address in self._devices

    def register_device(
        self,
        device_type: DeviceType,
        mac_address: str,
        uplink_mac_address: Optional[str] = None,
    ) -> None:
        """
        Register a device in the deployment.

        Args:
            device_type: Type of the networking device
            mac_address: MAC address of the device
            uplink_mac_address: MAC address of the uplink device. Only the
                first device may omit it.

        Raises:
            ValidationError: device_type or mac_address is missing
            DuplicateDeviceError: mac_address is already registered
            RootAlreadyExistsError: no uplink given but a root exists
            UplinkNotFoundError: uplink_mac_address is not registered
        """
        if device_type is None:
            raise ValidationError("Device type cannot be null", field="deviceType")
        if mac_address is None:
            raise ValidationError("MAC address cannot be null", field="macAddress")
        if not isinstance(device_type, DeviceType):
            try:
                device_type = DeviceType(device_type)
            except ValueError:
                raise ValidationError(
                    f"Unknown device type: '{device_type}'", field="deviceType"
                ) from None

        with self._lock:
            if mac_address in self._devices:
                logger.debug(f"Rejected duplicate device {mac_address}")
                raise DuplicateDeviceError(mac_address)

            if uplink_mac_address is None and self._devices:
                logger.debug(f"Rejected second root {mac_address}")
                raise RootAlreadyExistsError()

            if uplink_mac_address is not None:
                uplink = self._devices.get(uplink_mac_address)
                if uplink is None:
                    logger.debug(f"Rejected {mac_address}: unknown uplink {uplink_mac_address}")
                    raise UplinkNotFoundError(uplink_mac_address)
                self._devices[uplink_mac_address] = uplink.with_child(mac_address)

            self._devices[mac_address] = DeviceRecord(device_type=device_type)

        logger.info(
            f"Registered {device_type.value} {mac_address}"
            + (f" (uplink {uplink_mac_address})" if uplink_mac_address else " as root")
        )

    def find_all(self) -> List[DeviceDescriptor]:
        """
        Get all devices.

        Sorted by device type (gateway, switch, access point), then by
        MAC address.
        """
        with self._lock:
            descriptors = [
                DeviceDescriptor(mac_address=mac, device_type=record.device_type)
                for mac, record in self._devices.items()
            ]
        return sorted(descriptors, key=DeviceDescriptor.sort_key)

    def get(self, mac_address: str) -> DeviceDescriptor:
        """Get a single device by MAC address."""
        with self._lock:
            record = self._devices.get(mac_address)
        if record is None:
            raise DeviceNotFoundError(mac_address)
        return DeviceDescriptor(mac_address=mac_address, device_type=record.device_type)

    def get_device_tree(self) -> DeviceNode:
        """Get the whole deployment, starting from the root device."""
        with self._lock:
            if not self._devices:
                raise EmptyRegistryError()
            root = next(iter(self._devices))
            return build_subtree(self._devices, root)

    def get_device_subtree(self, mac_address: str) -> DeviceNode:
        """Get the subtree starting from the given device."""
        with self._lock:
            if mac_address not in self._devices:
                raise DeviceNotFoundError(mac_address, reason="does not exist")
            return build_subtree(self._devices, mac_address)

    def reset(self) -> None:
        """Remove every device."""
        with self._lock:
            count = len(self._devices)
            self._devices = {}
        logger.info(f"Registry reset ({count} devices removed)")


# Global registry instance
_registry: Optional[DeviceRegistry] = None


def get_device_registry() -> DeviceRegistry:
    """Get the global device registry instance."""
    global _registry
    if _registry is None:
        _registry = DeviceRegistry()
    return _registry


def reset_device_registry() -> None:
    """Drop the global device registry instance."""
    global _registry
    _registry = None
