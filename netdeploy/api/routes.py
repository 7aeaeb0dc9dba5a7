"""
API routes for NetDeploy.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..registry.devices import DeviceNode, DeviceType, get_device_registry
from ..validation import validate_mac_address

logger = logging.getLogger(__name__)

router = APIRouter()


# ============ Request/Response Models ============

class RegisterDeviceRequest(BaseModel):
    """Request to register a device."""
    model_config = ConfigDict(populate_by_name=True)

    device_type: DeviceType = Field(..., alias="deviceType", description="GATEWAY, SWITCH or ACCESS_POINT")
    mac_address: str = Field(..., alias="macAddress", description="MAC address of the device")
    uplink_mac_address: Optional[str] = Field(
        None,
        alias="uplinkMacAddress",
        description="MAC address of the uplink device; omit only for the root",
    )


class DeviceDescriptorResponse(BaseModel):
    """A device without its connections."""
    model_config = ConfigDict(populate_by_name=True)

    mac_address: str = Field(..., alias="macAddress")
    device_type: DeviceType = Field(..., alias="deviceType")


class DeviceNodeResponse(BaseModel):
    """A device and everything connected below it."""
    model_config = ConfigDict(populate_by_name=True)

    mac_address: str = Field(..., alias="macAddress")
    device_type: DeviceType = Field(..., alias="deviceType")
    downlink_devices: List["DeviceNodeResponse"] = Field(default_factory=list, alias="downlinkDevices")


DeviceNodeResponse.model_rebuild()


def tree_response(node: DeviceNode) -> Response:
    # Trees are serialized directly; DeviceNodeResponse only documents the shape
    return Response(content=node.to_json(), media_type="application/json")


# ============ Routes ============

@router.post("/devices", status_code=204)
async def register_device(request: RegisterDeviceRequest):
    """
    Register a device in the deployment.

    The first device becomes the root; every later device must name
    an existing uplink.
    """
    validate_mac_address(request.mac_address, field="macAddress")
    if request.uplink_mac_address is not None:
        validate_mac_address(request.uplink_mac_address, field="uplinkMacAddress")

    get_device_registry().register_device(
        request.device_type,
        request.mac_address,
        request.uplink_mac_address,
    )
    return Response(status_code=204)


@router.get("/devices", response_model=List[DeviceDescriptorResponse])
async def list_devices():
    """
    List all devices.

    Gateways first, then switches, then access points; MAC address
    breaks ties.
    """
    return [d.to_dict() for d in get_device_registry().find_all()]


# Tree routes are declared before /devices/{mac_address} so "tree" is not
# taken for an address.
@router.get("/devices/tree", response_class=JSONResponse, responses={200: {"model": DeviceNodeResponse}})
async def get_device_tree():
    """Get the full deployment tree, starting from the root device."""
    return tree_response(get_device_registry().get_device_tree())


@router.get("/devices/tree/{mac_address}", response_class=JSONResponse, responses={200: {"model": DeviceNodeResponse}})
async def get_device_subtree(mac_address: str):
    """Get the subtree below a specific device."""
    validate_mac_address(mac_address)
    return tree_response(get_device_registry().get_device_subtree(mac_address))


@router.get("/devices/{mac_address}", response_model=DeviceDescriptorResponse)
async def get_device(mac_address: str):
    """Get info about a specific device."""
    validate_mac_address(mac_address)
    return get_device_registry().get(mac_address).to_dict()
