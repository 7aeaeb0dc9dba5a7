"""
HTTP client for the NetDeploy API.

Used by the CLI to talk to a running server.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp

from .config import API_PREFIX, DEFAULT_API_PORT, DEFAULT_CLIENT_TIMEOUT

logger = logging.getLogger(__name__)


class NetDeployClientError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, status: int, detail: str):
        super().__init__(f"{status}: {detail}")
        self.status = status
        self.detail = detail


@dataclass
class ClientConfig:
    """NetDeploy client configuration."""
    host: str = "localhost"
    port: int = DEFAULT_API_PORT
    timeout: float = DEFAULT_CLIENT_TIMEOUT

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def devices_url(self) -> str:
        return f"{self.base_url}{API_PREFIX}/devices"


class NetDeployClient:
    """
    Client for the device registry API.

    Usage:
        async with NetDeployClient() as client:
            await client.register_device("GATEWAY", "AA:AA:AA:AA:AA:AA")
            tree = await client.get_device_tree()
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "NetDeployClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _raise_for_status(self, resp: aiohttp.ClientResponse) -> None:
        if resp.status < 400:
            return
        try:
            problem = await resp.json(content_type=None)
            detail = problem.get("detail") or resp.reason
        except (aiohttp.ContentTypeError, ValueError, AttributeError):
            detail = await resp.text()
        raise NetDeployClientError(resp.status, detail)

    async def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            session = await self._get_session()
            async with session.get(f"{self.config.base_url}/health") as resp:
                return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Health check failed: {e}")
            return False

    async def register_device(
        self,
        device_type: str,
        mac_address: str,
        uplink_mac_address: Optional[str] = None,
    ) -> None:
        """Register a device; uplink_mac_address is omitted for the root."""
        payload = {"deviceType": device_type, "macAddress": mac_address}
        if uplink_mac_address is not None:
            payload["uplinkMacAddress"] = uplink_mac_address

        session = await self._get_session()
        async with session.post(self.config.devices_url, json=payload) as resp:
            await self._raise_for_status(resp)

    async def list_devices(self) -> List[Dict[str, Any]]:
        """List all devices in canonical order."""
        session = await self._get_session()
        async with session.get(self.config.devices_url) as resp:
            await self._raise_for_status(resp)
            return await resp.json()

    async def get_device(self, mac_address: str) -> Dict[str, Any]:
        """Get one device."""
        session = await self._get_session()
        async with session.get(f"{self.config.devices_url}/{mac_address}") as resp:
            await self._raise_for_status(resp)
            return await resp.json()

    async def get_device_tree(self, mac_address: Optional[str] = None) -> Dict[str, Any]:
        """Get the full tree, or the subtree below mac_address."""
        url = f"{self.config.devices_url}/tree"
        if mac_address is not None:
            url = f"{url}/{mac_address}"

        session = await self._get_session()
        async with session.get(url) as resp:
            await self._raise_for_status(resp)
            return await resp.json()
