from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .. import config
from ..schemas.topology import Topology

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call, reduced to one line of text."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _drop_none(**fields) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


class TopologyApi:
    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self._client = client or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            res = await self._client.request(method, f"{self.base_url}{path}", json=json)
        except httpx.HTTPError as exc:
            raise ApiError(str(exc) or exc.__class__.__name__) from exc

        if res.is_error:
            raise ApiError(res.text or f"HTTP {res.status_code}", res.status_code)
        if res.status_code == 204:
            return None
        try:
            return res.json()
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {method} {path}", res.status_code) from exc

    # ---- GET ----

    async def fetch_topology(self) -> Topology:
        body = await self.request("GET", "/topology")
        try:
            return Topology.model_validate(body)
        except ValidationError as exc:
            raise ApiError(f"Unexpected topology payload ({exc.error_count()} errors)") from exc

    # ---- Devices ----

    async def create_device(self, name: str, type: str, ip: Optional[str] = None, status: Optional[str] = None,
                            x: Optional[float] = None, y: Optional[float] = None) -> dict:
        payload = _drop_none(name=name, type=type, ip=ip, status=status, x=x, y=y)
        return await self.request("POST", "/devices", json=payload)

    async def patch_device_position(self, device_id: str, x: float, y: float) -> dict:
        return await self.request("PATCH", f"/devices/{device_id}/position", json={"x": x, "y": y})

    async def patch_device_status(self, device_id: str, status: str) -> dict:
        return await self.request("PATCH", f"/devices/{device_id}", json={"status": status})

    async def delete_device(self, device_id: str) -> None:
        await self.request("DELETE", f"/devices/{device_id}")

    # ---- Links ----

    async def create_link(self, from_id: str, to_id: str, status: Optional[str] = None, label: Optional[str] = None,
                          from_handle: Optional[str] = None, to_handle: Optional[str] = None) -> dict:
        payload = _drop_none(fromId=from_id, toId=to_id, status=status, label=label,
                             fromHandle=from_handle, toHandle=to_handle)
        return await self.request("POST", "/links", json=payload)

    async def patch_link_status(self, link_id: str, status: str) -> dict:
        return await self.request("PATCH", f"/links/{link_id}", json={"status": status})

    async def delete_link(self, link_id: str) -> None:
        await self.request("DELETE", f"/links/{link_id}")
