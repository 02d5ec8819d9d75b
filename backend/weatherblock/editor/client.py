from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx

from weatherblock.domain.snapshot import WeatherSnapshot, decode_endpoint_body
from weatherblock.errors import TransportError


class EditorApiClient:
    """Async client the editor uses to reach the block's data endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        namespace: str = "weatherblock/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.namespace = namespace.strip("/")
        self.timeout = timeout
        self.transport = transport

    def path_for(self, location: str) -> str:
        return f"/{self.namespace}/weatherdata/{quote(location, safe='')}"

    async def fetch(self, location: str) -> WeatherSnapshot:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                resp = await client.get(self.path_for(location))
                resp.raise_for_status()
            except httpx.HTTPError as exc:
                raise TransportError(f"Weather endpoint request failed: {exc}", location=location) from exc
        return decode_endpoint_body(resp.text, location=location)
