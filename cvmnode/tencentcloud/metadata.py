"""Instance metadata client.

Reads the running instance's own identity from the local metadata service.
Every failed read surfaces as MetadataUnavailableError; nothing is retried
or cached.
"""

from __future__ import annotations

from typing import Any

from cvmnode.constants import METADATA_URL, MetadataPath
from cvmnode.exceptions import MetadataUnavailableError
from cvmnode.infra.http import HttpClient, HttpError
from cvmnode.observability.logger import logger


class MetadataClient:
    """MetadataSource backed by the metadata HTTP service.

    Usage:
        >>> async with MetadataClient() as metadata:
        ...     await metadata.private_ipv4()
        '10.0.0.5'
    """

    def __init__(self, base_url: str = METADATA_URL, *, timeout: float = 10) -> None:
        self._http = HttpClient(base_url, timeout=timeout)
        self._log = logger.bind(component="metadata")

    async def _read(self, path: MetadataPath) -> str:
        try:
            value = await self._http.request("GET", f"/{path}", format="text")
        except HttpError as e:
            self._log.warning("Metadata read of {path} failed: {err}", path=str(path), err=str(e))
            raise MetadataUnavailableError(str(path), str(e)) from e
        return value.strip()

    async def private_ipv4(self) -> str:
        return await self._read(MetadataPath.PRIVATE_IPV4)

    async def public_ipv4(self) -> str:
        return await self._read(MetadataPath.PUBLIC_IPV4)

    async def instance_id(self) -> str:
        return await self._read(MetadataPath.INSTANCE_ID)

    async def zone(self) -> str:
        return await self._read(MetadataPath.ZONE)

    async def region(self) -> str:
        return await self._read(MetadataPath.REGION)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> MetadataClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
