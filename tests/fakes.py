"""Hand-written collaborators for resolver tests."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from cvmnode.exceptions import DirectoryQueryError, MetadataUnavailableError
from cvmnode.types import InstanceFilter, InstanceRecord

NODE_IP = "10.0.0.5"
PUBLIC_IP = "1.2.3.4"
INSTANCE_ID = "ins-abc"
ZONE = "ap-guangzhou-1"
REGION = "ap-guangzhou"


@dataclass
class FakeMetadata:
    """MetadataSource with fixed answers; ``None`` makes a read fail."""

    private: str | None = NODE_IP
    public: str | None = PUBLIC_IP
    instance: str | None = INSTANCE_ID
    placement_zone: str | None = ZONE
    placement_region: str | None = REGION
    delay: float = 0
    calls: list[str] = field(default_factory=list)

    async def _read(self, path: str, value: str | None) -> str:
        self.calls.append(path)
        if self.delay:
            await asyncio.sleep(self.delay)
        if value is None:
            raise MetadataUnavailableError(path, "HTTP 404: Not Found")
        return value

    async def private_ipv4(self) -> str:
        return await self._read("local-ipv4", self.private)

    async def public_ipv4(self) -> str:
        return await self._read("public-ipv4", self.public)

    async def instance_id(self) -> str:
        return await self._read("instance-id", self.instance)

    async def zone(self) -> str:
        return await self._read("placement/zone", self.placement_zone)

    async def region(self) -> str:
        return await self._read("placement/region", self.placement_region)


@dataclass
class FakeDirectory:
    """InstanceDirectory that applies filters to a fixed record set."""

    records: Sequence[InstanceRecord] = ()
    error: DirectoryQueryError | None = None
    unfiltered: bool = False
    queries: list[InstanceFilter] = field(default_factory=list)

    async def describe(self, filter: InstanceFilter) -> list[InstanceRecord]:  # noqa: A002
        self.queries.append(filter)
        if self.error is not None:
            raise self.error
        if self.unfiltered:
            return list(self.records)
        match filter.name:
            case "instance-id":
                return [r for r in self.records if r.instance_id == filter.value]
            case "private-ip-address":
                return [r for r in self.records if filter.value in r.private_addresses]
            case _:
                return []


