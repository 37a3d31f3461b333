"""Value types shared by the resolver and its collaborators.

All types are frozen snapshots, built per call and never mutated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from cvmnode.constants import AddressType, FilterName

_ZONE_INDEX = re.compile(r"-\d+$")


@dataclass(frozen=True, slots=True)
class NodeAddress:
    type: AddressType
    address: str

    @classmethod
    def internal(cls, address: str) -> NodeAddress:
        return cls(AddressType.INTERNAL, address)

    @classmethod
    def external(cls, address: str) -> NodeAddress:
        return cls(AddressType.EXTERNAL, address)


@dataclass(frozen=True, slots=True)
class InstanceRecord:
    """One element of a DescribeInstances ``InstanceSet``.

    Address tuples keep the order the API returned them in.
    """

    instance_id: str
    private_addresses: tuple[str, ...] = ()
    public_addresses: tuple[str, ...] = ()
    zone: str = ""
    instance_type: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> InstanceRecord:
        placement = raw.get("Placement") or {}
        return cls(
            instance_id=raw.get("InstanceId", ""),
            private_addresses=tuple(raw.get("PrivateIpAddresses") or ()),
            public_addresses=tuple(raw.get("PublicIpAddresses") or ()),
            zone=placement.get("Zone", ""),
            instance_type=raw.get("InstanceType", ""),
        )

    def addresses(self) -> list[NodeAddress]:
        """Internal addresses first, then external, each in source order."""
        return [
            *(NodeAddress.internal(ip) for ip in self.private_addresses),
            *(NodeAddress.external(ip) for ip in self.public_addresses),
        ]


@dataclass(frozen=True, slots=True)
class InstanceFilter:
    name: FilterName
    value: str

    @classmethod
    def by_private_address(cls, address: str) -> InstanceFilter:
        return cls(FilterName.PRIVATE_IP_ADDRESS, address)

    @classmethod
    def by_instance_id(cls, instance_id: str) -> InstanceFilter:
        return cls(FilterName.INSTANCE_ID, instance_id)

    def to_api(self) -> dict[str, Any]:
        return {"Name": str(self.name), "Values": [self.value]}


@dataclass(frozen=True, slots=True)
class Zone:
    failure_domain: str
    region: str

    @classmethod
    def from_zone_name(cls, zone: str) -> Zone:
        """Derive the region from a zone name: ``ap-guangzhou-3`` -> ``ap-guangzhou``."""
        return cls(failure_domain=zone, region=_ZONE_INDEX.sub("", zone))
