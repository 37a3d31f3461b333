"""Node resolver.

Answers the orchestrator's per-node questions (addresses, ids, type,
existence) from two read-only collaborators: the instance's own metadata
and the remote instance directory.

Every query first checks whether the node is the calling instance, by
comparing the instance's private address with the node name. If so the
answer comes from local metadata. Otherwise only lookups by provider ID
reach the directory; name-based lookups of other nodes are unsupported
and return an empty result rather than an error.

Nothing is cached: each call performs its reads when awaited, so
concurrent calls for different nodes are independent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cvmnode.constants import INSTANCE_EXISTS_POLICY, PROVIDER_NAME
from cvmnode.exceptions import MetadataUnavailableError, OperationNotImplementedError
from cvmnode.lookup import find_by_instance_id
from cvmnode.observability.logger import logger
from cvmnode.provider_id import decode_provider_id, encode_provider_id
from cvmnode.types import NodeAddress, Zone

if TYPE_CHECKING:
    from cvmnode.protocols import InstanceDirectory, MetadataSource

log = logger.bind(component="resolver")


class NodeResolver:
    def __init__(self, metadata: MetadataSource, directory: InstanceDirectory) -> None:
        self._metadata = metadata
        self._directory = directory

    async def _is_self(self, node_name: str) -> bool:
        return await self._metadata.private_ipv4() == node_name

    # ─── Addresses ───────────────────────────────────────────────────

    async def node_addresses(self, node_name: str) -> list[NodeAddress]:
        if not await self._is_self(node_name):
            log.debug("{node} is not this instance; lookup by name is unsupported", node=node_name)
            return []

        addresses = [NodeAddress.internal(node_name)]
        try:
            public_ip = await self._metadata.public_ipv4()
        except MetadataUnavailableError as e:
            log.debug("No public address for {node}: {reason}", node=node_name, reason=e.reason)
            return addresses

        if public_ip:
            addresses.append(NodeAddress.external(public_ip))
        return addresses

    async def node_addresses_by_provider_id(self, provider_id: str) -> list[NodeAddress]:
        """Addresses of any instance, looked up remotely by its provider ID.

        Raises InstanceNotFoundError when the id is well formed but unknown.
        """
        pid = decode_provider_id(provider_id)
        if pid is None:
            log.debug("Unrecognized provider id {pid}", pid=provider_id)
            return []

        record = await find_by_instance_id(self._directory, pid.instance_id)
        return record.addresses()

    # ─── Identifiers ─────────────────────────────────────────────────

    async def external_id(self, node_name: str) -> str:
        if not await self._is_self(node_name):
            return ""
        return await self._metadata.instance_id()

    async def instance_id(self, node_name: str) -> str:
        """Provider-side id of the node, as ``/<zone>/<instance-id>``."""
        if not await self._is_self(node_name):
            return ""
        instance_id = await self._metadata.instance_id()
        zone = await self._metadata.zone()
        return encode_provider_id(zone, instance_id)

    async def instance_type(self, node_name: str) -> str:
        return PROVIDER_NAME

    async def instance_type_by_provider_id(self, provider_id: str) -> str:
        return PROVIDER_NAME

    async def current_node_name(self, hostname: str) -> str:
        # Node names are private addresses; the hostname is ignored.
        return await self._metadata.private_ipv4()

    async def instance_exists_by_provider_id(self, provider_id: str) -> bool:
        return INSTANCE_EXISTS_POLICY

    async def add_ssh_key_to_all_instances(self, user: str, key_data: bytes) -> None:
        raise OperationNotImplementedError("add_ssh_key_to_all_instances")

    # ─── Zones ───────────────────────────────────────────────────────

    async def current_zone(self) -> Zone:
        zone = await self._metadata.zone()
        region = await self._metadata.region()
        return Zone(failure_domain=zone, region=region)

    async def zone_by_provider_id(self, provider_id: str) -> Zone | None:
        pid = decode_provider_id(provider_id)
        if pid is None:
            return None

        record = await find_by_instance_id(self._directory, pid.instance_id)
        return Zone.from_zone_name(record.zone or pid.zone)
