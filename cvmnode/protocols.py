"""Collaborator protocols consumed by the node resolver.

Both collaborators are read-only. Every method is a coroutine so that
cancelling the awaiting task aborts the in-flight read.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cvmnode.types import InstanceFilter, InstanceRecord

__all__ = [
    "MetadataSource",
    "InstanceDirectory",
]


@runtime_checkable
class MetadataSource(Protocol):
    """What the running instance can learn about itself.

    Each method raises MetadataUnavailableError when the read fails.
    """

    async def private_ipv4(self) -> str: ...
    async def public_ipv4(self) -> str: ...
    async def instance_id(self) -> str: ...
    async def zone(self) -> str: ...
    async def region(self) -> str: ...


@runtime_checkable
class InstanceDirectory(Protocol):
    """Remote, filterable instance listing.

    Raises DirectoryQueryError when the query itself fails; an empty
    sequence means the query succeeded and nothing matched.
    """

    async def describe(self, filter: InstanceFilter) -> Sequence[InstanceRecord]: ...  # noqa: A002
