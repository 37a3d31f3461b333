"""Single-instance lookups on top of an InstanceDirectory.

A failing describe call propagates unchanged; only a successful query
without a matching record becomes InstanceNotFoundError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cvmnode.exceptions import InstanceNotFoundError
from cvmnode.observability.logger import logger
from cvmnode.types import InstanceFilter, InstanceRecord

if TYPE_CHECKING:
    from cvmnode.protocols import InstanceDirectory

log = logger.bind(component="lookup")


async def find_by_private_address(directory: InstanceDirectory, address: str) -> InstanceRecord:
    query = InstanceFilter.by_private_address(address)
    records = await directory.describe(query)
    for record in records:
        if address in record.private_addresses:
            return record

    log.debug("No instance among {n} records has private address {address}", n=len(records), address=address)
    raise InstanceNotFoundError(query)


async def find_by_instance_id(directory: InstanceDirectory, instance_id: str) -> InstanceRecord:
    query = InstanceFilter.by_instance_id(instance_id)
    records = await directory.describe(query)
    for record in records:
        if record.instance_id == instance_id:
            return record

    log.debug("No instance among {n} records has id {id}", n=len(records), id=instance_id)
    raise InstanceNotFoundError(query)
