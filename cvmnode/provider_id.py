"""Provider identifier codec.

The orchestrator names nodes with ``tencentcloud://<zone>/<instance-id>``.
The value reported back by the node itself is ``/<zone>/<instance-id>``
without the scheme, and the orchestrator prefixes it to form
``tencentcloud:///<zone>/<instance-id>``; both spellings decode to the
same identifier.

Decoding never raises: anything that is not scheme, zone and instance id
yields ``None`` and callers treat it as unsupported.
"""

from __future__ import annotations

from dataclasses import dataclass

from cvmnode.constants import PROVIDER_ID_SCHEME, PROVIDER_NAME


@dataclass(frozen=True, slots=True)
class ProviderID:
    zone: str
    instance_id: str
    scheme: str = PROVIDER_NAME

    def __str__(self) -> str:
        return f"{self.scheme}://{encode_provider_id(self.zone, self.instance_id)}"


def decode_provider_id(provider_id: str) -> ProviderID | None:
    if not provider_id.startswith(PROVIDER_ID_SCHEME):
        return None

    path = provider_id.removeprefix(PROVIDER_ID_SCHEME).removeprefix("/")
    match path.split("/"):
        case [zone, instance_id] if zone and instance_id:
            return ProviderID(zone=zone, instance_id=instance_id)
        case _:
            return None


def encode_provider_id(zone: str, instance_id: str) -> str:
    # No scheme: the orchestrator adds it when it stores the node's provider ID.
    return f"/{zone}/{instance_id}"
