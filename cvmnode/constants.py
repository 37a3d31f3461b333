"""Centralized constants and enums for cvmnode.

Provider name, metadata paths and API identifiers used across the
resolver and the Tencent Cloud adapters.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

# =============================================================================
# Provider
# =============================================================================

PROVIDER_NAME: Final = "tencentcloud"
PROVIDER_ID_SCHEME: Final = f"{PROVIDER_NAME}://"

INSTANCE_EXISTS_POLICY: Final = True
"""Answer of every existence probe.

Instances that disappear are detected and removed through other signals;
the existence probe never reports an instance as gone.
"""


# =============================================================================
# Node Addresses
# =============================================================================


class AddressType(StrEnum):
    """Kinds of node address, using the orchestrator's wire values."""

    INTERNAL = "InternalIP"
    EXTERNAL = "ExternalIP"


# =============================================================================
# Instance Metadata Paths
# =============================================================================


class MetadataPath(StrEnum):
    """Paths under the metadata service's ``latest/meta-data`` root."""

    PRIVATE_IPV4 = "local-ipv4"
    PUBLIC_IPV4 = "public-ipv4"
    INSTANCE_ID = "instance-id"
    ZONE = "placement/zone"
    REGION = "placement/region"


# =============================================================================
# CVM API
# =============================================================================


class FilterName(StrEnum):
    """DescribeInstances filter names."""

    PRIVATE_IP_ADDRESS = "private-ip-address"
    INSTANCE_ID = "instance-id"


CVM_SERVICE: Final = "cvm"
CVM_API_VERSION: Final = "2017-03-12"
CVM_ENDPOINT: Final = "cvm.tencentcloudapi.com"
DESCRIBE_INSTANCES: Final = "DescribeInstances"
METADATA_URL: Final = "http://metadata.tencentyun.com/latest/meta-data"
