"""cvmnode - resolve cluster node identity on Tencent Cloud CVM.

Example:

    from cvmnode import TencentCloud
    from cvmnode.tencentcloud import connect

    async with connect(TencentCloud.from_env()) as resolver:
        name = await resolver.current_node_name("ignored")
        addresses = await resolver.node_addresses(name)
        pid = await resolver.instance_id(name)
"""

from cvmnode.config import TencentCloud, load_config, resolve_cloud
from cvmnode.constants import INSTANCE_EXISTS_POLICY, PROVIDER_NAME, AddressType
from cvmnode.exceptions import (
    ConfigurationError,
    CVMNodeError,
    DirectoryQueryError,
    InstanceNotFoundError,
    MetadataUnavailableError,
    OperationNotImplementedError,
)
from cvmnode.lookup import find_by_instance_id, find_by_private_address
from cvmnode.observability.logger import logger
from cvmnode.protocols import InstanceDirectory, MetadataSource
from cvmnode.provider_id import ProviderID, decode_provider_id, encode_provider_id
from cvmnode.resolver import NodeResolver
from cvmnode.types import InstanceFilter, InstanceRecord, NodeAddress, Zone

__version__ = "0.1.0"

__all__ = [
    # Resolver
    "NodeResolver",
    "MetadataSource",
    "InstanceDirectory",
    "find_by_instance_id",
    "find_by_private_address",
    # Provider ids
    "ProviderID",
    "decode_provider_id",
    "encode_provider_id",
    "PROVIDER_NAME",
    "INSTANCE_EXISTS_POLICY",
    # Types
    "AddressType",
    "NodeAddress",
    "InstanceRecord",
    "InstanceFilter",
    "Zone",
    # Config
    "TencentCloud",
    "load_config",
    "resolve_cloud",
    # Errors
    "CVMNodeError",
    "ConfigurationError",
    "MetadataUnavailableError",
    "DirectoryQueryError",
    "InstanceNotFoundError",
    "OperationNotImplementedError",
    # Logging
    "logger",
]
