"""Tencent Cloud adapters for the node resolver.

Environment Variables:
    TENCENTCLOUD_SECRET_ID: API secret id (required for directory lookups)
    TENCENTCLOUD_SECRET_KEY: API secret key (required for directory lookups)
    TENCENTCLOUD_SESSION_TOKEN: Session token for temporary credentials (optional)
    TENCENTCLOUD_REGION: Region of the cluster (required for directory lookups)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from cvmnode.config import TencentCloud
from cvmnode.resolver import NodeResolver

from .auth import TC3Auth
from .cvm import CVMClient
from .metadata import MetadataClient


@asynccontextmanager
async def connect(config: TencentCloud) -> AsyncIterator[NodeResolver]:
    """Resolver over freshly built adapters, closed on exit.

    Example:
        async with connect(TencentCloud.from_env()) as resolver:
            await resolver.node_addresses("10.0.0.5")
    """
    config = config.with_env_defaults().validate()
    async with (
        MetadataClient(config.metadata_url, timeout=config.request_timeout) as metadata,
        CVMClient(config) as cvm,
    ):
        yield NodeResolver(metadata, cvm)


__all__ = [
    "CVMClient",
    "MetadataClient",
    "TC3Auth",
    "connect",
]
