"""DI module wiring the resolver to the Tencent Cloud adapters.

Usage:
    >>> from injector import Injector
    >>> from cvmnode.module import TencentCloudModule
    >>>
    >>> module = TencentCloudModule(TencentCloud.from_env())
    >>> injector = Injector([module])
    >>> resolver = injector.get(NodeResolver)
    >>> await resolver.current_node_name("ignored")
    >>> await module.close()

Adapters are singletons of the injector, not of the process. The module
records each adapter as it is built, and ``close`` releases only those.
"""

from __future__ import annotations

from contextlib import AsyncExitStack

from injector import Binder, Module, provider, singleton

from .config import TencentCloud
from .resolver import NodeResolver
from .tencentcloud.cvm import CVMClient
from .tencentcloud.metadata import MetadataClient


class TencentCloudModule(Module):
    """Binds the configuration and provides adapters and resolver."""

    def __init__(self, config: TencentCloud) -> None:
        self._config = config
        self._stack = AsyncExitStack()

    def configure(self, binder: Binder) -> None:
        binder.bind(TencentCloud, to=self._config.with_env_defaults())

    @singleton
    @provider
    def provide_metadata(self, config: TencentCloud) -> MetadataClient:
        """Provide the metadata client; needs no credentials."""
        metadata = MetadataClient(config.metadata_url, timeout=config.request_timeout)
        self._stack.push_async_callback(metadata.close)
        return metadata

    @singleton
    @provider
    def provide_cvm(self, config: TencentCloud) -> CVMClient:
        """Provide the CVM client, validating credentials and region first."""
        cvm = CVMClient(config.validate())
        self._stack.push_async_callback(cvm.close)
        return cvm

    @singleton
    @provider
    def provide_resolver(self, metadata: MetadataClient, cvm: CVMClient) -> NodeResolver:
        return NodeResolver(metadata, cvm)

    async def close(self) -> None:
        """Close every adapter built so far, newest first.

        Each close runs even if another one raises.
        """
        await self._stack.aclose()


__all__ = [
    "TencentCloudModule",
]
