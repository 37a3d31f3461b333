from __future__ import annotations

import pytest

from cvmnode.resolver import NodeResolver
from cvmnode.types import InstanceRecord
from tests.fakes import FakeDirectory, FakeMetadata


@pytest.fixture
def metadata() -> FakeMetadata:
    return FakeMetadata()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory(records=[
        InstanceRecord(
            instance_id="ins-xyz",
            private_addresses=("192.168.1.9",),
            public_addresses=("3.3.3.3",),
            zone="ap-shanghai-2",
            instance_type="S5.MEDIUM4",
        ),
        InstanceRecord(
            instance_id="ins-multi",
            private_addresses=("192.168.1.10", "192.168.1.11"),
            public_addresses=("4.4.4.4", "5.5.5.5"),
            zone="ap-shanghai-2",
        ),
    ])


@pytest.fixture
def resolver(metadata: FakeMetadata, directory: FakeDirectory) -> NodeResolver:
    return NodeResolver(metadata, directory)
