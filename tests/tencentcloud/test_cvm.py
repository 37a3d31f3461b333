from __future__ import annotations

import asyncio
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from cvmnode.config import TencentCloud
from cvmnode.exceptions import DirectoryQueryError
from cvmnode.protocols import InstanceDirectory
from cvmnode.tencentcloud.auth import TC3Auth
from cvmnode.tencentcloud.cvm import CVMClient
from cvmnode.types import InstanceFilter, InstanceRecord

pytestmark = [pytest.mark.unit]

CONFIG = TencentCloud(region="ap-shanghai", secret_id="AKIDEXAMPLE", secret_key="secret")

INSTANCES = [
    {
        "InstanceId": "ins-xyz",
        "InstanceType": "S5.MEDIUM4",
        "PrivateIpAddresses": ["192.168.1.9"],
        "PublicIpAddresses": ["3.3.3.3"],
        "Placement": {"Zone": "ap-shanghai-2"},
    },
    {
        "InstanceId": "ins-private",
        "PrivateIpAddresses": ["192.168.1.10"],
        "PublicIpAddresses": None,
        "Placement": {"Zone": "ap-shanghai-3"},
    },
]

FILTER_FIELDS = {"instance-id": "InstanceId", "private-ip-address": "PrivateIpAddresses"}


def _matches(instance: dict[str, Any], name: str, value: str) -> bool:
    field = instance.get(FILTER_FIELDS[name])
    return value in field if isinstance(field, list) else field == value


def make_app(seen: list[dict[str, Any]]) -> web.Application:
    app = web.Application()

    async def api(request: web.Request) -> web.Response:
        body = await request.json()
        seen.append({"headers": dict(request.headers), "body": body})
        if request.headers.get("X-TC-Action") != "DescribeInstances":
            return web.json_response({"Response": {
                "Error": {"Code": "InvalidAction", "Message": "unknown action"},
                "RequestId": "req-1",
            }})
        if not request.headers.get("Authorization", "").startswith(
            "TC3-HMAC-SHA256 Credential=AKIDEXAMPLE/"
        ):
            return web.json_response({"Response": {
                "Error": {"Code": "AuthFailure.SignatureFailure", "Message": "bad signature"},
                "RequestId": "req-2",
            }})
        (flt,) = body["Filters"]
        if flt["Values"] == ["throttle-me"]:
            return web.json_response({"Response": {
                "Error": {"Code": "RequestLimitExceeded", "Message": "slow down"},
                "RequestId": "req-3",
            }})
        if flt["Values"] == ["explode"]:
            return web.Response(status=502, text="bad gateway")
        if flt["Values"] == ["stall"]:
            await asyncio.sleep(1)
        if flt["Values"] == ["maintenance"]:
            return web.Response(text="<html>maintenance</html>", content_type="text/html")
        if flt["Values"] == ["bare-list"]:
            return web.json_response([{"InstanceId": "ins-xyz"}])
        if flt["Values"] == ["bad-set"]:
            return web.json_response({"Response": {"InstanceSet": ["ins-xyz"], "RequestId": "req-4"}})
        matched = [i for i in INSTANCES if _matches(i, flt["Name"], flt["Values"][0])]
        return web.json_response({"Response": {
            "TotalCount": len(matched),
            "InstanceSet": matched,
            "RequestId": "req-ok",
        }})

    app.router.add_post("/", api)
    return app


@pytest.fixture
def seen() -> list[dict[str, Any]]:
    return []


@pytest.fixture
async def server(seen: list[dict[str, Any]]):
    srv = TestServer(make_app(seen))
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
async def cvm(server: TestServer):
    async with CVMClient(CONFIG, base_url=f"http://{server.host}:{server.port}") as client:
        yield client


class TestDescribe:
    @pytest.mark.asyncio
    async def test_by_instance_id(self, cvm: CVMClient):
        records = await cvm.describe(InstanceFilter.by_instance_id("ins-xyz"))
        assert records == [InstanceRecord(
            instance_id="ins-xyz",
            private_addresses=("192.168.1.9",),
            public_addresses=("3.3.3.3",),
            zone="ap-shanghai-2",
            instance_type="S5.MEDIUM4",
        )]

    @pytest.mark.asyncio
    async def test_by_private_address(self, cvm: CVMClient):
        (record,) = await cvm.describe(InstanceFilter.by_private_address("192.168.1.10"))
        assert record.instance_id == "ins-private"
        assert record.public_addresses == ()

    @pytest.mark.asyncio
    async def test_no_match_is_empty(self, cvm: CVMClient):
        assert await cvm.describe(InstanceFilter.by_instance_id("ins-gone")) == []

    @pytest.mark.asyncio
    async def test_request_shape(self, cvm: CVMClient, seen: list[dict[str, Any]]):
        await cvm.describe(InstanceFilter.by_instance_id("ins-xyz"))
        (request,) = seen
        assert request["body"] == {"Filters": [{"Name": "instance-id", "Values": ["ins-xyz"]}]}
        assert request["headers"]["X-TC-Region"] == "ap-shanghai"
        assert request["headers"]["X-TC-Version"] == "2017-03-12"

    @pytest.mark.asyncio
    async def test_api_error_payload(self, cvm: CVMClient):
        with pytest.raises(DirectoryQueryError) as exc_info:
            await cvm.describe(InstanceFilter.by_instance_id("throttle-me"))
        assert exc_info.value.code == "RequestLimitExceeded"
        assert exc_info.value.request_id == "req-3"

    @pytest.mark.asyncio
    async def test_transport_error(self, cvm: CVMClient):
        with pytest.raises(DirectoryQueryError) as exc_info:
            await cvm.describe(InstanceFilter.by_instance_id("explode"))
        assert exc_info.value.code == "HttpError"
        assert "502" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_is_query_error(self, server: TestServer):
        config = TencentCloud(
            region="ap-shanghai", secret_id="AKIDEXAMPLE", secret_key="secret", request_timeout=0.3,
        )
        async with CVMClient(config, base_url=f"http://{server.host}:{server.port}") as cvm:
            with pytest.raises(DirectoryQueryError) as exc_info:
                await cvm.describe(InstanceFilter.by_instance_id("stall"))
        assert exc_info.value.code == "HttpError"
        assert "timed out" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_body_is_query_error(self, cvm: CVMClient):
        with pytest.raises(DirectoryQueryError) as exc_info:
            await cvm.describe(InstanceFilter.by_instance_id("maintenance"))
        assert exc_info.value.code == "HttpError"

    @pytest.mark.asyncio
    async def test_payload_without_response_object(self, cvm: CVMClient):
        with pytest.raises(DirectoryQueryError) as exc_info:
            await cvm.describe(InstanceFilter.by_instance_id("bare-list"))
        assert exc_info.value.code == "InvalidResponse"

    @pytest.mark.asyncio
    async def test_malformed_instance_set(self, cvm: CVMClient):
        with pytest.raises(DirectoryQueryError) as exc_info:
            await cvm.describe(InstanceFilter.by_instance_id("bad-set"))
        assert exc_info.value.code == "InvalidResponse"
        assert exc_info.value.request_id == "req-4"

    @pytest.mark.asyncio
    async def test_auth_override(self, server: TestServer):
        auth = TC3Auth(
            secret_id="OTHER",
            secret_key="secret",
            service="cvm",
            host="cvm.tencentcloudapi.com",
            action="DescribeInstances",
            version="2017-03-12",
            region="ap-shanghai",
        )
        async with CVMClient(CONFIG, base_url=f"http://{server.host}:{server.port}", auth=auth) as cvm:
            with pytest.raises(DirectoryQueryError) as exc_info:
                await cvm.describe(InstanceFilter.by_instance_id("ins-xyz"))
        assert exc_info.value.code == "AuthFailure.SignatureFailure"

    def test_is_instance_directory(self):
        assert isinstance(CVMClient(CONFIG), InstanceDirectory)
