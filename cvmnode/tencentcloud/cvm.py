"""CVM DescribeInstances client.

The API answers HTTP 200 for most failures and reports them in
``Response.Error``; both that payload and transport errors become
DirectoryQueryError. An empty ``InstanceSet`` is a successful answer.
"""

from __future__ import annotations

from typing import Any

from cvmnode.config import TencentCloud
from cvmnode.constants import CVM_SERVICE, DESCRIBE_INSTANCES
from cvmnode.exceptions import DirectoryQueryError
from cvmnode.infra.http import HttpClient, HttpError
from cvmnode.observability.logger import logger
from cvmnode.tencentcloud.auth import TC3Auth
from cvmnode.types import InstanceFilter, InstanceRecord


class CVMClient:
    """InstanceDirectory backed by the CVM API.

    Args:
        config: Validated connection settings.
        base_url: Overrides ``https://<endpoint>``; the signed host stays
            ``config.endpoint``.
        auth: Overrides the TC3 signer built from ``config``.
    """

    def __init__(
        self,
        config: TencentCloud,
        *,
        base_url: str | None = None,
        auth: TC3Auth | None = None,
    ) -> None:
        self._config = config
        self._http = HttpClient(
            base_url or f"https://{config.endpoint}",
            auth or TC3Auth(
                secret_id=config.secret_id,
                secret_key=config.secret_key,
                token=config.token,
                service=CVM_SERVICE,
                host=config.endpoint,
                action=DESCRIBE_INSTANCES,
                version=config.api_version,
                region=config.region,
            ),
            timeout=config.request_timeout,
        )
        self._log = logger.bind(component="cvm", region=config.region)

    async def describe(self, filter: InstanceFilter) -> list[InstanceRecord]:  # noqa: A002
        try:
            payload = await self._http.request("POST", "/", json={"Filters": [filter.to_api()]})
        except HttpError as e:
            self._log.warning("DescribeInstances transport failure: {err}", err=str(e))
            raise DirectoryQueryError("HttpError", str(e)) from e

        response = payload.get("Response") if isinstance(payload, dict) else None
        if not isinstance(response, dict):
            self._log.warning("DescribeInstances returned no Response object: {payload}", payload=str(payload)[:200])
            raise DirectoryQueryError("InvalidResponse", "response has no Response object")

        request_id = response.get("RequestId", "")
        if error := response.get("Error"):
            if not isinstance(error, dict):
                error = {"Message": str(error)}
            code = error.get("Code", "Unknown")
            message = error.get("Message", "")
            self._log.warning(
                "DescribeInstances {filter} failed: {code}: {message}",
                filter=f"{filter.name}={filter.value}", code=code, message=message,
            )
            raise DirectoryQueryError(code, message, request_id)

        instance_set = response.get("InstanceSet") or []
        if not isinstance(instance_set, list) or not all(isinstance(raw, dict) for raw in instance_set):
            raise DirectoryQueryError("InvalidResponse", "InstanceSet is not a list of objects", request_id)
        records = [InstanceRecord.from_api(raw) for raw in instance_set]
        self._log.debug(
            "DescribeInstances {filter} returned {n} instances",
            filter=f"{filter.name}={filter.value}", n=len(records),
        )
        return records

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> CVMClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
