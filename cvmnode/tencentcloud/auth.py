"""TC3-HMAC-SHA256 request signing for the Tencent Cloud API v3.

Only JSON POST requests to ``/`` are signed, which is all DescribeInstances
needs. The signature covers the ``content-type`` and ``host`` headers and
the SHA-256 of the request body.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from collections.abc import Callable
from datetime import UTC, datetime

ALGORITHM = "TC3-HMAC-SHA256"
CONTENT_TYPE = "application/json; charset=utf-8"
SIGNED_HEADERS = "content-type;host"


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode(), hashlib.sha256).digest()


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def sign(
    *,
    secret_id: str,
    secret_key: str,
    service: str,
    host: str,
    method: str,
    path: str,
    body: bytes,
    timestamp: int,
) -> str:
    """Return the ``Authorization`` header value for one request."""
    date = datetime.fromtimestamp(timestamp, UTC).strftime("%Y-%m-%d")
    canonical_request = "\n".join([
        method,
        path,
        "",
        f"content-type:{CONTENT_TYPE}\nhost:{host}\n",
        SIGNED_HEADERS,
        _sha256_hex(body),
    ])
    scope = f"{date}/{service}/tc3_request"
    string_to_sign = "\n".join([
        ALGORITHM,
        str(timestamp),
        scope,
        _sha256_hex(canonical_request.encode()),
    ])

    secret_date = _hmac(f"TC3{secret_key}".encode(), date)
    secret_service = _hmac(secret_date, service)
    secret_signing = _hmac(secret_service, "tc3_request")
    signature = hmac.new(secret_signing, string_to_sign.encode(), hashlib.sha256).hexdigest()

    return (
        f"{ALGORITHM} Credential={secret_id}/{scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )


class TC3Auth:
    """Signs every request as one API action.

    Args:
        action: API action, e.g. ``DescribeInstances``.
        clock: Returns the current unix time; injectable for tests.
    """

    def __init__(
        self,
        *,
        secret_id: str,
        secret_key: str,
        service: str,
        host: str,
        action: str,
        version: str,
        region: str,
        token: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret_id = secret_id
        self._secret_key = secret_key
        self._service = service
        self._host = host
        self._action = action
        self._version = version
        self._region = region
        self._token = token
        self._clock = clock

    async def headers(self, method: str, path: str, body: bytes) -> dict[str, str]:
        timestamp = int(self._clock())
        headers = {
            "Authorization": sign(
                secret_id=self._secret_id,
                secret_key=self._secret_key,
                service=self._service,
                host=self._host,
                method=method,
                path=path,
                body=body,
                timestamp=timestamp,
            ),
            "Content-Type": CONTENT_TYPE,
            "Host": self._host,
            "X-TC-Action": self._action,
            "X-TC-Timestamp": str(timestamp),
            "X-TC-Version": self._version,
            "X-TC-Region": self._region,
        }
        if self._token:
            headers["X-TC-Token"] = self._token
        return headers
