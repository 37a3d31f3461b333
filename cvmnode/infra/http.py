from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass
from typing import Any, Literal, Protocol, overload, runtime_checkable

import aiohttp

from cvmnode.observability.logger import logger

# ─── Errors ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class HttpError(Exception):
    status: int
    body: str

    def __str__(self) -> str:
        if self.status == 0:
            return f"HTTP transport error: {self.body}"
        return f"HTTP {self.status}: {self.body}"


# ─── Auth ────────────────────────────────────────────────────────────


@runtime_checkable
class Auth(Protocol):
    """Produces per-request headers; may sign method, path and body."""

    async def headers(self, method: str, path: str, body: bytes) -> dict[str, str]: ...


# ─── Client ──────────────────────────────────────────────────────────


class HttpClient:
    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = default_headers or {}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _build_headers(self, method: str, path: str, body: bytes) -> dict[str, str]:
        headers = dict(self._default_headers)
        if body:
            headers["Content-Type"] = "application/json; charset=utf-8"
        if self._auth:
            headers.update(await self._auth.headers(method, path, body))
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        format: Literal["json", "text"] = "json",
    ) -> Any:
        session = await self._ensure_session()
        body = jsonlib.dumps(json, separators=(",", ":")).encode() if json is not None else b""
        headers = await self._build_headers(method, path, body)
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method, self._url(path), headers=headers, data=body or None
            ) as resp:
                return await self._parse(resp, format)
        except aiohttp.ClientResponseError as e:
            raise HttpError(status=e.status, body=e.message) from e
        except aiohttp.ClientError as e:
            raise HttpError(status=0, body=str(e) or type(e).__name__) from e
        except TimeoutError as e:
            # Session timeout; a caller deadline arrives here as CancelledError instead.
            raise HttpError(status=0, body="request timed out") from e

    async def _parse(self, resp: aiohttp.ClientResponse, format: Literal["json", "text"]) -> Any:
        if resp.status >= 400:
            body = await resp.text()
            self._log.warning(
                "HTTP {status} from {url}: {body}",
                status=resp.status, url=str(resp.url), body=body[:500],
            )
            raise HttpError(status=resp.status, body=body)
        match format:
            case "json":
                body = await resp.read()
                try:
                    return jsonlib.loads(body) if body else None
                except ValueError as e:
                    raise HttpError(status=resp.status, body=f"invalid JSON body: {body[:200]!r}") from e
            case "text":
                return await resp.text()

    @overload
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        format: Literal["json"] = "json",
    ) -> Any: ...

    @overload
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        format: Literal["text"],
    ) -> str: ...

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        format: Literal["json", "text"] = "json",
    ) -> Any:
        return await self._send(method, path, json=json, format=format)

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
