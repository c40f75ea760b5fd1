"""Docker Engine API client over aiohttp.

Speaks plain HTTP to the daemon, over its unix socket by default or a
TCP endpoint when ``engine.base_url`` is configured. One
``aiohttp.ClientSession`` is created lazily and shared by every
container handle that uses this client.
"""

from __future__ import annotations

import asyncio
import json
import struct
from collections.abc import AsyncGenerator
from typing import Any

import aiohttp

from shipyard.config import EngineConfig, Settings, get_settings
from shipyard.engine.base import LogStream
from shipyard.errors import (
    ContainerConflictError,
    ContainerNotFoundError,
    ContainerWaitError,
    EngineError,
)
from shipyard.logger import logger
from shipyard.types import ContainerInspect, LogChunk, LogStreamName, WaitResponse

# ---------------------------------------------------------------------------
# Stream framing
# ---------------------------------------------------------------------------

_RAW_STREAM = "application/vnd.docker.raw-stream"
_FRAME_HEADER = struct.Struct(">B3xI")
_STREAM_TYPES: dict[int, LogStreamName] = {0: "stdin", 1: "stdout", 2: "stderr"}


def decode_frame_header(header: bytes) -> tuple[LogStreamName, int]:
    """Decode an 8-byte multiplexed stream header into ``(stream, size)``."""
    if len(header) != _FRAME_HEADER.size:
        raise EngineError(f"malformed stream frame header: {header!r}")
    stream_type, size = _FRAME_HEADER.unpack(header)
    stream = _STREAM_TYPES.get(stream_type)
    if stream is None:
        raise EngineError(f"unknown stream type in frame header: {stream_type}")
    return stream, size


def _flag(value: bool) -> str:
    return "true" if value else "false"


_STATUS_ERRORS: dict[int, type[EngineError]] = {
    404: ContainerNotFoundError,
    409: ContainerConflictError,
}


# ---------------------------------------------------------------------------
# DockerEngine
# ---------------------------------------------------------------------------


class DockerEngine:
    """:class:`~shipyard.engine.EngineClient` backed by the Docker Engine API."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._session: aiohttp.ClientSession | None = None
        if self.config.base_url:
            self._base = f"{self.config.base_url}/{self.config.api_version}"
        else:
            # Host is ignored by the unix connector but required in the URL
            self._base = f"http://localhost/{self.config.api_version}"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DockerEngine:
        return cls((settings or get_settings()).engine)

    async def __aenter__(self) -> DockerEngine:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = None
            if not self.config.base_url:
                connector = aiohttp.UnixConnector(path=self.config.socket_path)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_s),
            )
        return self._session

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> aiohttp.ClientResponse:
        """Send a request and return the open response. Caller releases it."""
        try:
            resp = await self._get_session().request(
                method, f"{self._base}{path}", params=params, data=data, headers=headers
            )
        except aiohttp.ClientError as exc:
            raise EngineError(f"{method} {path} failed: {exc}") from exc

        if resp.status >= 400:
            try:
                body = await resp.text()
            except aiohttp.ClientError:
                body = ""
            finally:
                resp.release()
            raise _STATUS_ERRORS.get(resp.status, EngineError)(
                _error_message(body) or resp.reason or "engine request failed",
                status=resp.status,
            )
        return resp

    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return its decoded JSON body (None if empty)."""
        resp = await self._request(method, path, **kwargs)
        try:
            body = await resp.read()
        except aiohttp.ClientError as exc:
            raise EngineError(f"{method} {path} failed: {exc}") from exc
        finally:
            resp.release()
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError as exc:
            raise EngineError(f"{method} {path} returned invalid JSON") from exc

    # ------------------------------------------------------------------
    # EngineClient
    # ------------------------------------------------------------------

    async def attach(
        self,
        name: str,
        *,
        stdout: bool,
        stderr: bool,
        stream: bool = True,
    ) -> LogStream:
        resp = await self._request(
            "POST",
            f"/containers/{name}/attach",
            params={"stdout": _flag(stdout), "stderr": _flag(stderr), "stream": _flag(stream)},
        )
        return _LogStream(resp, multiplexed=resp.content_type != _RAW_STREAM)

    async def start(self, name: str) -> None:
        # 304 (already started) is not an error
        await self._call("POST", f"/containers/{name}/start")

    async def wait_events(self, name: str) -> AsyncGenerator[WaitResponse, None]:
        body = await self._call("POST", f"/containers/{name}/wait")
        if not isinstance(body, dict) or "StatusCode" not in body:
            # Nothing to report; the caller falls back to inspect
            return
        code = int(body["StatusCode"])
        error = (body.get("Error") or {}).get("Message") or None
        if code != 0 or error:
            raise ContainerWaitError(code, error)
        yield WaitResponse(status_code=code, error=error)

    async def inspect(self, name: str) -> ContainerInspect:
        body = await self._call("GET", f"/containers/{name}/json")
        if not isinstance(body, dict):
            raise EngineError(f"unexpected inspect response for container {name!r}")
        return ContainerInspect.from_dict(body)

    async def upload(self, name: str, path: str, archive: bytes) -> None:
        await self._call(
            "PUT",
            f"/containers/{name}/archive",
            params={"path": path},
            data=archive,
            headers={"Content-Type": "application/x-tar"},
        )

    async def remove(self, name: str, *, force: bool) -> None:
        await self._call("DELETE", f"/containers/{name}", params={"force": _flag(force)})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error_message(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError:
        return body.strip()
    if isinstance(data, dict):
        return str(data.get("message", "")).strip()
    return body.strip()


def _is_frame_header(header: bytes) -> bool:
    return (
        len(header) == _FRAME_HEADER.size
        and header[0] in _STREAM_TYPES
        and header[1:4] == b"\x00\x00\x00"
    )


async def _read_header(resp: aiohttp.ClientResponse) -> bytes:
    """Read the next 8 bytes, or fewer if the stream ends first."""
    try:
        return await resp.content.readexactly(_FRAME_HEADER.size)
    except asyncio.IncompleteReadError as exc:
        return exc.partial


class _LogStream:
    """Output frames from an attach response, released on close or exhaustion."""

    def __init__(self, resp: aiohttp.ClientResponse, *, multiplexed: bool) -> None:
        self._resp = resp
        self._frames = _read_log_stream(resp, multiplexed=multiplexed)

    def __aiter__(self) -> _LogStream:
        return self

    async def __anext__(self) -> LogChunk:
        return await self._frames.__anext__()

    async def aclose(self) -> None:
        try:
            await self._frames.aclose()
        finally:
            self._resp.release()


async def _read_log_stream(
    resp: aiohttp.ClientResponse, *, multiplexed: bool
) -> AsyncGenerator[LogChunk, None]:
    """Yield output frames until the engine closes the stream.

    Daemons before API 1.42 label multiplexed output as a raw stream, so
    unless the response says it is multiplexed the first 8 bytes decide:
    a valid frame header means frames, anything else is TTY console data.
    """
    try:
        header = await _read_header(resp)
        if not header:
            return

        if not multiplexed and not _is_frame_header(header):
            yield LogChunk(stream="console", data=header)
            async for data in resp.content.iter_any():
                yield LogChunk(stream="console", data=data)
            return

        while header:
            if len(header) < _FRAME_HEADER.size:
                raise EngineError("output stream ended inside a frame header")
            stream, size = decode_frame_header(header)
            try:
                data = await resp.content.readexactly(size)
            except asyncio.IncompleteReadError as exc:
                raise EngineError(
                    f"output stream ended after {len(exc.partial)} of {size} frame bytes"
                ) from exc
            yield LogChunk(stream=stream, data=data)
            header = await _read_header(resp)
    except aiohttp.ClientError as exc:
        logger.debug("Output stream failed", error=str(exc))
        raise EngineError(f"output stream failed: {exc}") from exc
    finally:
        resp.release()
