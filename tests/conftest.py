"""Shared test fixtures for shipyard."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

import pytest

from shipyard.config import get_settings
from shipyard.types import ContainerInspect, LogChunk, WaitResponse

# ---------------------------------------------------------------------------
# Shared helpers (plain classes, importable by test files)
# ---------------------------------------------------------------------------


@dataclass
class FakeEngine:
    """In-memory engine client that records every call in order.

    ``chunks`` is what attach streams; items that are exceptions are
    raised mid-stream. ``wait`` is what the wait stream produces: a
    WaitResponse is yielded, an exception is raised, None yields nothing.
    Setting one of the ``*_error`` attributes makes that call fail.
    """

    chunks: list[LogChunk | Exception] = field(default_factory=list)
    wait: WaitResponse | Exception | None = None
    inspect_result: ContainerInspect | None = None

    attach_error: Exception | None = None
    start_error: Exception | None = None
    inspect_error: Exception | None = None
    upload_error: Exception | None = None
    remove_error: Exception | None = None

    calls: list[tuple[str, Any]] = field(default_factory=list)
    stream_closed: bool = False

    async def attach(
        self, name: str, *, stdout: bool, stderr: bool, stream: bool = True
    ) -> FakeLogStream:
        self.calls.append(
            ("attach", {"name": name, "stdout": stdout, "stderr": stderr, "stream": stream})
        )
        if self.attach_error is not None:
            raise self.attach_error
        return FakeLogStream(self)

    async def start(self, name: str) -> None:
        self.calls.append(("start", name))
        if self.start_error is not None:
            raise self.start_error

    async def wait_events(self, name: str) -> AsyncGenerator[WaitResponse, None]:
        self.calls.append(("wait", name))
        if isinstance(self.wait, Exception):
            raise self.wait
        if self.wait is not None:
            yield self.wait

    async def inspect(self, name: str) -> ContainerInspect:
        self.calls.append(("inspect", name))
        if self.inspect_error is not None:
            raise self.inspect_error
        assert self.inspect_result is not None, "test did not configure inspect_result"
        return self.inspect_result

    async def upload(self, name: str, path: str, archive: bytes) -> None:
        self.calls.append(("upload", {"name": name, "path": path, "archive": archive}))
        if self.upload_error is not None:
            raise self.upload_error

    async def remove(self, name: str, *, force: bool) -> None:
        self.calls.append(("remove", {"name": name, "force": force}))
        if self.remove_error is not None:
            raise self.remove_error

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeLogStream:
    """Replays ``engine.chunks``; marks ``engine.stream_closed`` on close."""

    def __init__(self, engine: FakeEngine) -> None:
        self._engine = engine
        self._items = iter(engine.chunks)

    def __aiter__(self) -> FakeLogStream:
        return self

    async def __anext__(self) -> LogChunk:
        item = next(self._items, None)
        if item is None:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        self._engine.calls.append(("chunk", item.stream))
        return item

    async def aclose(self) -> None:
        self._engine.stream_closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
