"""Engine client interface consumed by the container handle."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol, runtime_checkable

from shipyard.types import ContainerInspect, LogChunk, WaitResponse


class LogStream(Protocol):
    """An attached output stream; ``aclose()`` releases it early."""

    def __aiter__(self) -> LogStream: ...

    async def __anext__(self) -> LogChunk: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class EngineClient(Protocol):
    """Capabilities a container engine must expose.

    Implementations raise :class:`~shipyard.errors.EngineError` (or a
    subclass) for every failed request. One client is shared by any
    number of container handles, so implementations must be safe to use
    from concurrent tasks.
    """

    async def attach(
        self,
        name: str,
        *,
        stdout: bool,
        stderr: bool,
        stream: bool = True,
    ) -> LogStream:
        """Open the container's output stream.

        The request is made before this coroutine returns, so attach
        failures are raised here. Errors while reading are raised from
        the stream.
        """
        ...

    async def start(self, name: str) -> None: ...

    def wait_events(self, name: str) -> AsyncGenerator[WaitResponse, None]:
        """Subscribe to the container's exit.

        A non-zero exit may be raised as
        :class:`~shipyard.errors.ContainerWaitError` instead of yielded.
        """
        ...

    async def inspect(self, name: str) -> ContainerInspect: ...

    async def upload(self, name: str, path: str, archive: bytes) -> None:
        """Extract a tar ``archive`` into the container at ``path``."""
        ...

    async def remove(self, name: str, *, force: bool) -> None: ...
