"""Run orchestration: attach, start, collect output, resolve the exit code.

Steps run strictly in order:
  1. attach to the output stream (before start, so no output is lost)
  2. start the container, then call ``started()`` exactly once
  3. fold the output stream into stdout/stderr buffers until it closes
  4. take at most one wait event; if there is none, inspect instead
  5. convert the exit code into the native exit status

Any failure aborts the run; partially collected output is dropped.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import aclosing
from dataclasses import dataclass

from shipyard.engine.base import EngineClient, LogStream
from shipyard.errors import ContainerWaitError, EngineInvariantError
from shipyard.exit_status import exit_status_from_code
from shipyard.logger import logger
from shipyard.types import ContainerOutput


@dataclass(frozen=True)
class FromEvent:
    """Exit code carried by a wait event (normal response or wait error)."""

    code: int


@dataclass(frozen=True)
class FromInspect:
    """Exit code read from the container state after the wait stream came up empty."""

    code: int


ExitCodeSource = FromEvent | FromInspect


async def collect_output(stream: LogStream, name: str) -> tuple[bytes, bytes]:
    """Split an output stream into ``(stdout, stderr)`` by stream tag.

    Reads until the stream ends; closing it is left to the caller.
    """
    stdout = bytearray()
    stderr = bytearray()
    async for chunk in stream:
        if chunk.stream == "stdout":
            stdout += chunk.data
        elif chunk.stream == "stderr":
            stderr += chunk.data
        else:
            logger.debug(
                "Unhandled output chunk",
                container=name,
                stream=chunk.stream,
                size=len(chunk.data),
            )
    return bytes(stdout), bytes(stderr)


async def resolve_exit_code(client: EngineClient, name: str) -> ExitCodeSource:
    """Find the exit code of a container whose output stream has closed.

    A non-zero exit can arrive as a ContainerWaitError rather than a
    response; both count as the event. An empty wait stream means the
    exit was already settled, so the code comes from inspect. An empty
    stream after a dropped connection looks the same and is not told
    apart here.
    """
    events = client.wait_events(name)
    try:
        async with aclosing(events):
            event = await anext(events, None)
    except ContainerWaitError as exc:
        return FromEvent(exc.code)
    if event is not None:
        return FromEvent(event.status_code)

    logger.debug("No wait event, inspecting container", container=name)
    inspected = await client.inspect(name)
    if inspected.state is None:
        raise EngineInvariantError(f"engine reported container {name!r} without a state")
    if inspected.state.exit_code is None:
        raise EngineInvariantError(
            f"engine reported finished container {name!r} without an exit code"
        )
    return FromInspect(inspected.state.exit_code)


async def run_container(
    client: EngineClient,
    name: str,
    *,
    attach_stdout: bool,
    attach_stderr: bool,
    started: Callable[[], None],
) -> ContainerOutput:
    stream = await client.attach(name, stdout=attach_stdout, stderr=attach_stderr, stream=True)
    async with aclosing(stream):
        logger.debug("Starting container", container=name)
        await client.start(name)
        started()
        stdout, stderr = await collect_output(stream, name)

    logger.debug("Waiting for container to exit", container=name)
    source = await resolve_exit_code(client, name)
    logger.debug(
        "Container exited",
        container=name,
        code=source.code,
        via=type(source).__name__,
    )

    return ContainerOutput(
        status=exit_status_from_code(source.code),
        stdout=stdout,
        stderr=stderr,
    )
