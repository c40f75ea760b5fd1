"""Data models for shipyard.

Engine-facing shapes mirror what the container engine reports; only the
fields the container handle reads are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shipyard.errors import ContainerExitError
from shipyard.exit_status import ExitStatus

LogStreamName = Literal["stdin", "stdout", "stderr", "console"]


@dataclass(frozen=True)
class LogChunk:
    """One frame of an attached container's output."""

    stream: LogStreamName
    data: bytes


@dataclass(frozen=True)
class WaitResponse:
    status_code: int
    error: str | None = None


@dataclass(frozen=True)
class ContainerState:
    status: str | None = None  # "created" | "running" | "exited" | ...
    running: bool | None = None
    exit_code: int | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> ContainerState:
        return cls(
            status=raw.get("Status"),
            running=raw.get("Running"),
            exit_code=raw.get("ExitCode"),
        )


@dataclass(frozen=True)
class ContainerInspect:
    id: str | None = None
    name: str | None = None
    state: ContainerState | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> ContainerInspect:
        state = raw.get("State")
        return cls(
            id=raw.get("Id"),
            name=raw.get("Name"),
            state=ContainerState.from_dict(state) if state is not None else None,
        )


@dataclass(frozen=True)
class ContainerOutput:
    """Everything a finished container produced."""

    status: ExitStatus
    stdout: bytes
    stderr: bytes

    def check(self) -> ContainerOutput:
        """Return self, or raise ContainerExitError if the container failed."""
        if not self.status.success:
            raise ContainerExitError(self)
        return self
