"""Exception taxonomy.

Engine errors come from the client facade and are passed through the
container handle untouched. Invariant errors mean the engine answered
with something its API contract rules out; they are never defaulted
away.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shipyard.types import ContainerOutput


class ShipyardError(Exception):
    """Base class for every error raised by shipyard."""


class EngineError(ShipyardError):
    """A request to the container engine failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class ContainerNotFoundError(EngineError):
    """The engine has no container with the requested identity."""


class ContainerConflictError(EngineError):
    """The engine refused the request because of the container's current state."""


class ContainerWaitError(EngineError):
    """A wait event reporting that the container exited unsuccessfully.

    Some engine clients surface a non-zero exit as an error instead of a
    normal wait response. ``code`` is the container's exit code either way.
    """

    def __init__(self, code: int, message: str | None = None) -> None:
        super().__init__(message or f"container exited with code {code}")
        self.code = code


class EngineInvariantError(ShipyardError):
    """The engine reported a container shape that its API contract forbids."""


class ContainerExitError(ShipyardError):
    """Raised by :meth:`ContainerOutput.check` for an unsuccessful exit."""

    def __init__(self, output: ContainerOutput) -> None:
        super().__init__(f"container exited with status {output.status}")
        self.output = output
