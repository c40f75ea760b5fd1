"""shipyard: run one engine-managed container and capture its output."""

from shipyard.container import Container
from shipyard.engine import DockerEngine, EngineClient
from shipyard.errors import (
    ContainerConflictError,
    ContainerExitError,
    ContainerNotFoundError,
    ContainerWaitError,
    EngineError,
    EngineInvariantError,
    ShipyardError,
)
from shipyard.logger import configure_logging
from shipyard.types import ContainerOutput, ExitStatus

__all__ = [
    "Container",
    "ContainerConflictError",
    "ContainerExitError",
    "ContainerNotFoundError",
    "ContainerOutput",
    "ContainerWaitError",
    "DockerEngine",
    "EngineClient",
    "EngineError",
    "EngineInvariantError",
    "ExitStatus",
    "ShipyardError",
    "configure_logging",
]
