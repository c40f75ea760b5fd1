"""Container engine clients.

The container handle only ever talks to an :class:`EngineClient`;
:class:`DockerEngine` is the implementation backed by the Docker
Engine HTTP API.
"""

from shipyard.engine.base import EngineClient, LogStream
from shipyard.engine.docker import DockerEngine, decode_frame_header

__all__ = ["DockerEngine", "EngineClient", "LogStream", "decode_frame_header"]
