"""Container handle: upload, run and remove one engine-managed container.

This package is split into focused submodules:
  _archive      : single-file tar payloads for uploads
  _orchestrator : attach, start, output collection and exit code resolution
  _teardown     : forced and unforced removal
  _container    : the Container handle tying the above to one identity
"""

from shipyard.container._archive import build_file_archive
from shipyard.container._container import Container, OnStarted
from shipyard.container._orchestrator import ExitCodeSource, FromEvent, FromInspect

__all__ = [
    "Container",
    "ExitCodeSource",
    "FromEvent",
    "FromInspect",
    "OnStarted",
    "build_file_archive",
]
