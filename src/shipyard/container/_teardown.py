"""Container removal."""

from __future__ import annotations

from shipyard.engine.base import EngineClient


async def remove_container(client: EngineClient, name: str, *, force: bool) -> None:
    """Remove ``name``; engine errors (including not-found) propagate unchanged."""
    await client.remove(name, force=force)
