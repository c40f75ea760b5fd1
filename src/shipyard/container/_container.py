"""The Container handle."""

from __future__ import annotations

from collections.abc import Callable

from shipyard.container._archive import build_file_archive, normalize_upload_path
from shipyard.container._orchestrator import run_container
from shipyard.container._teardown import remove_container
from shipyard.engine.base import EngineClient
from shipyard.logger import logger
from shipyard.types import ContainerOutput

OnStarted = Callable[[], None]

UPLOAD_ROOT = "/"


class Container:
    """A handle on one container the engine already knows about.

    The handle holds no mutable state: every method is a fresh round trip
    to the engine for ``name``. ``client`` is shared, never owned, so many
    handles can use the same engine client. Only one :meth:`run` may be
    in flight per container, and uploads must not overlap a run; neither
    is checked here.
    """

    __slots__ = ("_attach_stderr", "_attach_stdout", "_client", "_name")

    def __init__(
        self,
        client: EngineClient,
        name: str,
        *,
        attach_stdout: bool = True,
        attach_stderr: bool = True,
    ) -> None:
        self._client = client
        self._name = name
        self._attach_stdout = attach_stdout
        self._attach_stderr = attach_stderr

    @property
    def client(self) -> EngineClient:
        return self._client

    @property
    def name(self) -> str:
        return self._name

    @property
    def attach_stdout(self) -> bool:
        return self._attach_stdout

    @property
    def attach_stderr(self) -> bool:
        return self._attach_stderr

    def __repr__(self) -> str:
        return f"Container(name={self._name!r})"

    async def upload_file(self, path: str, contents: bytes) -> None:
        """Write ``contents`` to ``path`` inside the container.

        Leading slashes are ignored; the path always resolves from the
        container's root. Uploading the same path again overwrites it.
        """
        archive = build_file_archive(path, contents)
        logger.debug(
            "Uploading file to container",
            container=self._name,
            path=normalize_upload_path(path),
            size=len(contents),
        )
        await self._client.upload(self._name, UPLOAD_ROOT, archive)

    async def run(self, started: OnStarted) -> ContainerOutput:
        """Start the container and wait for it to finish.

        ``started`` is called once, right after the engine accepts the
        start request. Returns the exit status with the full stdout and
        stderr of the attached streams. There is no timeout; wrap the
        call (e.g. ``asyncio.timeout``) to bound it. Cancelling leaves
        the container running.
        """
        return await run_container(
            self._client,
            self._name,
            attach_stdout=self._attach_stdout,
            attach_stderr=self._attach_stderr,
            started=started,
        )

    async def remove(self) -> None:
        """Remove the container without force. See :meth:`force_remove`."""
        logger.debug("Removing container", container=self._name)
        await remove_container(self._client, self._name, force=False)

    async def force_remove(self) -> None:
        """Remove the container, killing it first if it is still running."""
        logger.debug("Force removing container", container=self._name)
        await remove_container(self._client, self._name, force=True)
