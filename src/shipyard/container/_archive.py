"""Single-file tar payloads for the engine's archive upload endpoint."""

from __future__ import annotations

import io
import tarfile

FILE_MODE = 0o644


def normalize_upload_path(path: str) -> str:
    """Strip leading slashes so the path is relative to the upload root."""
    return path.lstrip("/")


def build_file_archive(path: str, contents: bytes) -> bytes:
    """Build an in-memory tar holding exactly one regular file.

    The entry is named by the normalized ``path`` with mode 0644. There
    are no directory entries; the engine creates parents on extraction.
    """
    info = tarfile.TarInfo(name=normalize_upload_path(path))
    info.size = len(contents)
    info.mode = FILE_MODE

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.GNU_FORMAT) as tar:
        tar.addfile(info, io.BytesIO(contents))
    return buf.getvalue()
