"""Native process exit status for a finished container.

The engine reports a plain integer exit code. Callers interpret the
status with their platform's own conventions, so on POSIX the code is
packed into the wait(2) status layout (exit code in the high byte, low
byte reserved for signal and core-dump flags) and on Windows the code
is the status itself.

:func:`exit_status_from_code` is the only place the platform matters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _to_i32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _encode_posix(code: int) -> int:
    # See WEXITSTATUS in wait(2)
    return _to_i32(_to_i32(code) << 8)


def _encode_windows(code: int) -> int:
    return code & 0xFFFFFFFF


def _decode_posix(raw: int) -> int | None:
    if os.WIFEXITED(raw):
        return os.WEXITSTATUS(raw)
    return None


def _decode_windows(raw: int) -> int | None:
    return raw


if os.name == "posix":
    _encode, _decode = _encode_posix, _decode_posix
else:
    _encode, _decode = _encode_windows, _decode_windows


@dataclass(frozen=True)
class ExitStatus:
    """A platform-native exit status (``raw``) with decoding helpers."""

    raw: int

    @property
    def code(self) -> int | None:
        """Exit code, or None if the process did not exit normally (POSIX signals)."""
        return _decode(self.raw)

    @property
    def success(self) -> bool:
        return self.code == 0

    @property
    def signal(self) -> int | None:
        """Terminating signal number on POSIX; always None elsewhere."""
        if os.name == "posix" and os.WIFSIGNALED(self.raw):
            return os.WTERMSIG(self.raw)
        return None

    def __str__(self) -> str:
        if self.code is not None:
            return f"exit status: {self.code}"
        return f"signal: {self.signal}"


def exit_status_from_code(code: int) -> ExitStatus:
    """Convert an engine-reported exit code into the native exit status."""
    return ExitStatus(_encode(code))
