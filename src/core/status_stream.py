"""Human-facing build status output.

Progress lines and advisories are written to a text stream in the
two-level format build logs use, separate from structured logs.
"""

from __future__ import annotations

import sys
from typing import TextIO

from core.constants import DETAIL_PREFIX, ERROR_PREFIX, PROTIP_PREFIX, STATUS_PREFIX


class StatusStream:
    """Writer for ``status`` (progress) and ``protip`` (advisory) messages."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def status(self, message: str) -> None:
        """Write a top-level progress line."""
        self._write(f"{STATUS_PREFIX}{message}")

    def detail(self, message: str) -> None:
        """Write an indented progress line under the current status."""
        self._write(f"{DETAIL_PREFIX}{message}")

    def protip(self, message: str) -> None:
        """Write a non-fatal advisory line."""
        self._write(f"{DETAIL_PREFIX}{PROTIP_PREFIX}{message}")

    def error(self, message: str) -> None:
        """Write a fatal error line."""
        self._write(f"{ERROR_PREFIX}{message}")

    def _write(self, line: str) -> None:
        # Resolved per write so redirected stdout is honored.
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()
