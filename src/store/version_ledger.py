"""Version markers for cached dependency trees.

A marker records the toolchain version a cached tree was built with.
It is written only after the tree itself was persisted, so a marker
always describes a snapshot that exists.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import VERSION_MARKER_FILE_NAME
from core.errors import RestoreError
from core.logging_config import get_logger
from core.types import Ecosystem

_LOGGER = get_logger(__name__)


class VersionLedger:
    """Filesystem-backed version marker store."""

    def __init__(self, cache_root: Path) -> None:
        self._cache_root = cache_root

    def read(self, ecosystem: Ecosystem) -> str | None:
        """Return the recorded version for an ecosystem, if any.

        Args:
            ecosystem: Ecosystem identifier.

        Returns:
            Stored version, or None when no marker exists.

        Raises:
            RestoreError: If a marker exists but cannot be read.
        """
        marker_path = self.marker_path(ecosystem)
        if not marker_path.is_file():
            return None
        try:
            value = marker_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as error:
            raise RestoreError(
                f"Failed to read version marker at {marker_path}: {error}. "
                "The cached tree will be reinstalled."
            ) from error
        return value or None

    def write(self, ecosystem: Ecosystem, version: str) -> None:
        """Overwrite the recorded version for an ecosystem."""
        marker_path = self.marker_path(ecosystem)
        marker_path.parent.mkdir(parents=True, exist_ok=True)
        marker_path.write_text(version + "\n", encoding="utf-8")
        _LOGGER.info("version_marker_written", ecosystem=ecosystem.value, version=version)

    def marker_path(self, ecosystem: Ecosystem) -> Path:
        return self._cache_root / ecosystem.value / VERSION_MARKER_FILE_NAME
