"""Runtime metadata written into the build workspace.

Records the toolchain version used by the finished build so the next
build can compare against it.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import RUNTIME_METADATA_DIR_NAME, RUNTIME_VERSION_FILE_NAME
from core.errors import ResolutionError


def runtime_version_path(workspace: Path) -> Path:
    """Return the runtime version file path inside a workspace."""
    return workspace / RUNTIME_METADATA_DIR_NAME / RUNTIME_VERSION_FILE_NAME


def write_runtime_version(workspace: Path, version: str) -> Path:
    """Write the toolchain version used for the current build."""
    version_path = runtime_version_path(workspace)
    version_path.parent.mkdir(parents=True, exist_ok=True)
    version_path.write_text(version + "\n", encoding="utf-8")
    return version_path


def read_runtime_version(workspace: Path) -> str | None:
    """Read the toolchain version recorded by a previous build, if any."""
    version_path = runtime_version_path(workspace)
    if not version_path.is_file():
        return None
    value = version_path.read_text(encoding="utf-8").strip()
    return value or None


class RuntimeMetadataResolver:
    """Resolver reusing the toolchain version recorded by the previous build."""

    def __init__(self, workspace: Path) -> None:
        self._workspace = workspace

    def resolve(self) -> str | None:
        try:
            return read_runtime_version(self._workspace)
        except (OSError, UnicodeDecodeError) as error:
            raise ResolutionError(
                f"Failed to read {runtime_version_path(self._workspace)}: {error}. "
                "Pin the version with --runtime-version."
            ) from error
