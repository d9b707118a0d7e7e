"""Toolchain version resolution seam.

Range-to-version resolution is owned by an external service; this module
only accepts already-resolved versions from ordered sources and rejects
anything that is not a concrete semver-like version.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol, Sequence

from core.errors import ResolutionError

_SEMVER_PATTERN = re.compile(r"^v?(\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?)$")
VERSION_FILE_NAMES = (".node-version", ".nvmrc")


class VersionResolver(Protocol):
    """Source of an already-resolved toolchain version."""

    def resolve(self) -> str | None: ...


class PinnedVersionResolver:
    """Resolver returning an explicitly pinned version."""

    def __init__(self, version: str | None) -> None:
        self._version = version

    def resolve(self) -> str | None:
        """Return the pinned version, if any."""
        return self._version


class VersionFileResolver:
    """Resolver reading an exact version from a workspace version file."""

    def __init__(self, workspace: Path) -> None:
        self._workspace = workspace

    def resolve(self) -> str | None:
        """Return the first non-empty version file value in the workspace."""
        for file_name in VERSION_FILE_NAMES:
            version_path = self._workspace / file_name
            if not version_path.is_file():
                continue
            try:
                value = version_path.read_text(encoding="utf-8").strip()
            except (OSError, UnicodeDecodeError) as error:
                raise ResolutionError(
                    f"Failed to read toolchain version from {version_path}: {error}. "
                    "Fix the file or pin the version with --runtime-version."
                ) from error
            if value:
                return value
        return None


def normalize_version(raw_version: str) -> str:
    """Validate and normalize a resolved version string.

    Args:
        raw_version: Version such as ``10.0.0`` or ``v10.0.0``.

    Returns:
        Version without a leading ``v``.

    Raises:
        ResolutionError: If the value is not a concrete version.
    """
    match = _SEMVER_PATTERN.match(raw_version.strip())
    if match is None:
        raise ResolutionError(
            f"Resolved toolchain version '{raw_version}' is not a concrete version. "
            "Pin an exact version such as 10.0.0."
        )
    return match.group(1)


def resolve_toolchain_version(resolvers: Sequence[VersionResolver]) -> str:
    """Resolve the toolchain version from ordered sources.

    Args:
        resolvers: Sources consulted in priority order.

    Returns:
        Normalized resolved version.

    Raises:
        ResolutionError: If no source yields a version or it is invalid.
    """
    for resolver in resolvers:
        raw_version = resolver.resolve()
        if raw_version is not None and raw_version.strip():
            return normalize_version(raw_version)
    raise ResolutionError(
        "Unable to determine the toolchain version. Set DEPCACHE_RUNTIME_VERSION, "
        "pass --runtime-version, or add a .node-version file to the workspace."
    )
