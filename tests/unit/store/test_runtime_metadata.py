"""Unit tests for workspace runtime metadata."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import ResolutionError
from core.version_resolution import PinnedVersionResolver, resolve_toolchain_version
from store.runtime_metadata import (
    RuntimeMetadataResolver,
    read_runtime_version,
    runtime_version_path,
    write_runtime_version,
)


def test_write_then_read_runtime_version(tmp_path: Path) -> None:
    """Recorded version should be read back without the trailing newline."""
    write_runtime_version(tmp_path, "10.0.0")

    assert read_runtime_version(tmp_path) == "10.0.0"


def test_previous_build_version_used_as_last_resort(tmp_path: Path) -> None:
    """Without a pinned version the previous build's version is reused."""
    write_runtime_version(tmp_path, "8.0.0")
    resolvers = (PinnedVersionResolver(None), RuntimeMetadataResolver(tmp_path))

    assert resolve_toolchain_version(resolvers) == "8.0.0"


def test_missing_runtime_metadata_resolves_to_none(tmp_path: Path) -> None:
    """A workspace that was never built has no recorded version."""
    assert RuntimeMetadataResolver(tmp_path).resolve() is None


def test_undecodable_runtime_metadata_raises_resolution_error(tmp_path: Path) -> None:
    """Corrupt metadata should fail resolution instead of escaping as a decode error."""
    version_path = runtime_version_path(tmp_path)
    version_path.parent.mkdir(parents=True)
    version_path.write_bytes(b"\xff\xfe")

    with pytest.raises(ResolutionError):
        RuntimeMetadataResolver(tmp_path).resolve()
