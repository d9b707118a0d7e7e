"""Depcache exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class DepCacheError(Exception):
    """Base exception for all depcache failures."""


class DepCacheConfigError(DepCacheError):
    """Raised for invalid runtime configuration."""


class BuildSpecError(DepCacheError):
    """Raised for invalid or unsupported build-spec files."""


class ResolutionError(DepCacheError):
    """Raised when the toolchain version cannot be determined."""


class RestoreError(DepCacheError):
    """Raised when a cache entry cannot be copied into the workspace."""


class InstallError(DepCacheError):
    """Raised when an install, prune, or rebuild command fails."""


class BuildToolError(DepCacheError):
    """Raised when the final build-tool invocation fails."""


class PersistError(DepCacheError):
    """Raised when a working tree cannot be written back into the cache."""
