"""Per-ecosystem dependency tree cache.

This module owns the cache root across builds. Each ecosystem lives in
its own subdirectory so unrelated caches can share one root.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from core.errors import PersistError, RestoreError
from core.logging_config import get_logger
from core.types import Ecosystem, EcosystemSpec

_LOGGER = get_logger(__name__)


class CacheStore:
    """Filesystem-backed dependency tree cache.

    Layout is ``<cache_root>/<ecosystem>/<tree-name>``. Replacing an
    entry removes the whole ecosystem directory first, and a copy that
    fails part-way discards the directory again, so the next build never
    restores an incomplete tree.
    """

    def __init__(self, cache_root: Path) -> None:
        """Initialize cache store.

        Args:
            cache_root: Durable root shared by all ecosystems.
        """
        self._cache_root = cache_root

    def exists(self, spec: EcosystemSpec) -> bool:
        """Return whether a non-empty cached tree exists for the ecosystem."""
        cache_tree = self.cache_tree_path(spec)
        if not cache_tree.is_dir():
            return False
        return any(cache_tree.iterdir())

    def restore(self, spec: EcosystemSpec, working_tree: Path) -> Path:
        """Copy the cached tree into the build workspace.

        Args:
            spec: Ecosystem being restored.
            working_tree: Destination working tree; must not exist yet.

        Returns:
            The restored working tree path.

        Raises:
            RestoreError: If the cache entry vanished or the copy failed.
        """
        cache_tree = self.cache_tree_path(spec)
        try:
            working_tree.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(cache_tree, working_tree, symlinks=True)
        except OSError as error:
            shutil.rmtree(working_tree, ignore_errors=True)
            raise RestoreError(
                f"Failed to restore {spec.ecosystem.value} cache from {cache_tree}: {error}."
            ) from error
        _LOGGER.info(
            "cache_restored",
            ecosystem=spec.ecosystem.value,
            cache_tree=str(cache_tree),
            working_tree=str(working_tree),
        )
        return working_tree

    def persist(self, spec: EcosystemSpec, working_tree: Path) -> Path:
        """Replace the cached tree with the current working tree.

        Args:
            spec: Ecosystem being persisted.
            working_tree: Installed working tree to copy.

        Returns:
            Path of the new cached tree.

        Raises:
            PersistError: If the working tree is missing or the copy failed.
        """
        if not working_tree.is_dir():
            raise PersistError(
                f"Cannot persist {spec.ecosystem.value} cache: working tree "
                f"{working_tree} does not exist. Existing cache left untouched."
            )
        cache_tree = self.cache_tree_path(spec)
        try:
            self.clear_top_level_only(spec.ecosystem)
            cache_tree.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(working_tree, cache_tree, symlinks=True)
        except OSError as error:
            self.discard(spec.ecosystem)
            raise PersistError(
                f"Failed to persist {spec.ecosystem.value} cache into {cache_tree}: {error}. "
                "The next build will reinstall from scratch."
            ) from error
        _LOGGER.info(
            "cache_persisted",
            ecosystem=spec.ecosystem.value,
            cache_tree=str(cache_tree),
        )
        return cache_tree

    def clear_top_level_only(self, ecosystem: Ecosystem) -> None:
        """Remove one ecosystem's cache directory, leaving the root and siblings."""
        ecosystem_dir = self.ecosystem_dir(ecosystem)
        if ecosystem_dir.exists():
            shutil.rmtree(ecosystem_dir)
            _LOGGER.info("cache_cleared", ecosystem=ecosystem.value)

    def discard(self, ecosystem: Ecosystem) -> None:
        """Drop a possibly incomplete ecosystem entry, ignoring removal errors."""
        shutil.rmtree(self.ecosystem_dir(ecosystem), ignore_errors=True)
        _LOGGER.warning("cache_discarded", ecosystem=ecosystem.value)

    def ecosystem_dir(self, ecosystem: Ecosystem) -> Path:
        return self._cache_root / ecosystem.value

    def cache_tree_path(self, spec: EcosystemSpec) -> Path:
        return self.ecosystem_dir(spec.ecosystem) / spec.cache_tree_name
