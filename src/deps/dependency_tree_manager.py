"""Per-ecosystem restore, rebuild, and install decisions.

One manager instance owns one ecosystem's working tree for the duration
of a single build. It decides how the tree is obtained, reconciles it
with the manifest, and hands it back to the cache after the build.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.errors import InstallError, PersistError, RestoreError
from core.logging_config import get_logger
from core.status_stream import StatusStream
from core.types import EcosystemOutcome, EcosystemSpec, ExecutionEnvironment, TreeState
from deps.command_runner import CommandRunner
from store.cache_store import CacheStore
from store.version_ledger import VersionLedger

_LOGGER = get_logger(__name__)


class DependencyTreeManager:
    """State machine for one ecosystem's dependency tree.

    Transitions: ``START`` to one of ``CHECKED_IN_SOURCE``,
    ``RESTORED_FROM_CACHE`` (then ``PRUNED``) or ``FRESH_INSTALL``; then
    ``INSTALLED``; then ``PERSISTED`` once the build succeeded. An
    ecosystem without a manifest goes straight to ``INACTIVE``.
    """

    def __init__(
        self,
        spec: EcosystemSpec,
        workspace: Path,
        cache_store: CacheStore,
        ledger: VersionLedger,
        runner: CommandRunner,
        status_stream: StatusStream,
    ) -> None:
        self._spec = spec
        self._workspace = workspace
        self._cache_store = cache_store
        self._ledger = ledger
        self._runner = runner
        self._status = status_stream
        self._environment = ExecutionEnvironment()
        self._state = TreeState.START

    @property
    def spec(self) -> EcosystemSpec:
        return self._spec

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def working_tree_path(self) -> Path:
        return self._workspace / self._spec.working_tree

    @property
    def manifest_path(self) -> Path:
        return self._workspace / self._spec.manifest_file

    def reconcile(
        self,
        toolchain_version: str,
        environment: ExecutionEnvironment,
    ) -> EcosystemOutcome:
        """Bring the working tree in line with the manifest.

        Args:
            toolchain_version: Resolved toolchain version for this build.
            environment: Execution environment for every command.

        Returns:
            Outcome describing the path taken and actions executed.

        Raises:
            InstallError: If an install, prune, or rebuild command fails.
        """
        name = self._spec.ecosystem.value
        if not self.manifest_path.is_file():
            self._state = TreeState.INACTIVE
            _LOGGER.info("ecosystem_inactive", ecosystem=name, manifest=self._spec.manifest_file)
            return EcosystemOutcome(ecosystem=self._spec.ecosystem, state=self._state)
        self._environment = environment
        self._status.status(f"Installing {name} dependencies ({self._spec.manifest_file})")
        if self.working_tree_path.exists():
            origin, actions, cached_version = self._use_checked_in_tree()
        else:
            origin, actions, cached_version = self._restore_or_start_fresh(toolchain_version)
        actions.append(self._install())
        self._state = TreeState.INSTALLED
        _LOGGER.info(
            "ecosystem_reconciled",
            ecosystem=name,
            origin=origin.value,
            actions=actions,
            cached_version=cached_version,
            toolchain_version=toolchain_version,
        )
        return EcosystemOutcome(
            ecosystem=self._spec.ecosystem,
            state=self._state,
            origin=origin,
            actions=tuple(actions),
            cached_version=cached_version,
        )

    def persist(self, outcome: EcosystemOutcome, toolchain_version: str) -> EcosystemOutcome:
        """Write the installed tree back into the cache, then the version marker.

        Args:
            outcome: Outcome returned by ``reconcile`` for this build.
            toolchain_version: Resolved toolchain version for this build.

        Returns:
            Outcome in ``PERSISTED`` state, or unchanged when the tree
            does not use the cache.

        Raises:
            PersistError: If the cache or marker could not be written.
        """
        if not outcome.uses_cache:
            return outcome
        self._cache_store.persist(self._spec, self.working_tree_path)
        if self._spec.tracks_version:
            try:
                self._ledger.write(self._spec.ecosystem, toolchain_version)
            except OSError as error:
                # A tree without its marker cannot be trusted by the next build.
                self._cache_store.discard(self._spec.ecosystem)
                raise PersistError(
                    f"Cached {self._spec.ecosystem.value} tree was written but its version "
                    f"marker could not be: {error}. The cache entry was dropped and the "
                    "next build will reinstall from scratch."
                ) from error
        self._state = TreeState.PERSISTED
        return replace(outcome, state=self._state, actions=outcome.actions + ("persist",))

    def _use_checked_in_tree(self) -> tuple[TreeState, list[str], None]:
        self._state = TreeState.CHECKED_IN_SOURCE
        self._status.detail(f"Found existing {self._spec.working_tree}, skipping cache")
        self._status.protip(
            f"Add {self._spec.working_tree} to .gitignore so cached dependencies are reused"
        )
        rebuilt = self._rebuild()
        return TreeState.CHECKED_IN_SOURCE, [rebuilt] if rebuilt else [], None

    def _restore_or_start_fresh(
        self,
        toolchain_version: str,
    ) -> tuple[TreeState, list[str], str | None]:
        if not self._cache_store.exists(self._spec):
            self._state = TreeState.FRESH_INSTALL
            self._status.detail("No cache available, installing from scratch")
            return TreeState.FRESH_INSTALL, [], None
        try:
            cached_version = self._ledger.read(self._spec.ecosystem)
            self._cache_store.restore(self._spec, self.working_tree_path)
        except RestoreError as error:
            self._state = TreeState.FRESH_INSTALL
            _LOGGER.warning(
                "cache_restore_failed",
                ecosystem=self._spec.ecosystem.value,
                error=str(error),
            )
            self._status.protip(f"Cache could not be restored, installing from scratch: {error}")
            return TreeState.FRESH_INSTALL, [], None
        self._state = TreeState.RESTORED_FROM_CACHE
        self._status.detail(f"Restored {self._spec.working_tree} from cache")
        actions = ["restore", self._prune()]
        self._state = TreeState.PRUNED
        if self._needs_rebuild(cached_version, toolchain_version):
            self._status.detail(
                f"Toolchain changed ({cached_version or 'unknown'} => {toolchain_version}), "
                "rebuilding native artifacts"
            )
            rebuilt = self._rebuild()
            if rebuilt:
                actions.append(rebuilt)
        return TreeState.RESTORED_FROM_CACHE, actions, cached_version

    def _needs_rebuild(self, cached_version: str | None, toolchain_version: str) -> bool:
        # Missing marker on a tracked ecosystem: the snapshot's toolchain is unknown.
        if cached_version is None:
            return self._spec.tracks_version
        return cached_version != toolchain_version

    def _prune(self) -> str:
        self._run_checked("prune", self._spec.prune_command)
        return "prune"

    def _rebuild(self) -> str | None:
        if self._spec.rebuild_command is None:
            _LOGGER.info("rebuild_skipped", ecosystem=self._spec.ecosystem.value)
            return None
        self._run_checked("rebuild", self._spec.rebuild_command)
        return "rebuild"

    def _install(self) -> str:
        self._run_checked("install", self._spec.install_command)
        return "install"

    def _run_checked(self, action: str, command: tuple[str, ...]) -> None:
        exit_status = self._runner.run(
            command[0],
            command[1:],
            cwd=self._workspace,
            env=self._environment,
        )
        if not exit_status.succeeded:
            raise InstallError(
                f"{self._spec.ecosystem.value} {action} failed: '{' '.join(command)}' exited "
                f"with status {exit_status.code}. Fix the error above and rebuild."
            )
