"""Build orchestration across all dependency ecosystems.

Ecosystems are reconciled one at a time in a fixed order. Caches are
only replaced after the build tool exits successfully, so a failed
build never overwrites a good snapshot.
"""

from __future__ import annotations

from typing import Sequence

from core.errors import BuildToolError, PersistError
from core.logging_config import get_logger
from core.status_stream import StatusStream
from core.types import (
    BuildReport,
    BuildRequest,
    Ecosystem,
    EcosystemOutcome,
    EcosystemSpec,
    ExecutionEnvironment,
)
from core.version_resolution import VersionResolver, resolve_toolchain_version
from deps.command_runner import CommandRunner
from deps.dependency_tree_manager import DependencyTreeManager
from deps.ecosystem_registry import order_specs
from store.cache_store import CacheStore
from store.runtime_metadata import read_runtime_version, write_runtime_version
from store.version_ledger import VersionLedger

_LOGGER = get_logger(__name__)


class BuildOrchestrator:
    """Runs one build: reconcile, build, persist."""

    def __init__(
        self,
        specs: Sequence[EcosystemSpec],
        runner: CommandRunner,
        status_stream: StatusStream | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            specs: Ecosystem specs; reordered into the fixed reconcile order.
            runner: Command runner shared by every stage.
            status_stream: Optional status writer, stdout when omitted.
        """
        self._specs = order_specs(specs)
        self._runner = runner
        self._status = status_stream or StatusStream()

    def run(self, request: BuildRequest, resolvers: Sequence[VersionResolver]) -> BuildReport:
        """Execute one build.

        Args:
            request: Workspace, cache root, environment, and build command.
            resolvers: Toolchain version sources in priority order.

        Returns:
            Report of every ecosystem outcome and persistence result.

        Raises:
            ResolutionError: If no toolchain version can be determined.
            InstallError: If any dependency command fails.
            BuildToolError: If the build tool fails.
        """
        toolchain_version = resolve_toolchain_version(resolvers)
        self._status.status(f"Using toolchain version {toolchain_version}")
        _LOGGER.info(
            "build_started",
            workspace=str(request.workspace),
            cache_root=str(request.cache_root),
            toolchain_version=toolchain_version,
            previous_toolchain_version=read_runtime_version(request.workspace),
        )
        cache_store = CacheStore(request.cache_root)
        ledger = VersionLedger(request.cache_root)
        managers: list[DependencyTreeManager] = []
        outcomes: list[EcosystemOutcome] = []
        environment = request.environment
        for spec in self._specs:
            manager = DependencyTreeManager(
                spec,
                request.workspace,
                cache_store,
                ledger,
                self._runner,
                self._status,
            )
            outcome = manager.reconcile(toolchain_version, environment)
            if outcome.is_active:
                environment = _expose_bin_dirs(environment, request, spec)
            managers.append(manager)
            outcomes.append(outcome)
        self._run_build_tool(request, environment)
        return self._persist_all(request, toolchain_version, managers, outcomes)

    def _run_build_tool(self, request: BuildRequest, environment: ExecutionEnvironment) -> None:
        command = request.build_command
        self._status.status(f"Building with {' '.join(command)}")
        exit_status = self._runner.run(
            command[0],
            command[1:],
            cwd=request.workspace,
            env=environment,
        )
        if not exit_status.succeeded:
            _LOGGER.error("build_tool_failed", argv=list(command), exit_code=exit_status.code)
            raise BuildToolError(
                f"Build command '{' '.join(command)}' exited with status {exit_status.code}. "
                "Caches were left untouched."
            )

    def _persist_all(
        self,
        request: BuildRequest,
        toolchain_version: str,
        managers: list[DependencyTreeManager],
        outcomes: list[EcosystemOutcome],
    ) -> BuildReport:
        self._status.status("Caching dependencies for future builds")
        persisted: list[Ecosystem] = []
        failures: list[Ecosystem] = []
        final_outcomes: list[EcosystemOutcome] = []
        for manager, outcome in zip(managers, outcomes):
            try:
                final_outcome = manager.persist(outcome, toolchain_version)
            except PersistError as error:
                _LOGGER.warning(
                    "cache_persist_failed",
                    ecosystem=outcome.ecosystem.value,
                    error=str(error),
                )
                self._status.protip(f"Could not cache {outcome.ecosystem.value}: {error}")
                failures.append(outcome.ecosystem)
                final_outcomes.append(outcome)
                continue
            if final_outcome is not outcome:
                self._status.detail(f"Cached {manager.spec.working_tree}")
                persisted.append(outcome.ecosystem)
            final_outcomes.append(final_outcome)
        write_runtime_version(request.workspace, toolchain_version)
        _LOGGER.info(
            "build_finished",
            toolchain_version=toolchain_version,
            persisted=[eco.value for eco in persisted],
            persist_failures=[eco.value for eco in failures],
        )
        return BuildReport(
            toolchain_version=toolchain_version,
            outcomes=tuple(final_outcomes),
            persisted=tuple(persisted),
            persist_failures=tuple(failures),
        )


def _expose_bin_dirs(
    environment: ExecutionEnvironment,
    request: BuildRequest,
    spec: EcosystemSpec,
) -> ExecutionEnvironment:
    """Prepend an ecosystem's bin dirs so later stages can run its tools."""
    entries = tuple(str(request.workspace / entry) for entry in spec.path_entries)
    return environment.with_path_entries(entries)
