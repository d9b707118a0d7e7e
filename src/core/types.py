"""Shared typed models.

This module defines immutable data models used by the cache store,
dependency managers, and build orchestrator to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import os
from pathlib import Path
from typing import Mapping


class Ecosystem(str, Enum):
    """Independently cached dependency domain.

    The value doubles as the ecosystem's cache subdirectory name.
    """

    NODE_MODULES = "node"
    RUBY_GEMS = "ruby"
    BROWSER_PACKAGES = "bower"


class TreeState(str, Enum):
    """Lifecycle states of one ecosystem's working tree during a build."""

    START = "start"
    INACTIVE = "inactive"
    CHECKED_IN_SOURCE = "checked_in_source"
    RESTORED_FROM_CACHE = "restored_from_cache"
    FRESH_INSTALL = "fresh_install"
    PRUNED = "pruned"
    INSTALLED = "installed"
    PERSISTED = "persisted"


@dataclass(frozen=True)
class EcosystemSpec:
    """Static description of one ecosystem's layout and commands.

    Attributes:
        ecosystem: Ecosystem identifier.
        manifest_file: Workspace-relative manifest that activates the ecosystem.
        working_tree: Workspace-relative dependency directory.
        install_command: Command reconciling the working tree with the manifest.
        prune_command: Command removing entries the manifest no longer declares.
        rebuild_command: Optional command recompiling native artifacts.
        tracks_version: Whether a version marker is kept for the cached tree.
        path_entries: Workspace-relative bin directories exposed to later stages.
    """

    ecosystem: Ecosystem
    manifest_file: str
    working_tree: str
    install_command: tuple[str, ...]
    prune_command: tuple[str, ...]
    rebuild_command: tuple[str, ...] | None = None
    tracks_version: bool = False
    path_entries: tuple[str, ...] = ()

    @property
    def cache_tree_name(self) -> str:
        """Directory name of the cached tree under the ecosystem cache dir."""
        return Path(self.working_tree).name


@dataclass(frozen=True)
class ExecutionEnvironment:
    """Explicit environment threaded through every command invocation.

    Attributes:
        variables: Exported key/value pairs applied on top of the base env.
        path_entries: Directories prepended to PATH, highest priority first.
    """

    variables: Mapping[str, str] = field(default_factory=dict)
    path_entries: tuple[str, ...] = ()

    def with_path_entries(self, entries: tuple[str, ...]) -> "ExecutionEnvironment":
        """Return a copy with entries prepended ahead of existing PATH entries."""
        merged = tuple(entry for entry in entries if entry not in self.path_entries)
        return replace(self, path_entries=merged + self.path_entries)

    def with_variables(self, variables: Mapping[str, str]) -> "ExecutionEnvironment":
        """Return a copy with additional exported variables."""
        return replace(self, variables={**self.variables, **variables})

    def to_process_env(self, base_env: Mapping[str, str]) -> dict[str, str]:
        """Render a full process environment from a base environment.

        Args:
            base_env: Inherited environment, usually ``os.environ``.

        Returns:
            Environment mapping suitable for a child process.
        """
        process_env = {**base_env, **self.variables}
        if self.path_entries:
            inherited_path = base_env.get("PATH", "")
            path_rows = list(self.path_entries)
            if inherited_path:
                path_rows.append(inherited_path)
            process_env["PATH"] = os.pathsep.join(path_rows)
        return process_env


@dataclass(frozen=True)
class ExitStatus:
    """Exit status of one external command."""

    code: int

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status zero."""
        return self.code == 0


@dataclass(frozen=True)
class EcosystemOutcome:
    """Result of reconciling one ecosystem.

    Attributes:
        ecosystem: Ecosystem identifier.
        state: Latest state reached.
        origin: How the working tree was obtained before the install pass.
        actions: Ordered actions executed, e.g. restore, prune, install.
        cached_version: Version marker read from the ledger, if any.
    """

    ecosystem: Ecosystem
    state: TreeState
    origin: TreeState | None = None
    actions: tuple[str, ...] = ()
    cached_version: str | None = None

    @property
    def is_active(self) -> bool:
        """Whether the ecosystem took part in this build."""
        return self.state != TreeState.INACTIVE

    @property
    def uses_cache(self) -> bool:
        """Whether the ecosystem's working tree is persisted after the build."""
        return self.is_active and self.origin != TreeState.CHECKED_IN_SOURCE


@dataclass(frozen=True)
class BuildRequest:
    """Inputs for one orchestrated build.

    Attributes:
        workspace: Build workspace directory mutated in place.
        cache_root: Durable cache root partitioned by ecosystem.
        environment: Base execution environment for all commands.
        build_command: Final build-tool invocation.
    """

    workspace: Path
    cache_root: Path
    environment: ExecutionEnvironment
    build_command: tuple[str, ...]


@dataclass(frozen=True)
class BuildReport:
    """Summary of one completed build.

    Attributes:
        toolchain_version: Resolved toolchain version used for the build.
        outcomes: Per-ecosystem outcomes in reconcile order.
        persisted: Ecosystems whose cache was successfully replaced.
        persist_failures: Ecosystems whose cache write failed.
    """

    toolchain_version: str
    outcomes: tuple[EcosystemOutcome, ...]
    persisted: tuple[Ecosystem, ...] = ()
    persist_failures: tuple[Ecosystem, ...] = ()

    def outcome_for(self, ecosystem: Ecosystem) -> EcosystemOutcome:
        """Return the outcome recorded for one ecosystem."""
        for outcome in self.outcomes:
            if outcome.ecosystem == ecosystem:
                return outcome
        raise KeyError(ecosystem.value)
