"""Public SDK surface for depcache.

This module provides a stable import path for build integrations.
It re-exports the build entry points and typed models.
"""

from __future__ import annotations

from core.config import DepCacheConfig
from core.types import (
    BuildReport,
    BuildRequest,
    Ecosystem,
    EcosystemOutcome,
    EcosystemSpec,
    ExecutionEnvironment,
    ExitStatus,
    TreeState,
)
from deps.command_runner import CommandRunner, SubprocessCommandRunner
from deps.dependency_tree_manager import DependencyTreeManager
from deps.ecosystem_registry import default_ecosystem_specs
from pipeline.build_orchestrator import BuildOrchestrator
from pipeline.build_runner import run_build
from store.cache_store import CacheStore
from store.version_ledger import VersionLedger

__all__ = [
    "BuildOrchestrator",
    "BuildReport",
    "BuildRequest",
    "CacheStore",
    "CommandRunner",
    "DepCacheConfig",
    "DependencyTreeManager",
    "Ecosystem",
    "EcosystemOutcome",
    "EcosystemSpec",
    "ExecutionEnvironment",
    "ExitStatus",
    "SubprocessCommandRunner",
    "TreeState",
    "VersionLedger",
    "default_ecosystem_specs",
    "run_build",
]
