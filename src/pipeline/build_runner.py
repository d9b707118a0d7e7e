"""Config-driven entry point wiring a build from runtime settings.

This module maps a validated config plus optional build spec onto a
``BuildRequest`` so the CLI and SDK share one build path.
"""

from __future__ import annotations

from pathlib import Path

from core.build_spec import load_build_spec
from core.config import DepCacheConfig
from core.constants import DEFAULT_BUILD_COMMAND
from core.env_dir import export_env_dir
from core.errors import DepCacheConfigError
from core.status_stream import StatusStream
from core.types import BuildReport, BuildRequest, EcosystemSpec, ExecutionEnvironment
from core.version_resolution import PinnedVersionResolver, VersionFileResolver
from deps.command_runner import CommandRunner, SubprocessCommandRunner
from deps.ecosystem_registry import apply_build_spec, default_ecosystem_specs
from pipeline.build_orchestrator import BuildOrchestrator
from store.runtime_metadata import RuntimeMetadataResolver


def resolve_ecosystem_specs(
    build_spec_path: str | None,
) -> tuple[tuple[EcosystemSpec, ...], tuple[str, ...]]:
    """Return ecosystem specs and build command after build-spec overrides."""
    build_spec = load_build_spec(build_spec_path) if build_spec_path else None
    specs = apply_build_spec(default_ecosystem_specs(), build_spec)
    build_command = DEFAULT_BUILD_COMMAND
    if build_spec is not None and build_spec.build_command is not None:
        build_command = build_spec.build_command
    return specs, build_command


def run_build(
    config: DepCacheConfig,
    workspace: Path,
    build_spec_path: str | None = None,
    runner: CommandRunner | None = None,
    status_stream: StatusStream | None = None,
) -> BuildReport:
    """Run a full build for a workspace.

    Args:
        config: Validated runtime configuration.
        workspace: Application workspace to build.
        build_spec_path: Optional YAML build-spec overriding commands.
        runner: Optional command runner, subprocess-backed when omitted.
        status_stream: Optional status writer.

    Returns:
        Build report.

    Raises:
        DepCacheConfigError: If the workspace does not exist.
    """
    workspace = workspace.expanduser().resolve()
    if not workspace.is_dir():
        raise DepCacheConfigError(
            f"Workspace {workspace} does not exist. Pass the application build directory."
        )
    specs, build_command = resolve_ecosystem_specs(build_spec_path)
    environment = export_env_dir(ExecutionEnvironment(), config.env_dir)
    request = BuildRequest(
        workspace=workspace,
        cache_root=config.cache_root,
        environment=environment,
        build_command=build_command,
    )
    orchestrator = BuildOrchestrator(
        specs,
        runner or SubprocessCommandRunner(config.command_timeout_seconds),
        status_stream,
    )
    resolvers = (
        PinnedVersionResolver(config.runtime_version),
        VersionFileResolver(workspace),
        RuntimeMetadataResolver(workspace),
    )
    return orchestrator.run(request, resolvers)
