"""Build command wiring for depcache CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any

from core.config import DepCacheConfig
from core.constants import EXIT_CODE_BUILD_FAILURE, EXIT_CODE_SUCCESS, EXIT_CODE_USAGE_FAILURE
from core.errors import (
    BuildSpecError,
    BuildToolError,
    DepCacheConfigError,
    InstallError,
    ResolutionError,
)
from core.status_stream import StatusStream
from pipeline.build_runner import run_build


def add_build_command(subparsers: Any) -> None:
    """Register build subcommand."""
    parser = subparsers.add_parser(
        "build",
        help="Restore dependency caches, run the build tool, and persist caches",
    )
    parser.add_argument("workspace", help="Application build directory")
    parser.add_argument("--env-dir", help="Directory of config-var files to export")
    parser.add_argument("--runtime-version", help="Resolved toolchain version, e.g. 10.0.0")
    parser.add_argument("--build-spec", help="Optional YAML build-spec overriding commands")


def run_build_command(config: DepCacheConfig, args: argparse.Namespace) -> int:
    """Execute one build and map failures onto exit codes."""
    if args.env_dir:
        config = replace(config, env_dir=Path(args.env_dir).expanduser().resolve())
    if args.runtime_version:
        config = replace(config, runtime_version=args.runtime_version)
    status_stream = StatusStream()
    try:
        report = run_build(
            config,
            Path(args.workspace),
            build_spec_path=args.build_spec,
            status_stream=status_stream,
        )
    except (DepCacheConfigError, BuildSpecError, ResolutionError) as error:
        status_stream.error(str(error))
        return EXIT_CODE_USAGE_FAILURE
    except (InstallError, BuildToolError) as error:
        status_stream.error(str(error))
        return EXIT_CODE_BUILD_FAILURE
    status_stream.status(
        f"Build succeeded (toolchain {report.toolchain_version}, "
        f"cached: {', '.join(eco.value for eco in report.persisted) or 'none'})"
    )
    return EXIT_CODE_SUCCESS
