"""Depcache CLI entry points.

This module exposes build and cache maintenance commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.build_command import add_build_command, run_build_command
from cli.cache_command import (
    add_cache_status_command,
    add_clear_cache_command,
    run_cache_status_command,
    run_clear_cache_command,
)
from core.config import DepCacheConfig


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="depcache",
        description="Dependency cache orchestrator for front-end builds",
    )
    parser.add_argument("--cache-root", help="Override DEPCACHE_CACHE_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_build_command(subparsers)
    add_cache_status_command(subparsers)
    add_clear_cache_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the depcache CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.cache_root)
    if args.command == "build":
        return run_build_command(config, args)
    if args.command == "cache-status":
        return run_cache_status_command(config, args)
    if args.command == "clear-cache":
        return run_clear_cache_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(cache_root: str | None) -> DepCacheConfig:
    """Build config with optional cache-root override.

    Args:
        cache_root: Optional override path.

    Returns:
        Validated config.
    """
    config = DepCacheConfig.from_env()
    if cache_root:
        config = replace(config, cache_root=Path(cache_root).expanduser().resolve())
    return config
