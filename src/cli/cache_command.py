"""Cache inspection and maintenance commands."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from core.config import DepCacheConfig
from core.constants import ERROR_PREFIX
from core.errors import RestoreError
from core.logging_config import get_logger
from core.types import Ecosystem
from pipeline.build_runner import resolve_ecosystem_specs
from store.cache_store import CacheStore
from store.version_ledger import VersionLedger

_LOGGER = get_logger(__name__)


def add_cache_status_command(subparsers: Any) -> None:
    """Register cache-status subcommand."""
    parser = subparsers.add_parser("cache-status", help="Show cached trees and version markers")
    parser.add_argument("--build-spec", help="Optional YAML build-spec overriding layout")


def add_clear_cache_command(subparsers: Any) -> None:
    """Register clear-cache subcommand."""
    parser = subparsers.add_parser("clear-cache", help="Remove cached dependency trees")
    parser.add_argument(
        "--ecosystem",
        action="append",
        choices=[member.value for member in Ecosystem],
        help="Ecosystem to clear; repeatable, all when omitted",
    )


def run_cache_status_command(config: DepCacheConfig, args: argparse.Namespace) -> int:
    """Print one row per ecosystem: name, cache state, version marker."""
    specs, _ = resolve_ecosystem_specs(args.build_spec)
    cache_store = CacheStore(config.cache_root)
    ledger = VersionLedger(config.cache_root)
    for spec in specs:
        cached = "cached" if cache_store.exists(spec) else "empty"
        try:
            marker = ledger.read(spec.ecosystem)
        except RestoreError as error:
            _LOGGER.warning("version_marker_unreadable", ecosystem=spec.ecosystem.value)
            marker = "unreadable"
            print(f"{ERROR_PREFIX}{error}", file=sys.stderr)
        print(f"{spec.ecosystem.value}\t{cached}\t{marker or '-'}")
    return 0


def run_clear_cache_command(config: DepCacheConfig, args: argparse.Namespace) -> int:
    """Clear selected ecosystem caches without touching the cache root."""
    cache_store = CacheStore(config.cache_root)
    selected = args.ecosystem or [member.value for member in Ecosystem]
    for name in selected:
        cache_store.clear_top_level_only(Ecosystem(name))
        print(f"cleared\t{name}")
    return 0
