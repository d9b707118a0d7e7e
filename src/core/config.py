"""Runtime configuration model for depcache.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_CACHE_ROOT
from core.errors import DepCacheConfigError


@dataclass(frozen=True)
class DepCacheConfig:
    """Validated runtime configuration.

    Attributes:
        cache_root: Durable root directory holding one subtree per ecosystem.
        runtime_version: Optional pinned toolchain version for this build.
        env_dir: Optional directory of config-var files to export.
        command_timeout_seconds: Optional per-command timeout.
    """

    cache_root: Path
    runtime_version: str | None
    env_dir: Path | None
    command_timeout_seconds: int | None

    @classmethod
    def from_env(cls) -> "DepCacheConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DepCacheConfigError: If environment values are invalid.
        """
        cache_root_value = os.getenv("DEPCACHE_CACHE_ROOT", str(DEFAULT_CACHE_ROOT))
        runtime_version = os.getenv("DEPCACHE_RUNTIME_VERSION") or None
        env_dir_value = os.getenv("DEPCACHE_ENV_DIR")
        timeout_value = os.getenv("DEPCACHE_COMMAND_TIMEOUT")
        return cls(
            cache_root=Path(cache_root_value).expanduser().resolve(),
            runtime_version=runtime_version.strip() if runtime_version else None,
            env_dir=Path(env_dir_value).expanduser().resolve() if env_dir_value else None,
            command_timeout_seconds=_parse_timeout(timeout_value),
        )


def _parse_timeout(raw_value: str | None) -> int | None:
    """Parse the command timeout environment value.

    Args:
        raw_value: Raw string from environment, if set.

    Returns:
        Parsed positive timeout in seconds, or None when unset.

    Raises:
        DepCacheConfigError: If value is not a positive integer.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        timeout_seconds = int(raw_value)
    except ValueError as error:
        raise DepCacheConfigError(
            "Invalid DEPCACHE_COMMAND_TIMEOUT value: "
            f"expected integer, got '{raw_value}'. "
            "Set DEPCACHE_COMMAND_TIMEOUT to a number of seconds."
        ) from error
    if timeout_seconds <= 0:
        raise DepCacheConfigError(
            f"Invalid DEPCACHE_COMMAND_TIMEOUT value {timeout_seconds}: must be positive."
        )
    return timeout_seconds
