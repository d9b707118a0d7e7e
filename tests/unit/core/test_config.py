"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import DepCacheConfig
from core.errors import DepCacheConfigError


def test_from_env_reads_cache_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve cache root from environment."""
    monkeypatch.setenv("DEPCACHE_CACHE_ROOT", "./.tmp-depcache")

    config = DepCacheConfig.from_env()

    assert config.cache_root.name == ".tmp-depcache" and config.cache_root.is_absolute()


def test_from_env_reads_optional_values(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Runtime version, env dir, and timeout should be parsed when set."""
    monkeypatch.setenv("DEPCACHE_RUNTIME_VERSION", " 10.0.0 ")
    monkeypatch.setenv("DEPCACHE_ENV_DIR", str(tmp_path))
    monkeypatch.setenv("DEPCACHE_COMMAND_TIMEOUT", "600")

    config = DepCacheConfig.from_env()

    assert (
        config.runtime_version == "10.0.0"
        and config.env_dir == tmp_path.resolve()
        and config.command_timeout_seconds == 600
    )


def test_from_env_defaults_optional_values(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset optional values should stay None."""
    for name in ("DEPCACHE_RUNTIME_VERSION", "DEPCACHE_ENV_DIR", "DEPCACHE_COMMAND_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    config = DepCacheConfig.from_env()

    assert (
        config.runtime_version is None
        and config.env_dir is None
        and config.command_timeout_seconds is None
    )


@pytest.mark.parametrize("raw_value", ["not-a-number", "0", "-5"])
def test_from_env_raises_for_invalid_timeout(
    monkeypatch: pytest.MonkeyPatch,
    raw_value: str,
) -> None:
    """Config should fail for non-positive or non-numeric timeouts."""
    monkeypatch.setenv("DEPCACHE_COMMAND_TIMEOUT", raw_value)

    with pytest.raises(DepCacheConfigError):
        DepCacheConfig.from_env()

    assert os.getenv("DEPCACHE_COMMAND_TIMEOUT") == raw_value
