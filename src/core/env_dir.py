"""Config-var export from an env directory.

Each file in the directory holds one variable: the file name is the key
and the file content is the value. Variables that would hijack tool
lookup or dynamic linking are never exported.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import ENV_DIR_BLACKLIST
from core.errors import DepCacheConfigError
from core.logging_config import get_logger
from core.types import ExecutionEnvironment

_LOGGER = get_logger(__name__)


def read_env_dir(env_dir: Path) -> dict[str, str]:
    """Read exportable config vars from an env directory.

    Args:
        env_dir: Directory with one file per variable.

    Returns:
        Mapping of variable names to values, blacklisted names removed.

    Raises:
        DepCacheConfigError: If the directory or a variable file is unreadable.
    """
    if not env_dir.is_dir():
        raise DepCacheConfigError(
            f"Env dir {env_dir} does not exist or is not a directory. "
            "Pass an existing directory or omit --env-dir."
        )
    variables: dict[str, str] = {}
    skipped: list[str] = []
    for entry in sorted(env_dir.iterdir()):
        if not entry.is_file():
            continue
        if entry.name in ENV_DIR_BLACKLIST:
            skipped.append(entry.name)
            continue
        try:
            variables[entry.name] = entry.read_text(encoding="utf-8").rstrip("\n")
        except OSError as error:
            raise DepCacheConfigError(
                f"Failed to read config var {entry.name} from {env_dir}: {error}."
            ) from error
    _LOGGER.info(
        "env_dir_exported",
        env_dir=str(env_dir),
        exported=sorted(variables),
        skipped=skipped,
    )
    return variables


def export_env_dir(
    environment: ExecutionEnvironment,
    env_dir: Path | None,
) -> ExecutionEnvironment:
    """Return an environment extended with config vars from an env dir."""
    if env_dir is None:
        return environment
    return environment.with_variables(read_env_dir(env_dir))
