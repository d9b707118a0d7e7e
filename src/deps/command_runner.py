"""External command execution capability.

Package managers and the build tool are opaque processes. Everything that
invokes them goes through ``CommandRunner`` so tests can substitute a
recording fake.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from core.logging_config import get_logger
from core.types import ExecutionEnvironment, ExitStatus

_LOGGER = get_logger(__name__)
COMMAND_NOT_FOUND_EXIT_CODE = 127
COMMAND_TIMEOUT_EXIT_CODE = 124


class CommandRunner(Protocol):
    """Capability to run one external command to completion."""

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        env: ExecutionEnvironment,
    ) -> ExitStatus: ...


class SubprocessCommandRunner:
    """Runs commands as blocking child processes.

    Child output is inherited so tool progress appears in the build log.
    """

    def __init__(self, timeout_seconds: int | None = None) -> None:
        self._timeout_seconds = timeout_seconds

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        env: ExecutionEnvironment,
    ) -> ExitStatus:
        """Run a command and return its exit status.

        Args:
            command: Executable name or path.
            args: Command arguments.
            cwd: Working directory for the child process.
            env: Explicit execution environment.

        Returns:
            Exit status; 127 when the executable is missing, 124 on timeout.
        """
        process_env = env.to_process_env(os.environ)
        argv = [command, *args]
        _LOGGER.info("command_started", argv=argv, cwd=str(cwd))
        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                env=process_env,
                check=False,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError:
            _LOGGER.error("command_not_found", command=command)
            return ExitStatus(code=COMMAND_NOT_FOUND_EXIT_CODE)
        except subprocess.TimeoutExpired:
            _LOGGER.error("command_timed_out", argv=argv, timeout_seconds=self._timeout_seconds)
            return ExitStatus(code=COMMAND_TIMEOUT_EXIT_CODE)
        _LOGGER.info("command_finished", argv=argv, exit_code=completed.returncode)
        return ExitStatus(code=completed.returncode)
