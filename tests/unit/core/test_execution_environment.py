"""Unit tests for execution environments and status output."""

from __future__ import annotations

import io
import os

from core.status_stream import StatusStream
from core.types import ExecutionEnvironment


def test_with_path_entries_prepends_new_entries() -> None:
    """Later stages' bin dirs take priority over earlier ones."""
    environment = ExecutionEnvironment(path_entries=("/app/node_modules/.bin",))

    updated = environment.with_path_entries(("/app/vendor/bundle/bin", "/app/node_modules/.bin"))

    assert updated.path_entries == ("/app/vendor/bundle/bin", "/app/node_modules/.bin")


def test_to_process_env_merges_path_and_variables() -> None:
    """Process env should layer variables and PATH over the base env."""
    environment = ExecutionEnvironment(variables={"NODE_ENV": "production"}, path_entries=("/x",))

    process_env = environment.to_process_env({"PATH": "/usr/bin", "HOME": "/root"})

    assert process_env == {
        "PATH": os.pathsep.join(["/x", "/usr/bin"]),
        "HOME": "/root",
        "NODE_ENV": "production",
    }


def test_environment_values_are_independent() -> None:
    """Deriving an environment must not mutate the original."""
    base = ExecutionEnvironment()

    base.with_variables({"A": "1"}).with_path_entries(("/bin",))

    assert base.variables == {} and base.path_entries == ()


def test_status_stream_formats_status_and_protip() -> None:
    """Status and protip lines use distinct prefixes."""
    buffer = io.StringIO()
    stream = StatusStream(buffer)

    stream.status("Installing node dependencies")
    stream.protip("Add node_modules to .gitignore")

    assert buffer.getvalue().splitlines() == [
        "-----> Installing node dependencies",
        "       PRO TIP: Add node_modules to .gitignore",
    ]
