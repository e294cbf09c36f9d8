"""Common test fixtures and helpers."""

import os
import subprocess
import sys

import pytest

from argon2digest import DigestSettings


def run_cli(
    *args: str, stdin: str | None = None, env_override: dict[str, str] | None = None
) -> subprocess.CompletedProcess:
    """Run the CLI via ``python -m argon2digest``."""
    env = os.environ.copy()
    if env_override:
        env.update(env_override)
    return subprocess.run(
        [sys.executable, "-m", "argon2digest", *args],
        input=stdin,
        capture_output=True,
        text=True,
        env=env,
    )


@pytest.fixture
def fast_settings() -> DigestSettings:
    """Cheap cost parameters so tests stay quick."""
    return DigestSettings(time_cost=1, memory_cost=64, parallelism=1)
