"""Tests for the argon2digest command line."""

from __future__ import annotations

import argparse
import json

import argon2digest.cli as cli_module
from argon2digest import VERSION, Argon2Digest
from argon2digest.cli import (
    EXIT_BAD_ARGS,
    EXIT_INCOMPATIBLE_VERSION,
    EXIT_INVALID_HASH,
    EXIT_MISMATCH,
    EXIT_OK,
    EXIT_RANDOM_SOURCE,
)
from argon2digest.errors import RandomSourceError
from conftest import run_cli

_FAST = ("--time-cost", "1", "--memory-cost", "64", "--parallelism", "1")


def _stored(secret: str, fast_settings) -> str:  # type: ignore[no-untyped-def]
    return Argon2Digest.from_string(secret, fast_settings).encode()


# ---------------------------------------------------------------------------
# In-process command handlers
# ---------------------------------------------------------------------------


class TestSettingsFromArgs:
    def test_only_given_flags_override(self):
        args = argparse.Namespace(
            time_cost=7, memory_cost=None, parallelism=None, key_length=None, salt_length=None
        )
        settings = cli_module._settings_from_args(args)
        assert settings.time_cost == 7
        assert settings.memory_cost == 32 * 1024


class TestHashCommand:
    def test_random_source_failure(self, monkeypatch, capsys):
        def _broken(self, secret):  # type: ignore[no-untyped-def]
            raise RandomSourceError("entropy source failed: boom")

        monkeypatch.setattr(cli_module.Argon2Digest, "generate_digest", _broken)
        monkeypatch.setattr(cli_module.getpass, "getpass", lambda prompt="": "pw")
        exit_code = cli_module.main(["hash", *_FAST])
        assert exit_code == EXIT_RANDOM_SOURCE
        assert "entropy" in capsys.readouterr().err

    def test_prompts_for_secret(self, monkeypatch, capsys):
        monkeypatch.setattr(cli_module.getpass, "getpass", lambda prompt="": "pw")
        exit_code = cli_module.main(["hash", *_FAST])
        assert exit_code == EXIT_OK
        encoded = json.loads(capsys.readouterr().out)["encoded"]
        assert Argon2Digest.from_encoded(encoded).compare("pw")

    def test_invalid_cost_parameters(self, capsys):
        exit_code = cli_module.main(["hash", "--parallelism", "0", "--secret-stdin"])
        assert exit_code == EXIT_BAD_ARGS
        assert "invalid cost parameters" in capsys.readouterr().err


class TestInspectCommand:
    def test_oversized_number_is_invalid_hash(self, capsys):
        encoded = f"$argon2id$v={VERSION}$m={'9' * 5000},t=1,p=1$AAAA$AAAA"
        exit_code = cli_module.main(["inspect", "--encoded", encoded])
        assert exit_code == EXIT_INVALID_HASH
        assert "parameters" in capsys.readouterr().err


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert cli_module.main([]) == EXIT_BAD_ARGS
        assert "argon2digest" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# CLI integration (using subprocess to avoid sys.exit leaking)
# ---------------------------------------------------------------------------


class TestCLIHelp:
    def test_help_returns_zero(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "argon2digest" in result.stdout

    def test_hash_help(self):
        result = run_cli("hash", "--help")
        assert result.returncode == 0
        assert "--memory-cost" in result.stdout


class TestCLIHash:
    def test_hash_from_stdin(self):
        result = run_cli("hash", "--secret-stdin", *_FAST, stdin="password123\n")
        assert result.returncode == EXIT_OK
        encoded = json.loads(result.stdout)["encoded"]
        assert encoded.startswith(f"$argon2id$v={VERSION}$m=64,t=1,p=1$")
        assert Argon2Digest.from_encoded(encoded).compare("password123")

    def test_env_overrides_cost(self):
        result = run_cli(
            "hash",
            "--secret-stdin",
            stdin="pw\n",
            env_override={
                "ARGON2DIGEST_TIME_COST": "2",
                "ARGON2DIGEST_MEMORY_COST": "128",
                "ARGON2DIGEST_PARALLELISM": "2",
            },
        )
        assert result.returncode == EXIT_OK
        assert "$m=128,t=2,p=2$" in json.loads(result.stdout)["encoded"]


class TestCLIVerify:
    def test_match(self, fast_settings):
        stored = _stored("password123", fast_settings)
        result = run_cli("verify", "--encoded", stored, "--secret-stdin", stdin="password123\n")
        assert result.returncode == EXIT_OK
        assert json.loads(result.stdout) == {"ok": True}

    def test_mismatch(self, fast_settings):
        stored = _stored("password123", fast_settings)
        result = run_cli("verify", "--encoded", stored, "--secret-stdin", stdin="p@ssword123\n")
        assert result.returncode == EXIT_MISMATCH
        assert json.loads(result.stdout) == {"ok": False}

    def test_invalid_hash(self):
        result = run_cli("verify", "--encoded", "$argon2id$v=19", "--secret-stdin", stdin="x\n")
        assert result.returncode == EXIT_INVALID_HASH
        assert "not in a supported format" in result.stderr

    def test_incompatible_version(self, fast_settings):
        stored = _stored("pw", fast_settings).replace(f"v={VERSION}", "v=16")
        result = run_cli("verify", "--encoded", stored, "--secret-stdin", stdin="pw\n")
        assert result.returncode == EXIT_INCOMPATIBLE_VERSION


class TestCLIInspect:
    def test_inspect(self, fast_settings):
        stored = _stored("pw", fast_settings)
        result = run_cli("inspect", "--encoded", stored, "--pretty")
        assert result.returncode == EXIT_OK
        data = json.loads(result.stdout)
        assert data == {
            "algorithm": "argon2id",
            "version": VERSION,
            "memory_cost": 64,
            "time_cost": 1,
            "parallelism": 1,
            "salt_length": 16,
            "key_length": 32,
        }

    def test_inspect_malformed_parameters(self):
        result = run_cli(
            "inspect", "--encoded", f"$argon2id$v={VERSION}$m=x,t=1,p=1$AAAA$AAAA"
        )
        assert result.returncode == EXIT_INVALID_HASH
        assert "parameters" in result.stderr
