"""argon2digest command line.

Provides the ``argon2digest`` console script and ``python -m argon2digest`` entry point.
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from argon2digest import phc
from argon2digest.config import DigestSettings
from argon2digest.digest import Argon2Digest, decode
from argon2digest.errors import (
    DigestError,
    IncompatibleVersionError,
    RandomSourceError,
)
from argon2digest.primitive import ALGORITHM
from argon2digest.version import __version__

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_BAD_ARGS = 2
EXIT_INVALID_HASH = 3
EXIT_INCOMPATIBLE_VERSION = 4
EXIT_RANDOM_SOURCE = 5

_SETTINGS_FLAGS = ("time_cost", "memory_cost", "parallelism", "key_length", "salt_length")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _output(data: Any, *, fmt: str = "json", pretty: bool = False) -> None:
    if fmt == "jsonl":
        if isinstance(data, list):
            for item in data:
                print(json.dumps(item, default=str))
        else:
            print(json.dumps(data, default=str))
    else:
        indent = 2 if pretty else None
        print(json.dumps(data, default=str, indent=indent))


def _err(msg: str) -> None:
    print(msg, file=sys.stderr)


def _read_secret(args: argparse.Namespace) -> str:
    """Read the secret from the first line of stdin or an interactive prompt."""
    if getattr(args, "secret_stdin", False):
        return sys.stdin.readline().rstrip("\r\n")
    return getpass.getpass("Secret: ")


def _settings_from_args(args: argparse.Namespace) -> DigestSettings:
    overrides = {
        name: getattr(args, name)
        for name in _SETTINGS_FLAGS
        if getattr(args, name, None) is not None
    }
    return DigestSettings(**overrides)


def _decode_error_exit(exc: DigestError) -> int:
    _err(str(exc))
    if isinstance(exc, IncompatibleVersionError):
        return EXIT_INCOMPATIBLE_VERSION
    return EXIT_INVALID_HASH


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_hash(args: argparse.Namespace) -> int:
    try:
        settings = _settings_from_args(args)
    except ValidationError as exc:
        _err(f"invalid cost parameters: {exc}")
        return EXIT_BAD_ARGS

    record = Argon2Digest(settings)
    try:
        record.generate_digest(_read_secret(args))
    except RandomSourceError as exc:
        _err(str(exc))
        return EXIT_RANDOM_SOURCE
    _output({"encoded": record.encode()}, fmt=args.format, pretty=args.pretty)
    return EXIT_OK


def _cmd_verify(args: argparse.Namespace) -> int:
    result = decode(args.encoded)
    if result.error is not None:
        return _decode_error_exit(result.error)

    ok = result.unwrap().compare(_read_secret(args))
    _output({"ok": ok}, fmt=args.format, pretty=args.pretty)
    return EXIT_OK if ok else EXIT_MISMATCH


def _cmd_inspect(args: argparse.Namespace) -> int:
    try:
        fields = phc.parse(args.encoded)
    except DigestError as exc:
        return _decode_error_exit(exc)

    _output(
        {
            "algorithm": ALGORITHM,
            "version": fields.version,
            "memory_cost": fields.memory,
            "time_cost": fields.iterations,
            "parallelism": fields.threads,
            "salt_length": len(fields.salt),
            "key_length": len(fields.digest),
        },
        fmt=args.format,
        pretty=args.pretty,
    )
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def _add_secret_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--secret-stdin",
        action="store_true",
        default=False,
        help="Read the secret from the first line of stdin instead of prompting",
    )


def _build_parser() -> argparse.ArgumentParser:
    # Common flags shared by all leaf subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--format", choices=["json", "jsonl"], default="json", help="Output format"
    )
    common.add_argument("--pretty", action="store_true", default=False, help="Pretty-print output")

    parser = argparse.ArgumentParser(
        prog="argon2digest",
        description="Argon2id password digests in the PHC string format",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- hash ----
    hash_parser = subparsers.add_parser(
        "hash", parents=[common], help="Hash a secret and print the encoded digest"
    )
    _add_secret_source(hash_parser)
    hash_parser.add_argument("--time-cost", type=int, default=None, help="Iterations")
    hash_parser.add_argument("--memory-cost", type=int, default=None, help="Memory in KiB")
    hash_parser.add_argument("--parallelism", type=int, default=None, help="Lanes (1-255)")
    hash_parser.add_argument("--key-length", type=int, default=None, help="Digest bytes")
    hash_parser.add_argument("--salt-length", type=int, default=None, help="Salt bytes")

    # ---- verify ----
    verify_parser = subparsers.add_parser(
        "verify", parents=[common], help="Check a secret against an encoded digest"
    )
    verify_parser.add_argument("--encoded", required=True, help="PHC encoded digest")
    _add_secret_source(verify_parser)

    # ---- inspect ----
    inspect_parser = subparsers.add_parser(
        "inspect", parents=[common], help="Show the parameters of an encoded digest"
    )
    inspect_parser.add_argument("--encoded", required=True, help="PHC encoded digest")

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns an integer exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "hash":
        return _cmd_hash(args)
    if args.command == "verify":
        return _cmd_verify(args)
    if args.command == "inspect":
        return _cmd_inspect(args)

    parser.print_help()
    return EXIT_BAD_ARGS
