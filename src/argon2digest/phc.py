"""PHC string format for Argon2id, as written by the reference ``argon2`` CLI.

Layout::

    $argon2id$v=<version>$m=<memory>,t=<iterations>,p=<threads>$<salt>$<digest>

Salt and digest are standard-alphabet base64 without ``=`` padding.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

from pydantic import BaseModel, ConfigDict

from argon2digest.errors import (
    FieldParseError,
    IncompatibleVersionError,
    InvalidHashError,
    UnsupportedAlgorithmError,
)
from argon2digest.primitive import ALGORITHM, VERSION

logger = logging.getLogger(__name__)

_SEGMENTS = 6
_U32_MAX = 2**32 - 1

_VERSION_RE = re.compile(r"v=([0-9]+)")
_PARAMS_RE = re.compile(r"m=([0-9]+),t=([0-9]+),p=([0-9]+)")
_B64_RE = re.compile(r"[A-Za-z0-9+/]*")


class PHCFields(BaseModel):
    """Typed view of one decoded PHC string."""

    model_config = ConfigDict(frozen=True)

    version: int
    memory: int
    iterations: int
    threads: int
    salt: bytes
    digest: bytes


def b64encode_unpadded(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode_strict(value: str) -> bytes:
    """Decode unpadded standard base64, rejecting anything non-canonical.

    Padding, whitespace, characters outside the standard alphabet, impossible
    lengths and non-zero trailing bits all raise ``binascii.Error``.
    """
    if not _B64_RE.fullmatch(value):
        raise binascii.Error("invalid character in base64 input")
    if len(value) % 4 == 1:
        raise binascii.Error("invalid base64 length")
    padded = value + "=" * (-len(value) % 4)
    raw = base64.b64decode(padded, validate=True)
    if b64encode_unpadded(raw) != value:
        raise binascii.Error("non-zero trailing bits in base64 input")
    return raw


def encode(
    *,
    memory: int,
    iterations: int,
    threads: int,
    salt: bytes,
    digest: bytes,
    version: int = VERSION,
) -> str:
    """Format a PHC string. Field order is fixed."""
    return (
        f"${ALGORITHM}$v={version}"
        f"$m={memory},t={iterations},p={threads}"
        f"${b64encode_unpadded(salt)}${b64encode_unpadded(digest)}"
    )


# ---------------------------------------------------------------------------
# Decoding, one step per field
# ---------------------------------------------------------------------------


def _split(encoded: str) -> list[str]:
    parts = encoded.split("$")
    if len(parts) != _SEGMENTS or parts[0] != "":
        raise InvalidHashError()
    if parts[1] != ALGORITHM:
        raise UnsupportedAlgorithmError(parts[1])
    return parts


def _to_int(field: str, digits: str) -> int:
    try:
        return int(digits)
    except ValueError as exc:
        # Longer than the interpreter's int conversion limit.
        raise FieldParseError(field, str(exc)) from exc


def _parse_version(segment: str) -> int:
    match = _VERSION_RE.fullmatch(segment)
    if match is None:
        raise FieldParseError("version", f"expected 'v=<int>', got {segment!r}")
    version = _to_int("version", match.group(1))
    if version != VERSION:
        raise IncompatibleVersionError(found=version, expected=VERSION)
    return version


def _parse_params(segment: str) -> tuple[int, int, int]:
    match = _PARAMS_RE.fullmatch(segment)
    if match is None:
        raise FieldParseError("parameters", f"expected 'm=<int>,t=<int>,p=<int>', got {segment!r}")
    memory, iterations, threads = (_to_int("parameters", g) for g in match.groups())
    if not (0 < memory <= _U32_MAX and 0 < iterations <= _U32_MAX):
        raise FieldParseError("parameters", "memory and iterations must fit in 1..2**32-1")
    if not 0 < threads <= 255:
        raise FieldParseError("parameters", "parallelism must be in 1..255")
    return memory, iterations, threads


def _parse_bytes(field: str, segment: str) -> bytes:
    try:
        return b64decode_strict(segment)
    except binascii.Error as exc:
        raise FieldParseError(field, str(exc)) from exc


def parse(encoded: str) -> PHCFields:
    """Decode *encoded* into its fields.

    Raises :class:`InvalidHashError`, :class:`IncompatibleVersionError` or
    :class:`FieldParseError`. The digest is taken at face value.
    """
    parts = _split(encoded)
    version = _parse_version(parts[2])
    memory, iterations, threads = _parse_params(parts[3])
    salt = _parse_bytes("salt", parts[4])
    digest = _parse_bytes("digest", parts[5])
    logger.debug(
        "decoded argon2id hash m=%d t=%d p=%d salt_len=%d key_len=%d",
        memory,
        iterations,
        threads,
        len(salt),
        len(digest),
    )
    return PHCFields(
        version=version,
        memory=memory,
        iterations=iterations,
        threads=threads,
        salt=salt,
        digest=digest,
    )
