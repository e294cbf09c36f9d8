"""Thin seam over the external collaborators: Argon2id, the OS CSPRNG and a
constant-time byte comparison.

Everything cryptographic is delegated. argon2-cffi provides the memory-hard
function, :mod:`secrets` the randomness and :func:`hmac.compare_digest` the
comparison.
"""

from __future__ import annotations

import hmac
import logging
import secrets

from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from argon2digest.errors import RandomSourceError

logger = logging.getLogger(__name__)

ALGORITHM = "argon2id"

# Version identifier of the linked Argon2 implementation (0x13 == 19).
VERSION: int = ARGON2_VERSION


def derive(
    secret: bytes,
    salt: bytes,
    *,
    time_cost: int,
    memory_cost: int,
    parallelism: int,
    output_length: int,
) -> bytes:
    """Run Argon2id over *secret* and *salt* and return *output_length* raw bytes.

    Raises ``argon2.exceptions.HashingError`` for parameters the primitive rejects.
    """
    logger.debug(
        "deriving argon2id digest m=%d t=%d p=%d salt_len=%d key_len=%d",
        memory_cost,
        time_cost,
        parallelism,
        len(salt),
        output_length,
    )
    return hash_secret_raw(
        secret=secret,
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=output_length,
        type=Type.ID,
        version=VERSION,
    )


def random_bytes(nbytes: int) -> bytes:
    """Return *nbytes* bytes from the OS CSPRNG.

    Failure of the OS source surfaces as :class:`RandomSourceError`; there is no
    fallback to a weaker generator.
    """
    if nbytes <= 0:
        raise ValueError("nbytes must be > 0")
    try:
        return secrets.token_bytes(nbytes)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"entropy source failed: {exc}") from exc


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare *a* and *b* without exiting early on the first differing byte."""
    return hmac.compare_digest(a, b)
