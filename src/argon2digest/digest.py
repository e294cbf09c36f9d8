"""The Argon2id digest record.

A record is created either from cost parameters and then filled by
:meth:`Argon2Digest.generate_digest`, or rebuilt from a stored PHC string with
:meth:`Argon2Digest.from_encoded`. Verification re-derives with the stored salt
and parameters and compares in constant time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

from argon2.exceptions import HashingError

from argon2digest import phc, primitive
from argon2digest.config import DigestSettings
from argon2digest.errors import DigestError

logger = logging.getLogger(__name__)

_COST_FIELDS = frozenset({"iterations", "memory", "threads", "key_length", "salt_length"})


def _as_bytes(secret: bytes | str) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8", "surrogatepass")
    return bytes(secret)


class Argon2Digest:
    """Cost parameters, salt and digest for one password.

    Cost fields may be reassigned until a digest exists. After that the record
    only changes through another :meth:`generate_digest` call.
    """

    iterations: int
    memory: int
    threads: int
    key_length: int
    salt_length: int

    def __init__(self, settings: DigestSettings | None = None) -> None:
        if settings is None:
            settings = DigestSettings()
        self._salt = b""
        self._digest = b""
        self.iterations = settings.time_cost
        self.memory = settings.memory_cost
        self.threads = settings.parallelism
        self.key_length = settings.key_length
        self.salt_length = settings.salt_length

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _COST_FIELDS and getattr(self, "_digest", b""):
            raise AttributeError(
                f"cannot change {name!r} once a digest has been generated; create a new record"
            )
        super().__setattr__(name, value)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, secret: bytes, settings: DigestSettings | None = None) -> Argon2Digest:
        """Build a record and generate a digest for *secret* in one step."""
        record = cls(settings)
        record.generate_digest(secret)
        return record

    @classmethod
    def from_string(cls, secret: str, settings: DigestSettings | None = None) -> Argon2Digest:
        """Like :meth:`from_bytes` for a text secret (UTF-8 encoded)."""
        return cls.from_bytes(_as_bytes(secret), settings)

    @classmethod
    def from_encoded(cls, encoded: str) -> Argon2Digest:
        """Rebuild a record from a PHC string, raising on malformed input."""
        return decode(encoded).unwrap()

    @classmethod
    def _from_fields(cls, fields: phc.PHCFields) -> Argon2Digest:
        record = cls.__new__(cls)
        # Lengths come from the decoded bytes, not from any separate field.
        record.__dict__.update(
            _salt=fields.salt,
            _digest=fields.digest,
            iterations=fields.iterations,
            memory=fields.memory,
            threads=fields.threads,
            salt_length=len(fields.salt),
            key_length=len(fields.digest),
        )
        return record

    # ------------------------------------------------------------------
    # Salt & digest
    # ------------------------------------------------------------------

    @property
    def salt(self) -> bytes:
        return self._salt

    @property
    def digest(self) -> bytes:
        return self._digest

    def _derive(self, secret: bytes, salt: bytes) -> bytes:
        return primitive.derive(
            secret,
            salt,
            time_cost=self.iterations,
            memory_cost=self.memory,
            parallelism=self.threads,
            output_length=self.key_length,
        )

    def generate_digest(self, secret: bytes | str) -> None:
        """Draw a fresh salt and derive the digest of *secret*.

        Any previous salt and digest are replaced. Raises
        :class:`~argon2digest.errors.RandomSourceError` if the OS cannot supply
        entropy; the record is left untouched in that case.
        """
        salt = primitive.random_bytes(self.salt_length)
        digest = self._derive(_as_bytes(secret), salt)
        self.__dict__.update(_salt=salt, _digest=digest)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, candidate: str) -> bool:
        """Return True when *candidate* matches the stored digest.

        Text is UTF-8 encoded with lone surrogates passed through, so no string raises.
        """
        return self.compare_bytes(_as_bytes(candidate))

    def compare_bytes(self, candidate: bytes) -> bool:
        """Return True when *candidate* matches the stored digest.

        Uses the stored salt and parameters. Never raises on content: a record
        without a digest, or parameters the primitive refuses, simply do not match.
        """
        if not self._digest:
            return False
        try:
            provided = self._derive(bytes(candidate), self._salt)
        except HashingError as exc:
            logger.warning(
                "argon2id rejected stored parameters m=%d t=%d p=%d: %s",
                self.memory,
                self.iterations,
                self.threads,
                exc,
            )
            return False
        return primitive.constant_time_equal(self._digest, provided)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self) -> str:
        """Return the PHC string, as written by the reference ``argon2`` CLI."""
        return phc.encode(
            memory=self.memory,
            iterations=self.iterations,
            threads=self.threads,
            salt=self._salt,
            digest=self._digest,
        )

    def __str__(self) -> str:
        return self.encode()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(m={self.memory}, t={self.iterations}, p={self.threads}, "
            f"salt_length={self.salt_length}, key_length={self.key_length})"
        )


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`decode`: either a record or the error that stopped parsing."""

    record: Argon2Digest | None = None
    error: DigestError | None = None

    def __post_init__(self) -> None:
        if (self.record is None) == (self.error is None):
            raise ValueError("DecodeResult needs exactly one of record or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Argon2Digest:
        if self.error is not None:
            raise self.error
        return cast(Argon2Digest, self.record)


def decode(encoded: str) -> DecodeResult:
    """Parse a PHC string into a :class:`DecodeResult` without raising."""
    try:
        fields = phc.parse(encoded)
    except DigestError as exc:
        return DecodeResult(error=exc)
    return DecodeResult(record=Argon2Digest._from_fields(fields))
