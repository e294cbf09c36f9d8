"""Exception taxonomy for digest generation and PHC string decoding."""

from __future__ import annotations


class DigestError(Exception):
    """Base class for every error raised by argon2digest."""


class RandomSourceError(DigestError):
    """The OS entropy source could not supply salt bytes."""


class InvalidHashError(DigestError):
    """The encoded value is not in a supported format."""

    def __init__(self, message: str = "the encoded value is not in a supported format") -> None:
        super().__init__(message)


class UnsupportedAlgorithmError(InvalidHashError):
    """The encoded value names an algorithm other than ``argon2id``."""

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"unsupported algorithm {algorithm!r}, expected 'argon2id'")
        self.algorithm = algorithm


class IncompatibleVersionError(DigestError):
    """The encoded version does not match the version of the Argon2 primitive."""

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(f"incompatible version of argon2: found {found}, expected {expected}")
        self.found = found
        self.expected = expected


class FieldParseError(DigestError, ValueError):
    """One field of an encoded value could not be parsed.

    ``field`` is one of ``"version"``, ``"parameters"``, ``"salt"`` or ``"digest"``.
    The underlying parse failure, when there is one, is chained as ``__cause__``.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"malformed {field} field: {message}")
        self.field = field
