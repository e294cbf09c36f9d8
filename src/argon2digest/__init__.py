"""argon2digest - Argon2id password digests in the PHC string format.

Typical use::

    from argon2digest import Argon2Digest

    stored = Argon2Digest.from_string("hunter2").encode()
    Argon2Digest.from_encoded(stored).compare("hunter2")  # True
"""

from argon2digest.config import DigestSettings
from argon2digest.digest import Argon2Digest, DecodeResult, decode
from argon2digest.errors import (
    DigestError,
    FieldParseError,
    IncompatibleVersionError,
    InvalidHashError,
    RandomSourceError,
    UnsupportedAlgorithmError,
)
from argon2digest.primitive import VERSION
from argon2digest.version import __version__

__all__ = [
    "VERSION",
    "Argon2Digest",
    "DecodeResult",
    "DigestError",
    "DigestSettings",
    "FieldParseError",
    "IncompatibleVersionError",
    "InvalidHashError",
    "RandomSourceError",
    "UnsupportedAlgorithmError",
    "__version__",
    "decode",
]
