"""Content digests for Got objects.

A digest is the SHA-1 of an object's full canonical encoding (header, NUL
and payload). Its textual form is 40 lowercase hex characters; inside tree
and commit payloads it is stored as the 20 raw bytes.
"""

import hashlib
import string

from got.constants import HASH_ALGORITHM, HASH_LENGTH, RAW_HASH_LENGTH
from got.storage.errors import InvalidDigestError

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def digest_of(canonical: bytes) -> str:
    """Hash the complete canonical bytes of a record.

    Args:
        canonical: Uncompressed canonical encoding, as built by
            :func:`got.storage.codec.encode`

    Returns:
        40-character lowercase hex digest
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(canonical)
    return hasher.hexdigest()


def is_hex(value: str) -> bool:
    """Return True if value is non-empty and made only of lowercase hex digits."""
    return bool(value) and set(value) <= _HEX_DIGITS


def validate_digest(digest: str) -> str:
    """Check that a string is a full textual digest and normalise its case.

    Raises:
        InvalidDigestError: If the value is not 40 hex characters
    """
    if not isinstance(digest, str):
        raise InvalidDigestError(f"Digest must be string, got {type(digest)}")

    if len(digest) != HASH_LENGTH:
        raise InvalidDigestError(
            f"Digest must be {HASH_LENGTH} characters, got {len(digest)}"
        )

    digest = digest.lower()
    if not is_hex(digest):
        raise InvalidDigestError(f"Digest must be hexadecimal: {digest!r}")

    return digest


def to_raw(digest: str) -> bytes:
    """Convert a textual digest to its 20-byte binary form."""
    return bytes.fromhex(validate_digest(digest))


def from_raw(raw: bytes) -> str:
    """Convert a 20-byte binary digest to lowercase hex."""
    if len(raw) != RAW_HASH_LENGTH:
        raise InvalidDigestError(
            f"Raw digest must be {RAW_HASH_LENGTH} bytes, got {len(raw)}"
        )
    return bytes(raw).hex()
