"""Record framing and compression for Got objects.

Every stored object is a *record*: a kind tag, a decimal payload length,
a NUL separator and the payload itself::

    b"blob 6\\x00hello\\n"

This canonical form is what gets hashed and what gets zlib-compressed onto
disk. Decoding is strict: the declared length must match the payload
exactly.
"""

import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from got.storage.errors import (
    CorruptObjectError,
    InvalidLengthError,
    MalformedHeaderError,
    TrailingBytesError,
    TruncatedRecordError,
    UnknownKindError,
)

# Header is short; anything longer than this before a NUL is not a header
MAX_HEADER_LENGTH = 64


class Kind(str, Enum):
    """Object kinds recognised in a record header."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"
    TAG = "tag"

    @classmethod
    def parse(cls, token: str) -> "Kind":
        """Return the Kind named by a header token.

        Raises:
            UnknownKindError: If the token is not one of the four kinds
        """
        try:
            return cls(token)
        except ValueError:
            raise UnknownKindError(f"Unknown object kind: {token!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Record:
    """An object kind together with its payload bytes."""

    kind: Kind
    payload: bytes

    @property
    def size(self) -> int:
        return len(self.payload)


def encode(kind: Kind, payload: bytes) -> bytes:
    """Build the canonical encoding of a record.

    Args:
        kind: Object kind
        payload: Raw payload bytes

    Returns:
        ``b"<kind> <len>\\x00" + payload``
    """
    kind = Kind(kind)
    header = f"{kind.value} {len(payload)}".encode("ascii")
    return header + b"\x00" + bytes(payload)


def decode_header(data: bytes) -> Tuple[Kind, int, int]:
    """Parse the header of canonical bytes.

    Returns:
        Tuple of (kind, declared length, offset of first payload byte)

    Raises:
        MalformedHeaderError: If there is no NUL-terminated two-field header
        UnknownKindError: If the kind token is unrecognised
        InvalidLengthError: If the length token is not a decimal integer
    """
    nul = data.find(b"\x00", 0, MAX_HEADER_LENGTH + 1)
    if nul == -1:
        raise MalformedHeaderError(
            f"Object header is not NUL-terminated: {data[:MAX_HEADER_LENGTH]!r}"
        )

    raw_header = data[:nul]
    try:
        header = raw_header.decode("ascii")
    except UnicodeDecodeError:
        raise MalformedHeaderError(
            f"Object header is not ASCII: {raw_header!r}"
        ) from None

    kind_token, sep, length_token = header.partition(" ")
    if not sep or not kind_token or " " in length_token:
        raise MalformedHeaderError(
            f"Object header is not '<kind> <length>': {header!r}"
        )

    kind = Kind.parse(kind_token)

    # isdigit() alone accepts unicode digits; the header is already ASCII
    if not length_token.isdigit():
        raise InvalidLengthError(
            f"Object header has invalid length {length_token!r}: {header!r}"
        )

    return kind, int(length_token), nul + 1


def decode(data: bytes) -> Record:
    """Decode canonical bytes back into a Record.

    Args:
        data: Uncompressed canonical bytes

    Returns:
        The decoded Record

    Raises:
        MalformedHeaderError, UnknownKindError, InvalidLengthError: Bad header
        TruncatedRecordError: Fewer payload bytes than declared
        TrailingBytesError: More bytes than declared
    """
    kind, length, start = decode_header(data)
    available = len(data) - start

    if available < length:
        raise TruncatedRecordError(
            f"{kind.value} record declares {length} bytes but only {available} remain"
        )
    if available > length:
        raise TrailingBytesError(
            f"{kind.value} record has {available - length} trailing byte(s) "
            f"after its {length}-byte payload"
        )

    return Record(kind=kind, payload=bytes(data[start:]))


def compress(data: bytes) -> bytes:
    """Deflate canonical bytes at zlib's default level."""
    return zlib.compress(data, zlib.Z_DEFAULT_COMPRESSION)


def decompress(data: bytes) -> bytes:
    """Inflate a stored object.

    Raises:
        CorruptObjectError: If the zlib stream is damaged, incomplete, or
            followed by extra bytes
    """
    inflater = zlib.decompressobj()
    try:
        result = inflater.decompress(data)
        result += inflater.flush()
    except zlib.error as e:
        raise CorruptObjectError(f"Cannot decompress object: {e}") from e

    if not inflater.eof:
        raise CorruptObjectError("Compressed object stream ends prematurely")
    if inflater.unused_data:
        raise CorruptObjectError(
            f"Compressed object has {len(inflater.unused_data)} byte(s) "
            "after the end of its stream"
        )
    return result
