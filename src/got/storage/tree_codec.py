"""Encoding of tree payloads.

A tree payload is a run of entries, each laid out as::

    <mode> <name>\\x00<20 raw digest bytes>

with no separator between entries. Names are raw bytes (never containing
``/`` or NUL); digests are stored in binary, not hex. Directories are
written with mode ``40000``, as Git writes them; ``040000`` is also
accepted when decoding.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from got.constants import RAW_HASH_LENGTH
from got.storage.codec import Kind
from got.storage.digest import from_raw, to_raw
from got.storage.errors import (
    MalformedTreeEntryError,
    TrailingTreeBytesError,
    TruncatedTreeEntryError,
)


class TreeMode(str, Enum):
    """File modes that may appear in a tree entry."""

    REGULAR = "100644"
    EXECUTABLE = "100755"
    DIRECTORY = "040000"
    SYMLINK = "120000"

    @property
    def encoded(self) -> bytes:
        """Mode as written into a tree payload (directories drop the leading 0)."""
        return self.value.lstrip("0").encode("ascii")

    @property
    def kind(self) -> Kind:
        """Kind of the object an entry with this mode refers to."""
        return Kind.TREE if self is TreeMode.DIRECTORY else Kind.BLOB

    @classmethod
    def parse(cls, token: bytes) -> "TreeMode":
        try:
            return cls(token.decode("ascii").rjust(6, "0"))
        except (UnicodeDecodeError, ValueError):
            raise MalformedTreeEntryError(
                f"Unknown tree entry mode: {token!r}"
            ) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TreeEntry:
    """One named child of a tree."""

    mode: TreeMode
    name: bytes
    digest: str

    def __post_init__(self):
        if isinstance(self.name, str):
            object.__setattr__(self, "name", self.name.encode("utf-8"))
        object.__setattr__(self, "mode", TreeMode(self.mode))
        if not self.name or b"/" in self.name or b"\x00" in self.name:
            raise ValueError(f"Invalid tree entry name: {self.name!r}")

    @property
    def kind(self) -> Kind:
        return self.mode.kind

    @property
    def display_name(self) -> str:
        return self.name.decode("utf-8", errors="surrogateescape")


def encode_entries(entries: Iterable[TreeEntry]) -> bytes:
    """Concatenate entries in the order given.

    Raises:
        ValueError: If two entries share a name
    """
    seen = set()
    parts = []
    for entry in entries:
        if entry.name in seen:
            raise ValueError(f"Duplicate tree entry name: {entry.name!r}")
        seen.add(entry.name)
        parts.append(entry.mode.encoded + b" " + entry.name + b"\x00")
        parts.append(to_raw(entry.digest))
    return b"".join(parts)


def sort_entries(entries: Iterable[TreeEntry]) -> List[TreeEntry]:
    """Return entries ordered by name bytes."""
    return sorted(entries, key=lambda entry: entry.name)


def decode_entries(payload: bytes) -> List[TreeEntry]:
    """Parse a tree payload back into its entries, in stored order.

    Raises:
        MalformedTreeEntryError: If an entry has no NUL after its name, has no
            space between mode and name, or has an unknown mode
        TruncatedTreeEntryError: If fewer than 20 bytes follow a name
        TrailingTreeBytesError: If unterminated bytes follow the last entry
    """
    entries = []
    offset = 0
    size = len(payload)

    while offset < size:
        nul = payload.find(b"\x00", offset)
        if nul == -1:
            if entries:
                raise TrailingTreeBytesError(
                    f"Tree has {size - offset} trailing byte(s) after entry "
                    f"{len(entries)}: {payload[offset:offset + 40]!r}"
                )
            raise MalformedTreeEntryError(
                f"Tree entry at offset {offset} has no NUL after its name"
            )

        mode_token, sep, name = payload[offset:nul].partition(b" ")
        if not sep or not name:
            raise MalformedTreeEntryError(
                f"Tree entry at offset {offset} is not '<mode> <name>': "
                f"{payload[offset:nul]!r}"
            )
        mode = TreeMode.parse(mode_token)

        start = nul + 1
        end = start + RAW_HASH_LENGTH
        if end > size:
            raise TruncatedTreeEntryError(
                f"Tree entry {name!r} has {size - start} digest byte(s), "
                f"needs {RAW_HASH_LENGTH}"
            )

        try:
            entries.append(TreeEntry(mode, name, from_raw(payload[start:end])))
        except ValueError as e:
            raise MalformedTreeEntryError(f"Tree entry at offset {offset}: {e}") from e
        offset = end

    return entries
