"""Commit object builder and serializer.

A commit points at a tree (and optionally a parent commit) and records who
made it, when, and why. Its payload is a sequence of NUL-delimited sections::

    <20 raw tree digest bytes>\\x00
    author <author>\\x00
    timestamp <ISO-8601 UTC>\\x00
    message <message>
    [\\x00parent <20 raw parent digest bytes>]

Raw digests may themselves contain NUL bytes, so they are read by position
rather than by splitting on NUL.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from got.constants import RAW_HASH_LENGTH
from got.storage.codec import Kind
from got.storage.digest import from_raw, to_raw, validate_digest
from got.storage.errors import (
    DanglingParentReferenceError,
    DanglingTreeReferenceError,
    InvalidDigestError,
    MalformedCommitError,
    ObjectNotFoundError,
)
from got.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

AUTHOR_LABEL = b"author "
TIMESTAMP_LABEL = b"timestamp "
MESSAGE_LABEL = b"message "
PARENT_LABEL = b"parent "


@dataclass(frozen=True)
class Commit:
    """Decoded contents of a commit record."""

    tree: str
    author: str
    timestamp: str
    message: str
    parent: Optional[str] = None

    @property
    def created_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp)


def encode_commit(commit: Commit) -> bytes:
    """Serialize a Commit into its record payload.

    Raises:
        ValueError: If author or message contains a NUL byte
    """
    for label, value in (("author", commit.author), ("message", commit.message)):
        if "\x00" in value:
            raise ValueError(f"Commit {label} must not contain NUL bytes")

    parts = [
        to_raw(commit.tree),
        AUTHOR_LABEL + commit.author.encode("utf-8"),
        TIMESTAMP_LABEL + commit.timestamp.encode("ascii"),
        MESSAGE_LABEL + commit.message.encode("utf-8"),
    ]
    if commit.parent is not None:
        parts.append(PARENT_LABEL + to_raw(commit.parent))
    return b"\x00".join(parts)


def _take_section(data: bytes, offset: int, label: bytes) -> tuple:
    """Read one labelled NUL-terminated section starting at offset."""
    if not data.startswith(label, offset):
        raise MalformedCommitError(
            f"Expected {label.decode().strip()!r} section at offset {offset}"
        )
    nul = data.find(b"\x00", offset)
    if nul == -1:
        raise MalformedCommitError(
            f"Section {label.decode().strip()!r} is not NUL-terminated"
        )
    return data[offset + len(label):nul], nul + 1


def decode_commit(payload: bytes) -> Commit:
    """Parse a commit record payload.

    Raises:
        MalformedCommitError: If any section is missing or out of place
    """
    if len(payload) < RAW_HASH_LENGTH + 1 or payload[RAW_HASH_LENGTH] != 0:
        raise MalformedCommitError("Commit does not start with a raw tree digest")
    tree = from_raw(payload[:RAW_HASH_LENGTH])

    offset = RAW_HASH_LENGTH + 1
    author, offset = _take_section(payload, offset, AUTHOR_LABEL)
    timestamp, offset = _take_section(payload, offset, TIMESTAMP_LABEL)

    if not payload.startswith(MESSAGE_LABEL, offset):
        raise MalformedCommitError(f"Expected 'message' section at offset {offset}")
    offset += len(MESSAGE_LABEL)

    parent = None
    nul = payload.find(b"\x00", offset)
    if nul == -1:
        message = payload[offset:]
    else:
        message = payload[offset:nul]
        tail = payload[nul + 1:]
        if (
            not tail.startswith(PARENT_LABEL)
            or len(tail) != len(PARENT_LABEL) + RAW_HASH_LENGTH
        ):
            raise MalformedCommitError(
                f"Unexpected {len(tail)} byte(s) after commit message"
            )
        parent = from_raw(tail[len(PARENT_LABEL):])

    try:
        return Commit(
            tree=tree,
            author=author.decode("utf-8"),
            timestamp=timestamp.decode("ascii"),
            message=message.decode("utf-8"),
            parent=parent,
        )
    except UnicodeDecodeError as e:
        raise MalformedCommitError(f"Commit text is not valid UTF-8: {e}") from e


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CommitBuilder:
    """Builder for creating and persisting commit objects.

    Attributes:
        object_store: ObjectStore the tree and parent are checked against
            and the commit is written to
    """

    def __init__(
        self,
        object_store: ObjectStore,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize CommitBuilder.

        Args:
            object_store: ObjectStore for reading references and writing
            clock: Source of the commit timestamp (UTC)
        """
        self.object_store = object_store
        self.clock = clock

    def build(
        self,
        tree_digest: str,
        parent_digest: Optional[str],
        author: str,
        message: str,
    ) -> str:
        """Create a new commit object.

        Both references are validated before anything is written.

        Args:
            tree_digest: Digest of an existing tree
            parent_digest: Digest of an existing commit, or None for a root commit
            author: Author identifier (e.g., "user@hostname")
            message: Commit message

        Returns:
            Commit digest (40 hex characters)

        Raises:
            DanglingTreeReferenceError: If tree_digest is not a stored tree
            DanglingParentReferenceError: If parent_digest is not a stored commit
            ValueError: If author or message contains NUL
        """
        tree_digest = self._check_reference(
            tree_digest, Kind.TREE, DanglingTreeReferenceError, "Tree"
        )
        if parent_digest is not None:
            parent_digest = self._check_reference(
                parent_digest, Kind.COMMIT, DanglingParentReferenceError, "Parent"
            )

        commit = Commit(
            tree=tree_digest,
            parent=parent_digest,
            author=author,
            timestamp=self.clock().astimezone(timezone.utc).isoformat(),
            message=message,
        )
        digest = self.object_store.write(Kind.COMMIT, encode_commit(commit))
        logger.debug("committed %s (tree %s, parent %s)", digest, tree_digest, parent_digest)
        return digest

    def read_commit(self, commit_digest: str) -> Commit:
        """Read and decode a stored commit.

        Raises:
            ObjectNotFoundError: If the commit doesn't exist
            MalformedCommitError: If the object is not a commit or won't parse
        """
        record = self.object_store.read(commit_digest)
        if record.kind is not Kind.COMMIT:
            raise MalformedCommitError(
                f"Object {commit_digest} is a {record.kind.value}, not a commit"
            )
        return decode_commit(record.payload)

    def _check_reference(self, digest, expected_kind, error_cls, label) -> str:
        try:
            digest = validate_digest(digest)
            record = self.object_store.read(digest)
        except (InvalidDigestError, ObjectNotFoundError) as e:
            raise error_cls(f"{label} {digest} does not exist: {e}") from e

        if record.kind is not expected_kind:
            raise error_cls(
                f"{label} {digest} is a {record.kind.value}, not a {expected_kind.value}"
            )
        return digest
