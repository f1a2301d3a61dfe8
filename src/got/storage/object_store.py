"""Content-addressable object storage for Got.

This module implements Git's loose-object layout: each record is encoded,
hashed with SHA-1 over its canonical bytes, zlib-compressed and written to
.got/objects/<digest[:2]>/<digest[2:]>. Identical content always lands at
the same path, so repeated writes are harmless.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List

from got.constants import HASH_LENGTH, MIN_PREFIX_LENGTH, OBJECTS_DIR
from got.storage import codec
from got.storage.codec import Kind, Record
from got.storage.digest import digest_of, is_hex, validate_digest
from got.storage.errors import (
    AmbiguousDigestError,
    CorruptObjectError,
    InvalidDigestError,
    ObjectNotFoundError,
)

logger = logging.getLogger(__name__)


class ObjectStore:
    """Content-addressable storage for records.

    Storage layout:
        .got/objects/<digest[:2]>/<digest[2:]>    # zlib(canonical record)

    Attributes:
        got_dir: Path to the .got directory
        objects_dir: Path to the objects directory

    Example:
        >>> store = ObjectStore(Path(".got"))
        >>> digest = store.write(Kind.BLOB, b"hello\\n")
        >>> store.read(digest).payload
        b'hello\\n'
    """

    def __init__(self, got_dir: Path) -> None:
        """Initialize the object store.

        Args:
            got_dir: Path to .got directory

        Raises:
            ValueError: If got_dir doesn't exist
        """
        self.got_dir = Path(got_dir)
        self.objects_dir = self.got_dir / OBJECTS_DIR

        if not self.got_dir.exists():
            raise ValueError(f"Got directory not found: {got_dir}")

    def hash(self, kind: Kind, payload: bytes) -> str:
        """Compute the digest a record would be stored under, without writing."""
        return digest_of(codec.encode(kind, payload))

    def write(self, kind: Kind, payload: bytes) -> str:
        """Write a record to the object store.

        The digest is taken over the full canonical bytes before compression.
        If an object with that digest already exists the write is skipped;
        otherwise the compressed record is written to a temp file in the
        fan-out directory and renamed into place.

        Args:
            kind: Object kind
            payload: Payload bytes

        Returns:
            40-character hex digest

        Raises:
            OSError: If the write fails (permissions, disk full, etc.)
        """
        canonical = codec.encode(kind, payload)
        digest = digest_of(canonical)

        if self.exists(digest):
            logger.debug("%s %s already stored", Kind(kind).value, digest)
            return digest

        object_path = self.object_path(digest)
        object_path.parent.mkdir(parents=True, exist_ok=True)
        data = codec.compress(canonical)

        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=object_path.parent,
            prefix=".tmp_",
            suffix=".obj",
        )
        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            try:
                os.replace(tmp_path, object_path)
            except OSError:
                # Another writer got there first; the content is identical
                if object_path.exists():
                    os.unlink(tmp_path)
                    return digest
                raise

        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug(
            "wrote %s %s (%d bytes, %d compressed)",
            Kind(kind).value,
            digest,
            len(payload),
            len(data),
        )
        return digest

    def read(self, digest: str, verify: bool = True) -> Record:
        """Read and decode a record.

        Args:
            digest: 40-character hex digest
            verify: Re-hash the decoded bytes and compare (default: True)

        Returns:
            The stored Record

        Raises:
            InvalidDigestError: If digest is not 40 hex characters
            ObjectNotFoundError: If nothing is stored under digest
            CorruptObjectError: If decompression or verification fails
            ObjectFormatError: If the record framing is invalid
        """
        digest = validate_digest(digest)
        object_path = self.object_path(digest)

        try:
            with open(object_path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            raise ObjectNotFoundError(digest, object_path) from None

        try:
            canonical = codec.decompress(data)
        except CorruptObjectError as e:
            raise CorruptObjectError(f"Object {digest} at {object_path}: {e}") from e

        record = codec.decode(canonical)

        if verify:
            actual = digest_of(canonical)
            if actual != digest:
                raise CorruptObjectError(
                    f"Object corrupted: expected {digest}, got {actual} ({object_path})"
                )

        return record

    def exists(self, digest: str) -> bool:
        """Check whether an object is stored, without decoding it."""
        try:
            digest = validate_digest(digest)
        except InvalidDigestError:
            return False
        return self.object_path(digest).is_file()

    def resolve(self, prefix: str) -> str:
        """Expand an abbreviated digest to the single stored digest it names.

        Args:
            prefix: At least 4 hex characters (a full digest is returned as is
                once it is found to exist)

        Returns:
            Full 40-character digest

        Raises:
            InvalidDigestError: If prefix is too short, too long or not hex
            ObjectNotFoundError: If no object matches
            AmbiguousDigestError: If more than one object matches
        """
        if not isinstance(prefix, str):
            raise InvalidDigestError(f"Digest must be string, got {type(prefix)}")

        prefix = prefix.lower()
        if len(prefix) == HASH_LENGTH:
            digest = validate_digest(prefix)
            if not self.exists(digest):
                raise ObjectNotFoundError(digest, self.object_path(digest))
            return digest

        if not MIN_PREFIX_LENGTH <= len(prefix) < HASH_LENGTH:
            raise InvalidDigestError(
                f"Short digest must be {MIN_PREFIX_LENGTH} to {HASH_LENGTH} "
                f"characters, got {len(prefix)}"
            )
        if not is_hex(prefix):
            raise InvalidDigestError(f"Digest must be hexadecimal: {prefix!r}")

        matches = self._matching(prefix)
        if not matches:
            raise ObjectNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousDigestError(prefix, matches)
        return matches[0]

    def object_path(self, digest: str) -> Path:
        """Get the filesystem path for a digest.

        Example:
            >>> store.object_path("ce013625030ba8dba906f756967f9e9ca394464a")
            PosixPath('.got/objects/ce/013625030ba8dba906f756967f9e9ca394464a')
        """
        return self.objects_dir / digest[:2] / digest[2:]

    def _matching(self, prefix: str) -> List[str]:
        fanout_dir = self.objects_dir / prefix[:2]
        if not fanout_dir.is_dir():
            return []

        rest = prefix[2:]
        matches = []
        for entry in fanout_dir.iterdir():
            # Skip leftover temp files from interrupted writes
            if entry.name.startswith(".") or not entry.is_file():
                continue
            if entry.name.startswith(rest):
                matches.append(prefix[:2] + entry.name)
        return sorted(matches)

