"""Exception hierarchy for the Got object store.

Every failure raised by the storage and core layers derives from
:class:`GotError`. Decoding failures derive from :class:`ObjectFormatError`
so callers can tell damaged data apart from a missing object or a bad
argument.
"""


class GotError(Exception):
    """Base class for all Got errors."""


class RepositoryError(GotError):
    """Raised when the .got directory is missing or already exists."""


class InvalidDigestError(GotError, ValueError):
    """Raised when a digest is not 40 hex characters (or 20 raw bytes)."""


class ObjectNotFoundError(GotError):
    """Raised when no object is stored under a digest."""

    def __init__(self, digest: str, path=None):
        self.digest = digest
        self.path = path
        message = f"Object not found: {digest}"
        if path is not None:
            message += f" (expected at {path})"
        super().__init__(message)


class AmbiguousDigestError(GotError):
    """Raised when an abbreviated digest matches more than one object."""

    def __init__(self, prefix: str, matches):
        self.prefix = prefix
        self.matches = sorted(matches)
        super().__init__(
            f"Short digest {prefix} is ambiguous ({len(self.matches)} candidates)"
        )


class ObjectFormatError(GotError):
    """Base class for failures to decode stored bytes."""


class MalformedHeaderError(ObjectFormatError):
    """Raised when a record header is not '<kind> <length>' before a NUL."""


class UnknownKindError(ObjectFormatError):
    """Raised when a record header names an unrecognised kind."""


class InvalidLengthError(ObjectFormatError):
    """Raised when a record length is not a non-negative decimal integer."""


class TruncatedRecordError(ObjectFormatError):
    """Raised when fewer payload bytes remain than the header declares."""


class TrailingBytesError(ObjectFormatError):
    """Raised when bytes remain after the declared payload."""


class CorruptObjectError(ObjectFormatError):
    """Raised when a stored object cannot be decompressed or fails its digest."""


class MalformedTreeEntryError(ObjectFormatError):
    """Raised when a tree entry cannot be parsed."""


class TruncatedTreeEntryError(MalformedTreeEntryError):
    """Raised when a tree entry ends before its 20-byte digest."""


class TrailingTreeBytesError(MalformedTreeEntryError):
    """Raised when unparseable bytes follow the last complete tree entry."""


class MalformedCommitError(ObjectFormatError):
    """Raised when a commit payload does not contain its labelled sections."""


class CommitBuilderError(GotError):
    """Base class for failures while assembling a commit."""


class DanglingTreeReferenceError(CommitBuilderError):
    """Raised when a commit refers to a tree that is not in the store."""


class DanglingParentReferenceError(CommitBuilderError):
    """Raised when a commit refers to a parent that is not a stored commit."""


class TreeBuilderError(GotError):
    """Base class for failures while building a tree from a directory."""


class TreeDepthExceededError(TreeBuilderError):
    """Raised when a directory hierarchy nests deeper than the allowed bound."""
