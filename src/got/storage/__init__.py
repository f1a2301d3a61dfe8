"""Storage layer for Got.

This module provides the record codec, content digests, the loose-object
store, the tree entry codec and commit object management.
"""

from got.storage.codec import Kind, Record
from got.storage.commit_builder import Commit, CommitBuilder
from got.storage.errors import (
    CorruptObjectError,
    GotError,
    ObjectFormatError,
    ObjectNotFoundError,
)
from got.storage.object_store import ObjectStore
from got.storage.tree_codec import TreeEntry, TreeMode

__all__ = [
    "Kind",
    "Record",
    "ObjectStore",
    "TreeEntry",
    "TreeMode",
    "Commit",
    "CommitBuilder",
    "GotError",
    "ObjectFormatError",
    "ObjectNotFoundError",
    "CorruptObjectError",
]
