"""Core engine layer for Got.

This module builds trees from directories and defines the interfaces the
engine consumes from its surroundings (filesystem, ignore list, commit
message source).
"""

from got.core.collaborators import (
    FileSystem,
    InlineMessageSource,
    LocalFileSystem,
    MessageSource,
)
from got.core.ignore import load_ignore_names
from got.core.repository import find_repository, init_repository
from got.core.tree_builder import TreeBuilder

__all__ = [
    "TreeBuilder",
    "FileSystem",
    "LocalFileSystem",
    "MessageSource",
    "InlineMessageSource",
    "load_ignore_names",
    "init_repository",
    "find_repository",
]
