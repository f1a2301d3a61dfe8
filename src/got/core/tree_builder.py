"""Snapshot a directory hierarchy as tree objects.

Each directory becomes a tree whose entries point at blobs (file contents
or symlink targets) and at subtrees. Children are written before their
parent, so a failure part way through leaves only complete, valid objects
behind.
"""

import logging
import os
from pathlib import Path
from typing import AbstractSet, List, Optional

from got.constants import MAX_TREE_DEPTH
from got.core.collaborators import EntryType, FileSystem, LocalFileSystem
from got.storage.codec import Kind
from got.storage.errors import TreeDepthExceededError
from got.storage.object_store import ObjectStore
from got.storage.tree_codec import TreeEntry, TreeMode, encode_entries, sort_entries

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builder for tree objects from a directory on disk.

    Attributes:
        object_store: Store that blobs and trees are written to
        filesystem: Where directory contents are read from
        sort_entries: Order entries by name (True) or keep listing order
        max_depth: Deepest directory nesting accepted
    """

    def __init__(
        self,
        object_store: ObjectStore,
        filesystem: Optional[FileSystem] = None,
        sort_entries: bool = True,
        max_depth: int = MAX_TREE_DEPTH,
    ):
        self.object_store = object_store
        self.filesystem = filesystem or LocalFileSystem()
        self.sort_entries = sort_entries
        self.max_depth = max_depth

    def build(self, directory: Path, ignore: AbstractSet[str] = frozenset()) -> str:
        """Write a directory and everything under it, returning the tree digest.

        Args:
            directory: Directory to snapshot
            ignore: Entry names to skip at every level

        Returns:
            Digest of the top-level tree

        Raises:
            OSError: If any entry cannot be listed, stat'ed or read
            TreeDepthExceededError: If nesting exceeds max_depth
        """
        return self._build_tree(Path(directory), ignore, depth=0)

    def _build_tree(self, directory: Path, ignore: AbstractSet[str], depth: int) -> str:
        if depth > self.max_depth:
            raise TreeDepthExceededError(
                f"{directory} is nested deeper than {self.max_depth} levels"
            )

        entries: List[TreeEntry] = []
        for name in self.filesystem.list_dir(directory):
            if name in ignore:
                logger.debug("ignoring %s", directory / name)
                continue

            entry = self._build_entry(directory / name, ignore, depth)
            if entry is not None:
                entries.append(entry)

        if self.sort_entries:
            entries = sort_entries(entries)

        digest = self.object_store.write(Kind.TREE, encode_entries(entries))
        logger.debug("tree %s for %s (%d entries)", digest, directory, len(entries))
        return digest

    def _build_entry(
        self, path: Path, ignore: AbstractSet[str], depth: int
    ) -> Optional[TreeEntry]:
        info = self.filesystem.entry_info(path)
        name = os.fsencode(path.name)

        if info.type is EntryType.DIRECTORY:
            digest = self._build_tree(path, ignore, depth + 1)
            return TreeEntry(TreeMode.DIRECTORY, name, digest)

        if info.type is EntryType.SYMLINK:
            digest = self.object_store.write(Kind.BLOB, self.filesystem.read_link(path))
            return TreeEntry(TreeMode.SYMLINK, name, digest)

        if info.type is EntryType.FILE:
            digest = self.object_store.write(Kind.BLOB, self.filesystem.read_bytes(path))
            mode = TreeMode.EXECUTABLE if info.executable else TreeMode.REGULAR
            return TreeEntry(mode, name, digest)

        logger.warning("skipping %s: not a regular file, directory or symlink", path)
        return None
