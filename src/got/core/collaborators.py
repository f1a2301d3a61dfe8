"""Interfaces the core consumes from the outside world.

The tree builder never touches ``os`` directly; it goes through a
:class:`FileSystem`. Commit messages come from a :class:`MessageSource`
when none is given inline. Both can be swapped out in tests or by a
higher-level command.
"""

import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List


class EntryType(Enum):
    """Classification of a directory entry."""

    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FILE = "file"
    OTHER = "other"


@dataclass(frozen=True)
class EntryInfo:
    """What the tree builder needs to know about one directory entry."""

    type: EntryType
    executable: bool = False


class FileSystem(ABC):
    """Read-only view of a directory hierarchy."""

    @abstractmethod
    def list_dir(self, path: Path) -> List[str]:
        """Names of the entries in a directory, in iteration order."""
        pass

    @abstractmethod
    def entry_info(self, path: Path) -> EntryInfo:
        """Type and executable bit of a path, without following symlinks."""
        pass

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        pass

    @abstractmethod
    def read_link(self, path: Path) -> bytes:
        """Target of a symbolic link, as raw bytes."""
        pass


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk. OSErrors propagate unchanged."""

    def list_dir(self, path: Path) -> List[str]:
        with os.scandir(path) as it:
            return [entry.name for entry in it]

    def entry_info(self, path: Path) -> EntryInfo:
        st = os.lstat(path)
        if stat.S_ISLNK(st.st_mode):
            return EntryInfo(EntryType.SYMLINK)
        if stat.S_ISDIR(st.st_mode):
            return EntryInfo(EntryType.DIRECTORY)
        if stat.S_ISREG(st.st_mode):
            return EntryInfo(EntryType.FILE, executable=bool(st.st_mode & stat.S_IXUSR))
        return EntryInfo(EntryType.OTHER)

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def read_link(self, path: Path) -> bytes:
        return os.fsencode(os.readlink(path))


class MessageSource(ABC):
    """Supplies a commit message when none was given on the command line."""

    @abstractmethod
    def get_message(self) -> str:
        pass


class InlineMessageSource(MessageSource):
    """MessageSource that returns a fixed message."""

    def __init__(self, message: str):
        self.message = message

    def get_message(self) -> str:
        return self.message
