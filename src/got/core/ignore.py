"""Ignore list for tree builds.

The ignore file holds one literal entry name per line. Lines starting with
``#`` and blank lines are skipped. There is no glob matching: a name is
ignored only if it equals an entry name exactly, at any depth.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable

from got.constants import DEFAULT_IGNORE_NAMES, IGNORE_FILE

logger = logging.getLogger(__name__)


def parse_ignore_names(lines: Iterable[str]) -> FrozenSet[str]:
    """Collect literal names from ignore-file lines."""
    names = set()
    for line in lines:
        line = line.strip()
        if line and not line.startswith("#"):
            names.add(line)
    return frozenset(names)


def load_ignore_names(workspace_root: Path) -> FrozenSet[str]:
    """Load the ignore set for a workspace.

    The .got directory is always included. A missing ignore file is not an
    error; an unreadable one is.

    Args:
        workspace_root: Directory containing .gotignore

    Returns:
        Frozen set of names to skip during a tree build
    """
    ignore_file = Path(workspace_root) / IGNORE_FILE

    if not ignore_file.exists():
        return DEFAULT_IGNORE_NAMES

    content = ignore_file.read_text(encoding="utf-8")
    names = parse_ignore_names(content.splitlines())
    logger.debug("loaded %d ignore name(s) from %s", len(names), ignore_file)
    return DEFAULT_IGNORE_NAMES | names
