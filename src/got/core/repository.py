"""Creating and locating the .got directory."""

from pathlib import Path
from typing import Optional

from got.constants import DEFAULT_HEAD_REF, GOT_DIR, HEAD_FILE, OBJECTS_DIR, REFS_DIR
from got.storage.errors import RepositoryError


def init_repository(workspace_root: Path) -> Path:
    """Create .got/objects, .got/refs and .got/HEAD under workspace_root.

    Returns:
        Path to the new .got directory

    Raises:
        RepositoryError: If .got already exists
    """
    got_dir = Path(workspace_root) / GOT_DIR
    if got_dir.exists():
        raise RepositoryError(f"Got repository already exists in {workspace_root}")

    got_dir.mkdir()
    (got_dir / OBJECTS_DIR).mkdir()
    (got_dir / REFS_DIR).mkdir()
    (got_dir / HEAD_FILE).write_text(DEFAULT_HEAD_REF, encoding="utf-8")
    return got_dir


def find_repository(start: Path) -> Optional[Path]:
    """Walk up from start to the first directory containing .got.

    Returns:
        The workspace root (the directory holding .got), or None
    """
    start = Path(start).resolve()
    for candidate in (start, *start.parents):
        if (candidate / GOT_DIR).is_dir():
            return candidate
    return None
