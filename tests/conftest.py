"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from got.storage.object_store import ObjectStore


@pytest.fixture
def got_dir(tmp_path: Path) -> Path:
    """Create a temporary .got directory structure."""
    got = tmp_path / ".got"
    got.mkdir()
    (got / "objects").mkdir()
    (got / "refs").mkdir()
    return got


@pytest.fixture
def store(got_dir: Path) -> ObjectStore:
    """Create an ObjectStore instance."""
    return ObjectStore(got_dir)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small directory hierarchy to snapshot.

    Layout:
        project/a.txt
        project/run.sh        (executable)
        project/sub/b.txt
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_bytes(b"alpha\n")

    script = root / "run.sh"
    script.write_bytes(b"#!/bin/sh\necho hi\n")
    script.chmod(0o755)

    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_bytes(b"beta\n")
    return root
