"""Basic smoke tests to verify project setup."""

from got import __version__


def test_version() -> None:
    """Test that version is correctly defined."""
    assert __version__ == "0.1.0"


def test_import_storage() -> None:
    """Test that storage module can be imported."""
    from got import storage  # noqa: F401


def test_import_core() -> None:
    """Test that core module can be imported."""
    from got import core  # noqa: F401


def test_import_cli() -> None:
    """Test that cli module can be imported."""
    from got.cli import main  # noqa: F401


def test_sample_tree_fixture(sample_tree) -> None:
    """Test that sample_tree fixture creates the expected files."""
    assert (sample_tree / "a.txt").read_bytes() == b"alpha\n"
    assert (sample_tree / "sub" / "b.txt").exists()
