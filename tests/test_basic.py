"""Basic tests for spotics."""

from importlib.util import find_spec


def test_import():
    """Test that package is importable without side effects."""
    assert find_spec("spotics") is not None


def test_cli_import():
    """Test that CLI can be imported."""
    from spotics.cli import app

    assert app is not None
