"""Tests for version consistency across package files."""

from pathlib import Path

import tomli


def test_version_matches_pyproject():
    """Verify that ral.__version__ matches the version in pyproject.toml."""
    from ral import __version__

    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        pyproject = tomli.load(f)

    expected_version = pyproject["project"]["version"]

    assert __version__ == expected_version, (
        f"Version mismatch: ral.__version__={__version__!r}, "
        f"pyproject.toml version={expected_version!r}"
    )
