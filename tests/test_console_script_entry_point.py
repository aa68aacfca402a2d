"""
Test console script entry point configuration.

The package declares the `paranoid-space` console script and the CLI module
exposes a callable `main`.
"""

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib as tomli
else:
    import tomli


def test_console_script_entry_point_exists():
    """Verify [project.scripts] section exists with paranoid-space entry point."""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"

    with open(pyproject_path, "rb") as f:
        config = tomli.load(f)

    assert "project" in config, "pyproject.toml missing [project] section"
    assert "scripts" in config["project"], "pyproject.toml missing [project.scripts] section"

    scripts = config["project"]["scripts"]
    assert "paranoid-space" in scripts, "Missing 'paranoid-space' console script entry point"

    entry_point = scripts["paranoid-space"]
    assert entry_point == "paranoid_space_cli.cli:main", (
        f"Entry point should be 'paranoid_space_cli.cli:main', got '{entry_point}'"
    )


def test_entry_point_function_is_callable():
    """Verify the entry point function exists and is callable."""
    from paranoid_space_cli.cli import main

    assert callable(main), "Entry point function 'main' is not callable"


def test_version_accessible_from_cli():
    """Verify version information is accessible from CLI module."""
    from paranoid_space_cli.cli import __version__

    assert isinstance(__version__, str), "Version should be a string"
    parts = __version__.split(".")
    assert len(parts) >= 2, f"Version '{__version__}' should have at least MAJOR.MINOR"
