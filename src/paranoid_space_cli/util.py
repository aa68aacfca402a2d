from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from paranoid_space.config import ConfigLoader, SpacingConfig
from paranoid_space.dispatch import RAW_FORMAT, extension_table
from paranoid_space.errors import ConfigError
from paranoid_space.walkers import registry

# Global variable to store custom config file path
_global_config_file: Optional[Path] = None


def set_global_config_file(config_file: Optional[Path]) -> None:
    """Set (or clear) the global config file path for use by commands."""
    global _global_config_file
    _global_config_file = config_file.resolve() if config_file is not None else None


def get_global_config_file() -> Optional[Path]:
    """Get the global config file path if set."""
    return _global_config_file


def configure_stdio() -> None:
    """Make CLI output robust across Windows console encodings.

    Spaced output is mostly CJK text; a cp1252 console would raise
    UnicodeEncodeError mid-run. Configure stdout/stderr to replace
    unencodable characters instead of crashing.
    """

    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        try:
            # Keep the current encoding, but make encoding errors non-fatal.
            stream.reconfigure(errors="replace")
        except Exception:
            continue


def configure_logging(verbose: bool = False) -> None:
    """Send paranoid_space log records to stderr through rich."""
    package_logger = logging.getLogger("paranoid_space")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_config() -> SpacingConfig:
    """Resolve the effective config for the current directory or exit 2."""
    try:
        config = ConfigLoader.load_effective_config(config_file=get_global_config_file())
        # Validate extension mappings up front
        extension_table(config)
    except ConfigError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(2)
    return config


def validate_format(fmt: Optional[str]) -> Optional[str]:
    """Normalize a --format value, rejecting unknown names as a usage error."""
    if fmt is None:
        return None
    name = fmt.lower().strip()
    known = registry.list_formats() + [RAW_FORMAT]
    if name not in known:
        raise typer.BadParameter(
            f"unknown format '{fmt}' (known: {', '.join(known)})", param_hint="--format"
        )
    return name
