"""Report files that are not spaced yet."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from paranoid_space.dispatch import process_file

from ..util import load_config, validate_format

console = Console()


def check(
    files: List[Path] = typer.Argument(
        ...,
        help="Files to check",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    fmt: Optional[str] = typer.Option(None, "--format", help="Format override"),
):
    """Exit 1 if any file would change or fails to parse."""
    fmt = validate_format(fmt)
    config = load_config()

    changed = 0
    failed = 0
    for path in files:
        result = process_file(path, fmt, config)
        if result.error is not None:
            failed += 1
            typer.echo(f"❌ {path}: {result.error.get_detailed_message()}", err=True)
        elif result.changed:
            changed += 1
            console.print(f"[yellow]would fix[/yellow] {escape(str(path))}")

    if changed or failed:
        console.print(f"{changed} file(s) would change, {failed} failed to parse")
        raise typer.Exit(1)
    console.print(f"✓ All {len(files)} file(s) already spaced")
