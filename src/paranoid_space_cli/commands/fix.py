"""Space files (or stdin) and write the result."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from paranoid_space.dispatch import process_file, process_text, write_result
from paranoid_space.errors import ParseError

from ..util import load_config, validate_format


def fix(
    files: Optional[List[Path]] = typer.Argument(
        None,
        help="Files to process (reads stdin when omitted)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite files instead of printing"),
    fmt: Optional[str] = typer.Option(None, "--format", help="Format override (html, css, js, ..., text)"),
):
    """Insert spaces between CJK and Latin text, leaving markup untouched."""
    fmt = validate_format(fmt)
    config = load_config()

    if not files:
        if in_place:
            typer.echo("❌ --in-place requires at least one file", err=True)
            raise typer.Exit(2)
        text = typer.get_text_stream("stdin").read()
        try:
            typer.echo(process_text(text, fmt, config), nl=False)
        except ParseError as e:
            typer.echo(f"❌ <stdin>: {e.get_detailed_message()}", err=True)
            raise typer.Exit(1)
        return

    failed = 0
    for path in files:
        result = process_file(path, fmt, config)
        if result.error is not None:
            failed += 1
            typer.echo(f"❌ {path}: {result.error.get_detailed_message()}", err=True)
            continue
        if in_place:
            if write_result(result):
                typer.echo(f"✓ Fixed {path}", err=True)
        else:
            typer.echo(result.processed, nl=False)

    if failed:
        raise typer.Exit(1)
