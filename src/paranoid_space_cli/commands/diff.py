"""Show what `fix` would change as a unified diff."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.text import Text

from paranoid_space.dispatch import FileResult, process_file

from ..util import load_config, validate_format

console = Console()

_LINE_STYLES = (
    ("+++", "bold"),
    ("---", "bold"),
    ("@@", "cyan"),
    ("+", "green"),
    ("-", "red"),
)


def unified_diff(result: FileResult, context: int = 3) -> Iterator[str]:
    """Unified diff lines between the original and processed text."""
    name = str(result.path) if result.path is not None else "<stdin>"
    return difflib.unified_diff(
        result.original.splitlines(keepends=True),
        result.processed.splitlines(keepends=True),
        fromfile=name,
        tofile=name,
        n=context,
    )


def _styled(line: str) -> Text:
    body = line.rstrip("\r\n")
    for prefix, style in _LINE_STYLES:
        if body.startswith(prefix):
            return Text(body, style=style)
    return Text(body)


def diff(
    files: List[Path] = typer.Argument(
        ...,
        help="Files to diff",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    fmt: Optional[str] = typer.Option(None, "--format", help="Format override"),
    context: int = typer.Option(3, "--context", "-U", min=0, help="Lines of context"),
):
    """Print a coloured diff of the changes `fix` would make."""
    fmt = validate_format(fmt)
    config = load_config()

    failed = 0
    for path in files:
        result = process_file(path, fmt, config)
        if result.error is not None:
            failed += 1
            typer.echo(f"❌ {path}: {result.error.get_detailed_message()}", err=True)
            continue
        for line in unified_diff(result, context):
            console.print(_styled(line), soft_wrap=True)

    if failed:
        raise typer.Exit(1)
