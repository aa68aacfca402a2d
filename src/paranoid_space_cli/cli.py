from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from paranoid_space import __version__

from .util import configure_logging, configure_stdio, set_global_config_file

app = typer.Typer(help="paranoid-space: space CJK and Latin text inside structured documents")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"paranoid-space {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def _init(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a TOML config file (overrides pyproject.toml and .paranoid-space.toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log dispatch decisions"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    configure_stdio()
    configure_logging(verbose)
    set_global_config_file(config_file)

    # Without a command, behave as `fix` on stdin
    if ctx.invoked_subcommand is None:
        fix_fn(files=None, in_place=False, fmt=None)


from .commands.fix import fix as fix_fn  # noqa: E402
from .commands.check import check as check_fn  # noqa: E402
from .commands.diff import diff as diff_fn  # noqa: E402
from .commands.formats import formats as formats_fn  # noqa: E402

app.command(name="fix")(fix_fn)
app.command(name="check")(check_fn)
app.command(name="diff")(diff_fn)
app.command(name="formats")(formats_fn)


def main():
    app()
