"""List supported formats and the extensions mapped to them."""

from __future__ import annotations

from typing import Dict, List

from rich.console import Console
from rich.table import Table

from paranoid_space.dispatch import RAW_FORMAT, extension_table
from paranoid_space.walkers import registry

from ..util import load_config

console = Console()


def formats():
    """Show the extension table, including configured extras."""
    table_data = extension_table(load_config())
    by_format: Dict[str, List[str]] = {}
    for extension, fmt in sorted(table_data.items()):
        by_format.setdefault(fmt, []).append(extension)

    table = Table(title="Supported formats")
    table.add_column("Format", style="cyan")
    table.add_column("Extensions")
    table.add_column("Description")
    for name in registry.list_formats():
        table.add_row(name, " ".join(by_format.get(name, [])), registry.describe(name))
    extras = " ".join(by_format.get(RAW_FORMAT, []))
    table.add_row(RAW_FORMAT, extras or "(anything else, stdin)", "Plain text, spaced as a whole")
    console.print(table)
