"""Route text and files to the walker for their format.

Files are matched on their extension; anything unrecognised (and stdin)
is treated as plain text and spaced as a whole.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from .config import SpacingConfig
from .errors import ConfigError, ParseError
from .spacing import spacing
from .walkers import get_walker, registry

logger = logging.getLogger(__name__)

RAW_FORMAT = "text"

FORMAT_BY_EXTENSION: Dict[str, str] = registry.extension_table()


def extension_table(config: Optional[SpacingConfig] = None) -> Dict[str, str]:
    """Built-in extension mapping overlaid with the configured extras."""
    table = dict(FORMAT_BY_EXTENSION)
    if config is None:
        return table
    known = set(registry.list_formats()) | {RAW_FORMAT}
    for extension, fmt in config.extensions.items():
        if fmt not in known:
            raise ConfigError(
                f"Extension {extension} maps to unknown format '{fmt}' "
                f"(known: {', '.join(sorted(known))})"
            )
        table[extension] = fmt
    return table


def resolve_format(path: Union[str, Path, None], config: Optional[SpacingConfig] = None) -> Optional[str]:
    """Return the format name for ``path``, or None for plain text."""
    if path is None:
        return None
    suffix = Path(path).suffix.lower()
    fmt = extension_table(config).get(suffix)
    if fmt == RAW_FORMAT:
        return None
    return fmt


def process_text(text: str, fmt: Optional[str] = None, config: Optional[SpacingConfig] = None) -> str:
    """Space ``text`` as format ``fmt``, or as plain text when ``fmt`` is None.

    Raises:
        UnknownFormatError: If ``fmt`` names no registered walker
        ParseError: If ``text`` is malformed for ``fmt``
    """
    if fmt is None or fmt.lower().strip() == RAW_FORMAT:
        logger.debug("Spacing input as plain text")
        return spacing(text)
    walker = get_walker(fmt, config)
    logger.debug(f"Processing input with {walker.name} walker")
    return walker.process(text)


@dataclass
class FileResult:
    """Outcome of processing one file."""

    path: Optional[Path]
    format: Optional[str]
    original: str
    processed: str
    changed: bool
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_text(path: Path) -> str:
    """Read a UTF-8 file without translating line endings."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def process_file(
    path: Path,
    fmt: Optional[str] = None,
    config: Optional[SpacingConfig] = None,
) -> FileResult:
    """Process one file; syntax errors are captured in the result.

    Args:
        path: File to read
        fmt: Format override; resolved from the extension when None
        config: Effective configuration

    Returns:
        FileResult holding original and processed text
    """
    path = Path(path)
    if fmt is None:
        fmt = resolve_format(path, config)
    logger.debug(f"{path}: format {fmt or RAW_FORMAT}")
    original = read_text(path)
    try:
        processed = process_text(original, fmt, config)
    except ParseError as e:
        logger.debug(f"{path}: {e}")
        return FileResult(path, fmt, original, original, False, error=e)
    return FileResult(path, fmt, original, processed, processed != original)


def write_result(result: FileResult) -> bool:
    """Write a changed result back to its file; return True if written."""
    if result.path is None or not result.changed or result.error is not None:
        return False
    with open(result.path, "w", encoding="utf-8", newline="") as f:
        f.write(result.processed)
    logger.info(f"Rewrote {result.path}")
    return True
