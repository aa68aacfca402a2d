"""paranoid-space - Space CJK and Latin text inside structured documents."""

from .__version__ import __version__, __version_info__

from .charclass import CharClass, classify, is_full, is_half
from .spacing import spacing, spacing_segments
from .config import ConfigLoader, SpacingConfig, default_config
from .errors import (
    ConfigError,
    NestingDepthError,
    ParseError,
    SpacingError,
    UnknownFormatError,
)
from .walkers import (
    FormatWalker,
    Node,
    WalkerRegistry,
    get_walker,
    process_css,
    process_html,
    process_js,
    process_json,
    process_json5,
    process_markdown,
    process_php,
    process_rust,
)
from .dispatch import (
    FORMAT_BY_EXTENSION,
    FileResult,
    process_file,
    process_text,
    resolve_format,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Spacing
    "CharClass",
    "classify",
    "is_full",
    "is_half",
    "spacing",
    "spacing_segments",
    # Config
    "ConfigLoader",
    "SpacingConfig",
    "default_config",
    # Errors
    "ConfigError",
    "NestingDepthError",
    "ParseError",
    "SpacingError",
    "UnknownFormatError",
    # Walkers
    "FormatWalker",
    "Node",
    "WalkerRegistry",
    "get_walker",
    "process_css",
    "process_html",
    "process_js",
    "process_json",
    "process_json5",
    "process_markdown",
    "process_php",
    "process_rust",
    # Dispatch
    "FORMAT_BY_EXTENSION",
    "FileResult",
    "process_file",
    "process_text",
    "resolve_format",
]
