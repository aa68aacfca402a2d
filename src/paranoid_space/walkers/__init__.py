"""Format walkers and the registry that resolves them by name."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from ..config import SpacingConfig
from ..errors import UnknownFormatError
from .base import FormatWalker, Node, Scanner
from .css import CssWalker
from .html import HtmlWalker, space_markup
from .js import JsWalker
from .json import JsonWalker
from .json5 import Json5Walker
from .markdown import MarkdownWalker
from .php import PhpWalker
from .rust import RustWalker

logger = logging.getLogger(__name__)


class WalkerRegistry:
    """Registry of walker classes keyed by format name."""

    def __init__(self) -> None:
        self._walkers: Dict[str, Tuple[Type[FormatWalker], Dict[str, Any]]] = {}
        self._register_default_walkers()

    def _register_default_walkers(self) -> None:
        """Register the built-in walkers."""
        self.register("html", HtmlWalker)
        self.register("css", CssWalker)
        self.register("js", JsWalker)
        self.register("json", JsonWalker)
        self.register("json5", Json5Walker)
        self.register("markdown", MarkdownWalker)
        self.register("rust", RustWalker)
        self.register("php", PhpWalker)

    def register(
        self,
        name: str,
        walker_class: Type[FormatWalker],
        **default_kwargs: Any
    ) -> None:
        """Register a walker with default constructor arguments.

        Args:
            name: Format name for resolution
            walker_class: FormatWalker subclass
            **default_kwargs: Default keyword arguments for walker creation
        """
        if not name:
            raise ValueError("Walker name must be non-empty")
        if not issubclass(walker_class, FormatWalker):
            raise ValueError("Walker class must inherit from FormatWalker")

        self._walkers[name.lower().strip()] = (walker_class, default_kwargs)
        logger.debug(f"Registered walker: {name}")

    def resolve(
        self,
        name: str,
        config: Optional[SpacingConfig] = None,
        **kwargs: Any
    ) -> FormatWalker:
        """Create the walker registered under ``name``.

        Raises:
            UnknownFormatError: If no walker is registered under ``name``
        """
        key = name.lower().strip()
        if key not in self._walkers:
            raise UnknownFormatError(name, self.list_formats())
        walker_class, default_kwargs = self._walkers[key]
        options = {**default_kwargs, **kwargs}
        return walker_class(config, **options)

    def list_formats(self) -> List[str]:
        return list(self._walkers)

    def extension_table(self) -> Dict[str, str]:
        """Map every registered file extension to its format name."""
        table: Dict[str, str] = {}
        for name, (walker_class, _) in self._walkers.items():
            for extension in walker_class.extensions:
                table[extension] = name
        return table

    def describe(self, name: str) -> str:
        walker_class, _ = self._walkers[name.lower().strip()]
        return walker_class.description


registry = WalkerRegistry()


def get_walker(fmt: str, config: Optional[SpacingConfig] = None, **options: Any) -> FormatWalker:
    """Resolve a walker instance from the global registry."""
    return registry.resolve(fmt, config, **options)


def process_html(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("html", config).process(text)


def process_css(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("css", config).process(text)


def process_js(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("js", config).process(text)


def process_json(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("json", config).process(text)


def process_json5(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("json5", config).process(text)


def process_markdown(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("markdown", config).process(text)


def process_rust(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("rust", config).process(text)


def process_php(text: str, config: Optional[SpacingConfig] = None) -> str:
    return get_walker("php", config).process(text)


__all__ = [
    "CssWalker",
    "FormatWalker",
    "HtmlWalker",
    "JsWalker",
    "Json5Walker",
    "JsonWalker",
    "MarkdownWalker",
    "Node",
    "PhpWalker",
    "RustWalker",
    "Scanner",
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
    "registry",
    "space_markup",
]
