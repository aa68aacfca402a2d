"""Shared parse -> typed tree -> render machinery for format walkers.

Every walker parses its input with a hand-written recursive descent parser
driving a :class:`Scanner`, producing a tree of :class:`Node` objects whose
leaves cover the whole input. Rendering walks the tree once in document
order: prose leaves go through :func:`~paranoid_space.spacing.spacing`,
every other leaf is copied verbatim.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterator, List, Optional, Pattern, Sequence, Tuple

from ..config import DEFAULT_MAX_DEPTH, SpacingConfig
from ..errors import NestingDepthError, ParseError
from ..spacing import spacing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """A typed span of source text.

    Leaves have no children. For containers, the children cover ``text``
    exactly, so joining their texts reproduces the container's text.
    """

    kind: str
    text: str
    children: Tuple["Node", ...] = ()
    start: int = 0
    end: int = 0

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_leaves(self) -> Iterator["Node"]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()


class Scanner:
    """Cursor over the source text with diagnostics and a depth guard."""

    def __init__(self, text: str, fmt: str, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.text = text
        self.fmt = fmt
        self.max_depth = max_depth
        self.pos = 0
        self.depth = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        """Return the character at ``pos + offset`` or "" past the end."""
        index = self.pos + offset
        if index < len(self.text):
            return self.text[index]
        return ""

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def match(self, pattern: Pattern[str]) -> Optional["re.Match[str]"]:
        return pattern.match(self.text, self.pos)

    def advance(self, count: int = 1) -> str:
        chunk = self.text[self.pos:self.pos + count]
        self.pos = min(len(self.text), self.pos + count)
        return chunk

    def consume(self, prefix: str) -> bool:
        if self.text.startswith(prefix, self.pos):
            self.pos += len(prefix)
            return True
        return False

    def consume_match(self, pattern: Pattern[str]) -> Optional[str]:
        found = pattern.match(self.text, self.pos)
        if found is None:
            return None
        self.pos = found.end()
        return found.group(0)

    def expect(self, literal: str, what: Optional[str] = None) -> None:
        if not self.consume(literal):
            raise self.error(f"expected {what or repr(literal)}")

    def find(self, needle: str) -> int:
        """Index of ``needle`` at or after the cursor, -1 if absent."""
        return self.text.find(needle, self.pos)

    def leaf(self, kind: str, start: int) -> Node:
        """Build a leaf spanning ``start`` to the cursor."""
        return Node(kind, self.text[start:self.pos], (), start, self.pos)

    def node(self, kind: str, start: int, children: Sequence[Node]) -> Node:
        """Build a container spanning ``start`` to the cursor."""
        return Node(kind, self.text[start:self.pos], tuple(children), start, self.pos)

    def location(self, pos: Optional[int] = None) -> Tuple[int, int, str]:
        """Return (line, column, source line) for ``pos``, 1-based."""
        if pos is None:
            pos = self.pos
        pos = max(0, min(pos, len(self.text)))
        line_start = self.text.rfind("\n", 0, pos) + 1
        line_end = self.text.find("\n", pos)
        if line_end < 0:
            line_end = len(self.text)
        line = self.text.count("\n", 0, pos) + 1
        return line, pos - line_start + 1, self.text[line_start:line_end].rstrip("\r")

    def error(self, diagnostic: str, pos: Optional[int] = None) -> ParseError:
        line, column, excerpt = self.location(pos)
        return ParseError(self.fmt, diagnostic, line=line, column=column, excerpt=excerpt)

    def depth_error(self) -> NestingDepthError:
        line, column, excerpt = self.location()
        return NestingDepthError(self.fmt, self.max_depth, line=line, column=column,
                                 excerpt=excerpt)

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Enter one structural nesting level."""
        if self.depth >= self.max_depth:
            raise self.depth_error()
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


def scan_quoted(
    scanner: Scanner,
    body_kind: str = "string-body",
    kind: str = "string",
    allow_newline: bool = False,
) -> Node:
    """Scan a quoted literal whose opening quote is at the cursor.

    Backslash escapes (including backslash line continuations) are part of
    the body. Produces ``kind`` with children delimiter, body, delimiter.
    """
    start = scanner.pos
    quote = scanner.advance()
    opening = scanner.leaf("delimiter", start)
    body_start = scanner.pos
    while True:
        ch = scanner.peek()
        if ch == "":
            raise scanner.error("unterminated string literal", pos=start)
        if ch == quote:
            break
        if ch == "\\":
            scanner.advance(3 if scanner.text.startswith("\r\n", scanner.pos + 1) else 2)
            continue
        if ch in "\r\n" and not allow_newline:
            raise scanner.error("unterminated string literal", pos=start)
        scanner.advance()
    body = scanner.leaf(body_kind, body_start)
    close_start = scanner.pos
    scanner.advance()
    closing = scanner.leaf("delimiter", close_start)
    return scanner.node(kind, start, [opening, body, closing])


def scan_line_comment(scanner: Scanner, marker: str = "//", stop: Optional[str] = None) -> Node:
    """Scan ``marker`` up to (not including) the end of the line or ``stop``."""
    start = scanner.pos
    scanner.expect(marker)
    opening = scanner.leaf("delimiter", start)
    body_start = scanner.pos
    end = len(scanner.text)
    for terminator in ("\n", "\r") + ((stop,) if stop else ()):
        index = scanner.text.find(terminator, body_start)
        if 0 <= index < end:
            end = index
    scanner.pos = end
    body = scanner.leaf("comment-body", body_start)
    return scanner.node("comment", start, [opening, body])


def scan_block_comment(scanner: Scanner, opener: str = "/*", closer: str = "*/") -> Node:
    """Scan a non-nesting block comment whose opener is at the cursor."""
    start = scanner.pos
    scanner.expect(opener)
    opening = scanner.leaf("delimiter", start)
    body_start = scanner.pos
    end = scanner.find(closer)
    if end < 0:
        raise scanner.error("unterminated comment", pos=start)
    scanner.pos = end
    body = scanner.leaf("comment-body", body_start)
    close_start = scanner.pos
    scanner.advance(len(closer))
    closing = scanner.leaf("delimiter", close_start)
    return scanner.node("comment", start, [opening, body, closing])


class FormatWalker(ABC):
    """Parser plus renderer for one document format.

    Subclasses implement :meth:`parse`. Rendering dispatches on
    ``Node.kind``: a ``render_<kind>`` method wins, then kinds listed in
    ``prose_kinds`` are spaced, containers render their children and any
    other leaf is copied verbatim.
    """

    name: str = ""
    extensions: Tuple[str, ...] = ()
    description: str = ""
    prose_kinds: FrozenSet[str] = frozenset()

    def __init__(self, config: Optional[SpacingConfig] = None) -> None:
        self.config = config or SpacingConfig()

    @abstractmethod
    def parse(self, text: str) -> Node:
        """Parse ``text`` into a tree, raising ParseError when malformed."""

    def scanner(self, text: str) -> Scanner:
        return Scanner(text, self.name, self.config.max_depth)

    def render(self, node: Node) -> str:
        handler = getattr(self, "render_" + node.kind.replace("-", "_"), None)
        if handler is not None:
            return handler(node)
        if node.kind in self.prose_kinds:
            return spacing(node.text)
        if node.children:
            return self.render_children(node)
        return node.text

    def render_children(self, node: Node) -> str:
        parts: List[str] = []
        for child in node.children:
            parts.append(self.render(child))
        return "".join(parts)

    def process(self, text: str) -> str:
        """Space the prose spans of ``text`` and return the document."""
        return self.render(self.parse(text))

    def delegate(self, fmt: str, text: str, **options: Any) -> str:
        """Process embedded content with another walker.

        A malformed embedded region is emitted unchanged.
        """
        # Avoid circular import
        from . import get_walker

        try:
            return get_walker(fmt, self.config, **options).process(text)
        except ParseError as e:
            logger.warning(f"{self.name}: embedded {fmt} left unchanged: {e}")
            return text
