"""CSS stylesheets: comment bodies and string bodies are prose."""

from __future__ import annotations

import re
from typing import List

from ..spacing import spacing_segments
from .base import FormatWalker, Node, Scanner, scan_block_comment, scan_quoted

# Anything that cannot start a comment, a string or a block.
_CODE = re.compile(r"(?:[^/\"'{}]|/(?!\*))+")


class CssWalker(FormatWalker):
    """Walker for CSS.

    Blocks are parsed as nested containers so unbalanced braces are
    reported as syntax errors.
    """

    name = "css"
    extensions = (".css",)
    description = "CSS stylesheets"
    prose_kinds = frozenset({"comment-body"})

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children = self._parse_items(scanner, inside_block=False)
        return scanner.node("stylesheet", 0, children)

    def _parse_items(self, scanner: Scanner, inside_block: bool) -> List[Node]:
        items: List[Node] = []
        while not scanner.at_end():
            start = scanner.pos
            if scanner.consume_match(_CODE):
                items.append(scanner.leaf("code", start))
                continue
            ch = scanner.peek()
            if ch == "/":
                items.append(scan_block_comment(scanner))
            elif ch in "\"'":
                items.append(scan_quoted(scanner))
            elif ch == "{":
                items.append(self._parse_block(scanner))
            elif inside_block:
                # Closing brace, consumed by the caller
                return items
            else:
                raise scanner.error("unmatched '}'")
        if inside_block:
            raise scanner.error("expected '}'")
        return items

    def _parse_block(self, scanner: Scanner) -> Node:
        start = scanner.pos
        with scanner.nested():
            scanner.expect("{")
            children = [scanner.leaf("delimiter", start)]
            children.extend(self._parse_items(scanner, inside_block=True))
            close_start = scanner.pos
            scanner.expect("}")
            children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("block", start, children)

    def render_string_body(self, node: Node) -> str:
        return spacing_segments(node.text)
