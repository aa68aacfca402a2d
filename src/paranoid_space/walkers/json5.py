"""JSON5: string values and comment bodies are prose."""

from __future__ import annotations

import re
from typing import List

from ..spacing import spacing_segments
from .base import Node, Scanner, scan_block_comment, scan_line_comment, scan_quoted
from .json import JsonWalker

_WHITESPACE = re.compile(r"[\s\ufeff]+")
_NUMBER = re.compile(
    r"[+-]?(?:Infinity|NaN|0[xX][0-9a-fA-F]+"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)(?![\w$])"
)
_IDENTIFIER = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")


class Json5Walker(JsonWalker):
    """Walker for JSON5 documents.

    Identifier keys are code. Quoted keys are only spaced when
    ``json5.space_keys`` is enabled.
    """

    name = "json5"
    extensions = (".json5",)
    description = "JSON5 documents"
    prose_kinds = frozenset({"comment-body"})

    allow_trailing_comma = True

    @property
    def space_keys(self) -> bool:
        return self.config.json5.space_keys

    def _skip_whitespace(self, scanner: Scanner) -> List[Node]:
        nodes: List[Node] = []
        while not scanner.at_end():
            start = scanner.pos
            if scanner.consume_match(_WHITESPACE):
                nodes.append(scanner.leaf("whitespace", start))
            elif scanner.startswith("//"):
                nodes.append(scan_line_comment(scanner))
            elif scanner.startswith("/*"):
                nodes.append(scan_block_comment(scanner))
            else:
                break
        return nodes

    def _parse_value(self, scanner: Scanner) -> Node:
        if scanner.peek() in ("'", '"'):
            return scan_quoted(scanner)
        return super()._parse_value(scanner)

    def _consume_number(self, scanner: Scanner) -> bool:
        return scanner.consume_match(_NUMBER) is not None

    def _parse_key(self, scanner: Scanner) -> Node:
        if scanner.peek() in ("'", '"'):
            return scan_quoted(scanner, body_kind="key-body", kind="key")
        start = scanner.pos
        if scanner.consume_match(_IDENTIFIER) is None:
            raise scanner.error("expected a key")
        return scanner.leaf("identifier-key", start)

    def render_string_body(self, node: Node) -> str:
        return spacing_segments(node.text)
