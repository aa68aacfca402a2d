"""JavaScript: comment bodies, string bodies and template literal chunks.

Template literals are split into literal chunks and ``${...}`` expression
nodes. Expressions are parsed (to find their closing brace) but rendered
verbatim.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..spacing import spacing_segments
from .base import (
    FormatWalker,
    Node,
    Scanner,
    scan_block_comment,
    scan_line_comment,
    scan_quoted,
)

_CODE = re.compile(r"[^/\"'`{}]+")

# After these keywords a slash starts a regular expression.
_REGEX_KEYWORDS = frozenset({
    "return", "typeof", "instanceof", "in", "of", "new", "delete", "void",
    "throw", "case", "do", "else", "yield", "await",
})
_REGEX_AFTER = frozenset("(,=:[!&|?{};+-*%<>~^")

_REGEX_LITERAL = re.compile(
    r"/(?![*/])(?:\\.|\[(?:\\.|[^\]\\\n\r])*\]|[^/\\\[\n\r])+/[A-Za-z]*"
)


class JsWalker(FormatWalker):
    """Walker for JavaScript source."""

    name = "js"
    extensions = (".js", ".mjs", ".cjs")
    description = "JavaScript"
    prose_kinds = frozenset({"comment-body"})

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children = self._parse_items(scanner, in_expression=False)
        return scanner.node("program", 0, children)

    def _parse_items(self, scanner: Scanner, in_expression: bool) -> List[Node]:
        items: List[Node] = []
        code_start: Optional[int] = None

        def flush(until: Optional[int] = None) -> None:
            nonlocal code_start
            end = scanner.pos if until is None else until
            if code_start is not None and end > code_start:
                items.append(Node("code", scanner.text[code_start:end], (), code_start, end))
            code_start = None

        while not scanner.at_end():
            ch = scanner.peek()
            if ch not in "/\"'`{}":
                if code_start is None:
                    code_start = scanner.pos
                scanner.consume_match(_CODE)
                continue

            if ch == "}" and in_expression:
                flush()
                return items
            if ch in "{}" and not in_expression:
                if code_start is None:
                    code_start = scanner.pos
                scanner.advance()
                continue

            if ch == "/" and not (scanner.startswith("//") or scanner.startswith("/*")):
                token_start = scanner.pos
                regex = self._regex_literal(scanner)
                if regex is None:
                    if code_start is None:
                        code_start = scanner.pos
                    scanner.advance()
                    continue
                flush(token_start)
                items.append(regex)
                continue

            flush()
            if scanner.startswith("//"):
                items.append(scan_line_comment(scanner))
            elif scanner.startswith("/*"):
                items.append(scan_block_comment(scanner))
            elif ch == "`":
                items.append(self._parse_template(scanner))
            elif ch == "{":
                items.append(self._parse_block(scanner))
            else:
                items.append(scan_quoted(scanner))

        flush()
        if in_expression:
            raise scanner.error("unterminated template expression")
        return items

    def _regex_literal(self, scanner: Scanner) -> Optional[Node]:
        """Return a regex literal node when a slash starts one."""
        text = scanner.text
        index = scanner.pos - 1
        while index >= 0 and text[index].isspace():
            index -= 1
        if index >= 0:
            word_start = index
            while word_start >= 0 and (text[word_start].isalnum() or text[word_start] in "_$"):
                word_start -= 1
            word = text[word_start + 1:index + 1]
            if word:
                if word not in _REGEX_KEYWORDS:
                    return None
            elif text[index] not in _REGEX_AFTER:
                return None
        start = scanner.pos
        if scanner.consume_match(_REGEX_LITERAL) is None:
            return None
        return scanner.leaf("regex", start)

    def _parse_block(self, scanner: Scanner) -> Node:
        start = scanner.pos
        with scanner.nested():
            scanner.expect("{")
            children = [scanner.leaf("delimiter", start)]
            children.extend(self._parse_items(scanner, in_expression=True))
            close_start = scanner.pos
            scanner.expect("}")
            children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("block", start, children)

    def _parse_template(self, scanner: Scanner) -> Node:
        start = scanner.pos
        scanner.expect("`")
        children = [scanner.leaf("delimiter", start)]
        chunk_start = scanner.pos
        while True:
            ch = scanner.peek()
            if ch == "":
                raise scanner.error("unterminated template literal", pos=start)
            if ch == "\\":
                scanner.advance(2)
                continue
            if ch == "`" or scanner.startswith("${"):
                if scanner.pos > chunk_start:
                    children.append(scanner.leaf("template-chunk", chunk_start))
                if ch == "`":
                    break
                children.append(self._parse_template_expression(scanner))
                chunk_start = scanner.pos
                continue
            scanner.advance()
        close_start = scanner.pos
        scanner.advance()
        children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("template", start, children)

    def _parse_template_expression(self, scanner: Scanner) -> Node:
        start = scanner.pos
        with scanner.nested():
            scanner.expect("${")
            children = [scanner.leaf("delimiter", start)]
            children.extend(self._parse_items(scanner, in_expression=True))
            close_start = scanner.pos
            scanner.expect("}")
            children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("template-expression", start, children)

    def render_string_body(self, node: Node) -> str:
        return spacing_segments(node.text)

    def render_template_chunk(self, node: Node) -> str:
        return spacing_segments(node.text)

    def render_template_expression(self, node: Node) -> str:
        return node.text
