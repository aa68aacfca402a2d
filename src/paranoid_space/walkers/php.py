"""PHP templates.

The input alternates between HTML chunks and PHP blocks opened by
``<?php``, ``<?=`` or a short ``<?`` tag and closed by ``?>`` (a file may
end inside PHP). HTML chunks go through the HTML walker in fragment mode;
when a PHP block sits inside a start tag, the rest of that tag is copied
verbatim.
Inside PHP, comment bodies and string literals are prose; string text is
spaced markup-aware so inline tags and entities stay intact, and variable
interpolation in double-quoted strings and heredocs is copied verbatim.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..spacing import spacing
from .base import FormatWalker, Node, Scanner, scan_block_comment, scan_line_comment, scan_quoted
from .html import space_markup

_OPEN_TAG = re.compile(r"<\?(?:php(?![A-Za-z0-9_])|=|(?=\s))", re.IGNORECASE)
_TAG_START = re.compile(r"</?[A-Za-z]")
_CODE = re.compile(r"(?:[^?/#'\"`<]|\?(?!>)|/(?![/*])|<(?!<<))+")
_HEREDOC_OPEN = re.compile(
    r"<<<[ \t]*(?:\"(?P<quoted>[A-Za-z_][A-Za-z0-9_]*)\"|'(?P<nowdoc>[A-Za-z_][A-Za-z0-9_]*)'"
    r"|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))\r?\n"
)

_LABEL_CHARS = "A-Za-z0-9_\x80-\U0010ffff"
_NAME = "[A-Za-z_\x80-\U0010ffff][" + _LABEL_CHARS + "]*"
_SIMPLE_INTERPOLATION = re.compile(
    r"\$" + _NAME + r"(?:\[[^\]\n\"']*\]|->" + _NAME + ")?"
)


class PhpWalker(FormatWalker):
    """Walker for PHP files."""

    name = "php"
    extensions = (".php",)
    description = "PHP templates"
    prose_kinds = frozenset({"comment-body"})

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children: List[Node] = []
        in_tag = False
        while not scanner.at_end():
            opening = _OPEN_TAG.search(text, scanner.pos)
            chunk_end = len(text) if opening is None else opening.start()
            if chunk_end > scanner.pos:
                nodes, in_tag = self._parse_html(scanner, chunk_end, in_tag)
                children.extend(nodes)
            if opening is None:
                break
            children.append(self._parse_php_block(scanner, opening.end()))
        return scanner.node("template", 0, children)

    def _parse_html(self, scanner: Scanner, end: int, in_tag: bool) -> Tuple[List[Node], bool]:
        """Split HTML up to ``end`` into chunks and start-tag remainders.

        A PHP block may sit inside a start tag (``<a href="<?= $u ?>">``).
        The part of the tag around the block is kept as a ``tag-fragment``
        so the HTML walker never sees half a tag. Returns the nodes and
        whether ``end`` falls inside an open start tag.
        """
        text = scanner.text
        nodes: List[Node] = []
        start = scanner.pos
        if in_tag:
            close = text.find(">", start, end)
            if close < 0:
                scanner.pos = end
                return [scanner.leaf("tag-fragment", start)], True
            scanner.pos = close + 1
            nodes.append(scanner.leaf("tag-fragment", start))
            start = scanner.pos

        tail = None
        for found in _TAG_START.finditer(text, start, end):
            tail = found.start()
        if tail is not None and text.find(">", tail, end) >= 0:
            tail = None

        if start < (end if tail is None else tail):
            scanner.pos = end if tail is None else tail
            nodes.append(scanner.leaf("html-chunk", start))
        if tail is None:
            return nodes, False
        scanner.pos = end
        nodes.append(scanner.leaf("tag-fragment", tail))
        return nodes, True

    def _parse_php_block(self, scanner: Scanner, tag_end: int) -> Node:
        start = scanner.pos
        scanner.pos = tag_end
        children = [scanner.leaf("open-tag", start)]
        children.extend(self._parse_code(scanner))
        close_start = scanner.pos
        if scanner.consume("?>"):
            children.append(scanner.leaf("close-tag", close_start))
        return scanner.node("php-block", start, children)

    def _parse_code(self, scanner: Scanner) -> List[Node]:
        items: List[Node] = []
        while not scanner.at_end() and not scanner.startswith("?>"):
            start = scanner.pos
            ch = scanner.peek()
            if scanner.consume_match(_CODE):
                items.append(scanner.leaf("code", start))
            elif scanner.startswith("//"):
                items.append(scan_line_comment(scanner, "//", stop="?>"))
            elif ch == "#":
                if scanner.startswith("#["):
                    # PHP 8 attribute
                    scanner.advance()
                    items.append(scanner.leaf("code", start))
                else:
                    items.append(scan_line_comment(scanner, "#", stop="?>"))
            elif scanner.startswith("/*"):
                items.append(scan_block_comment(scanner))
            elif ch == "'":
                items.append(scan_quoted(scanner, body_kind="string-body", allow_newline=True))
            elif ch == "`":
                items.append(scan_quoted(scanner, body_kind="shell-body", kind="shell",
                                         allow_newline=True))
            elif ch == '"':
                items.append(self._parse_double_quoted(scanner))
            elif scanner.match(_HEREDOC_OPEN):
                items.append(self._parse_heredoc(scanner))
            else:
                # '<<<' without a valid label
                scanner.advance(3)
                items.append(scanner.leaf("code", start))
        return items

    def _parse_double_quoted(self, scanner: Scanner) -> Node:
        start = scanner.pos
        scanner.expect('"')
        children = [scanner.leaf("delimiter", start)]
        children.extend(self._parse_interpolated(scanner, end=None, literal_start=start))
        close_start = scanner.pos
        scanner.advance()
        children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("string", start, children)

    def _parse_heredoc(self, scanner: Scanner) -> Node:
        start = scanner.pos
        opening = scanner.consume_match(_HEREDOC_OPEN)
        header = _HEREDOC_OPEN.match(opening)
        label = header.group("quoted") or header.group("nowdoc") or header.group("bare")
        children = [scanner.leaf("heredoc-open", start)]

        closing = re.compile(
            r"^[ \t]*" + re.escape(label) + "(?![" + _LABEL_CHARS + "])", re.MULTILINE
        )
        found = closing.search(scanner.text, scanner.pos)
        if found is None:
            raise scanner.error(f"unterminated heredoc, expected closing label {label}", pos=start)

        if header.group("nowdoc"):
            body_start = scanner.pos
            scanner.pos = found.start()
            children.append(scanner.leaf("nowdoc-body", body_start))
        else:
            children.extend(self._parse_interpolated(scanner, end=found.start(), literal_start=start))
        label_start = scanner.pos
        scanner.pos = found.end()
        children.append(scanner.leaf("heredoc-close", label_start))
        return scanner.node("heredoc", start, children)

    def _parse_interpolated(self, scanner: Scanner, end: Optional[int], literal_start: int) -> List[Node]:
        """Literal text and interpolations up to ``end`` or an unescaped quote."""
        parts: List[Node] = []
        run_start = scanner.pos

        def flush(until: int) -> None:
            if until > run_start:
                parts.append(Node("literal", scanner.text[run_start:until], (), run_start, until))

        while True:
            if end is not None:
                if scanner.pos >= end:
                    break
            else:
                ch = scanner.peek()
                if ch == "":
                    raise scanner.error("unterminated string literal", pos=literal_start)
                if ch == '"':
                    break
            if scanner.peek() == "\\":
                scanner.advance(2)
                continue
            token_start = scanner.pos
            token_end = self._interpolation_end(scanner)
            if token_end is None:
                scanner.advance()
                continue
            flush(token_start)
            scanner.pos = token_end
            parts.append(scanner.leaf("interpolation", token_start))
            run_start = scanner.pos

        flush(scanner.pos)
        return parts

    @staticmethod
    def _interpolation_end(scanner: Scanner) -> Optional[int]:
        """End offset of an interpolation starting at the cursor, if any."""
        if scanner.startswith("{$") or scanner.startswith("${"):
            text = scanner.text
            index = scanner.pos + (1 if scanner.startswith("{$") else 2)
            depth = 1
            while index < len(text):
                ch = text[index]
                if ch in "'\"":
                    close = text.find(ch, index + 1)
                    if close < 0:
                        return None
                    index = close + 1
                    continue
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        return index + 1
                elif ch == "\n":
                    return None
                index += 1
            return None
        found = scanner.match(_SIMPLE_INTERPOLATION)
        return found.end() if found is not None else None

    def render_html_chunk(self, node: Node) -> str:
        return self.delegate("html", node.text, fragment=True)

    def render_comment_body(self, node: Node) -> str:
        return spacing(node.text)

    def render_string_body(self, node: Node) -> str:
        return space_markup(node.text)

    def render_literal(self, node: Node) -> str:
        return space_markup(node.text)

    def render_nowdoc_body(self, node: Node) -> str:
        return space_markup(node.text)
