"""Strict JSON (RFC 8259): string keys and values are prose."""

from __future__ import annotations

import re
from typing import List

from ..spacing import spacing
from .base import FormatWalker, Node, Scanner

_WHITESPACE = re.compile(r"[ \t\n\r]+")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_LITERAL = re.compile(r"(?:true|false|null)(?![A-Za-z0-9_$])")
_ESCAPE = re.compile(r"\\(?:[\"\\/bfnrt]|u[0-9a-fA-F]{4})")


class JsonWalker(FormatWalker):
    """Walker for strict JSON documents.

    The grammar hooks (whitespace, strings, numbers, keys) are methods so
    the JSON5 walker can relax them.
    """

    name = "json"
    extensions = (".json",)
    description = "JSON documents"
    allow_trailing_comma = False

    @property
    def space_keys(self) -> bool:
        return self.config.json_format.space_keys

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children: List[Node] = []
        if scanner.consume("\ufeff"):
            children.append(scanner.leaf("bom", 0))
        children.extend(self._skip_whitespace(scanner))
        if scanner.at_end():
            raise scanner.error("expected a value")
        children.append(self._parse_value(scanner))
        children.extend(self._skip_whitespace(scanner))
        if not scanner.at_end():
            raise scanner.error("unexpected content after the top-level value")
        return scanner.node("document", 0, children)

    def _skip_whitespace(self, scanner: Scanner) -> List[Node]:
        start = scanner.pos
        if scanner.consume_match(_WHITESPACE):
            return [scanner.leaf("whitespace", start)]
        return []

    def _parse_value(self, scanner: Scanner) -> Node:
        ch = scanner.peek()
        if ch == "{":
            return self._parse_container(scanner, "{", "}", "object")
        if ch == "[":
            return self._parse_container(scanner, "[", "]", "array")
        if ch == '"':
            return self._parse_string(scanner, "string", "string-body")
        start = scanner.pos
        if scanner.consume_match(_LITERAL) or self._consume_number(scanner):
            return scanner.leaf("scalar", start)
        if ch == "":
            raise scanner.error("unexpected end of input, expected a value")
        raise scanner.error(f"unexpected character {ch!r}, expected a value")

    def _consume_number(self, scanner: Scanner) -> bool:
        return scanner.consume_match(_NUMBER) is not None

    def _parse_string(self, scanner: Scanner, kind: str, body_kind: str) -> Node:
        start = scanner.pos
        scanner.expect('"')
        opening = scanner.leaf("delimiter", start)
        body_start = scanner.pos
        while True:
            ch = scanner.peek()
            if ch == "":
                raise scanner.error("unterminated string", pos=start)
            if ch == '"':
                break
            if ch == "\\":
                if scanner.consume_match(_ESCAPE) is None:
                    raise scanner.error("invalid escape sequence")
                continue
            if ord(ch) < 0x20:
                raise scanner.error("control character in string")
            scanner.advance()
        body = scanner.leaf(body_kind, body_start)
        close_start = scanner.pos
        scanner.advance()
        return scanner.node(kind, start, [opening, body, scanner.leaf("delimiter", close_start)])

    def _parse_key(self, scanner: Scanner) -> Node:
        if scanner.peek() != '"':
            raise scanner.error("expected a string key")
        return self._parse_string(scanner, "key", "key-body")

    def _parse_container(self, scanner: Scanner, opener: str, closer: str, kind: str) -> Node:
        start = scanner.pos
        with scanner.nested():
            scanner.expect(opener)
            children = [scanner.leaf("delimiter", start)]
            children.extend(self._skip_whitespace(scanner))
            first = True
            while not scanner.startswith(closer):
                if not first:
                    comma_start = scanner.pos
                    scanner.expect(",", f"',' or '{closer}'")
                    children.append(scanner.leaf("delimiter", comma_start))
                    children.extend(self._skip_whitespace(scanner))
                    if scanner.startswith(closer):
                        if not self.allow_trailing_comma:
                            raise scanner.error("trailing comma")
                        break
                first = False
                if kind == "object":
                    children.extend(self._parse_member(scanner))
                else:
                    children.append(self._parse_value(scanner))
                children.extend(self._skip_whitespace(scanner))
                if scanner.at_end():
                    raise scanner.error(f"expected ',' or '{closer}'")
            close_start = scanner.pos
            scanner.advance()
            children.append(scanner.leaf("delimiter", close_start))
        return scanner.node(kind, start, children)

    def _parse_member(self, scanner: Scanner) -> List[Node]:
        children = [self._parse_key(scanner)]
        children.extend(self._skip_whitespace(scanner))
        colon_start = scanner.pos
        scanner.expect(":", "':'")
        children.append(scanner.leaf("delimiter", colon_start))
        children.extend(self._skip_whitespace(scanner))
        children.append(self._parse_value(scanner))
        return children

    def render_key_body(self, node: Node) -> str:
        if self.space_keys:
            return self.render_string_body(node)
        return node.text

    def render_string_body(self, node: Node) -> str:
        return spacing(node.text)
