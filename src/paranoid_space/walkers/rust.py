"""Rust-like source: strings, comments and doc comments are prose.

String literals (plain, byte, raw and raw byte) and ordinary comments are
spaced as a whole. Doc comments are grouped into blocks, stripped of their
per-line prefixes, processed as Markdown and re-prefixed line by line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .base import FormatWalker, Node, Scanner


class CommentStyle(str, Enum):
    LINE_OUTER = "///"
    LINE_INNER = "//!"
    BLOCK_OUTER = "/**"
    BLOCK_INNER = "/*!"


_PREFIXES = {
    CommentStyle.LINE_OUTER: re.compile(r"\s*/// ?"),
    CommentStyle.LINE_INNER: re.compile(r"\s*//! ?"),
    CommentStyle.BLOCK_OUTER: re.compile(r"\s*\* ?"),
    CommentStyle.BLOCK_INNER: re.compile(r"\s*\* ?"),
}

_DOC_BLOCK_KINDS = {
    "doc-line-outer": CommentStyle.LINE_OUTER,
    "doc-line-inner": CommentStyle.LINE_INNER,
    "doc-block-outer": CommentStyle.BLOCK_OUTER,
    "doc-block-inner": CommentStyle.BLOCK_INNER,
}

_CODE = re.compile(r"[^/\"'brc]+|[brc](?![r#\"'])")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_RAW_STRING = re.compile(r"(?:b|c)?r(#*)\"")
_STRING = re.compile(r"(?:b|c)?\"")
_CHAR = re.compile(
    r"b?'(?:[^'\\\n\r]|\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F_]{1,8}\}|[^\n\r]))'"
)
_LIFETIME = re.compile(r"'[A-Za-z_][A-Za-z0-9_]*")
_INDENTED_DOC_LINE = re.compile(r"[ \t]*(///(?!/)|//!)")


@dataclass(frozen=True)
class DocCommentBlock:
    """Raw lines of one doc comment; each line keeps its line ending."""

    style: CommentStyle
    raw_lines: Tuple[str, ...]

    def split_prefix_and_content(self) -> Tuple[List[str], List[str]]:
        pattern = _PREFIXES[self.style]
        prefixes: List[str] = []
        contents: List[str] = []
        for line in self.raw_lines:
            found = pattern.match(line)
            if found is not None:
                prefixes.append(found.group(0))
                contents.append(line[found.end():])
            else:
                prefixes.append("")
                contents.append(line)
        return prefixes, contents


def split_lines(text: str) -> Tuple[str, ...]:
    """Split after every newline, keeping line endings.

    >>> split_lines("a\\nb\\n")
    ('a\\n', 'b\\n')
    """
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1] and len(lines) > 1:
        lines.pop()
    return tuple(lines)


class RustWalker(FormatWalker):
    """Walker for Rust source files."""

    name = "rust"
    extensions = (".rs",)
    description = "Rust source"
    prose_kinds = frozenset({"string", "comment"})

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children: List[Node] = []
        code_start: Optional[int] = None

        while not scanner.at_end():
            start = scanner.pos
            token = self._parse_token(scanner)
            if token is None:
                if code_start is None:
                    code_start = start
                continue
            if code_start is not None:
                children.append(Node("code", text[code_start:start], (), code_start, start))
                code_start = None
            children.append(token)

        if code_start is not None:
            children.append(Node("code", text[code_start:], (), code_start, len(text)))
        return scanner.node("program", 0, children)

    def _parse_token(self, scanner: Scanner) -> Optional[Node]:
        """Scan one prose-bearing token, or advance over code and return None."""
        start = scanner.pos
        if scanner.consume_match(_CODE):
            return None

        if scanner.startswith("//"):
            if self._is_doc_line(scanner, start):
                return self._parse_doc_lines(scanner)
            end = scanner.find("\n")
            scanner.pos = len(scanner.text) if end < 0 else end
            return scanner.leaf("comment", start)

        if scanner.startswith("/*"):
            if scanner.startswith("/*!") or (
                scanner.startswith("/**") and not scanner.startswith("/**/")
                and not scanner.startswith("/***")
            ):
                return self._parse_doc_block(scanner)
            self._skip_block_comment(scanner)
            return scanner.leaf("comment", start)

        raw = scanner.match(_RAW_STRING)
        if raw is not None:
            scanner.pos = raw.end()
            closing = '"' + raw.group(1)
            end = scanner.find(closing)
            if end < 0:
                raise scanner.error("unterminated raw string literal", pos=start)
            scanner.pos = end + len(closing)
            return scanner.leaf("string", start)

        if scanner.consume_match(_STRING):
            while True:
                ch = scanner.peek()
                if ch == "":
                    raise scanner.error("unterminated string literal", pos=start)
                if ch == '"':
                    scanner.advance()
                    return scanner.leaf("string", start)
                scanner.advance(2 if ch == "\\" else 1)

        if scanner.consume_match(_CHAR) or scanner.consume_match(_LIFETIME):
            return scanner.leaf("char", start)

        if scanner.consume_match(_IDENTIFIER) is None:
            scanner.advance()
        return None

    @staticmethod
    def _is_doc_line(scanner: Scanner, pos: int) -> bool:
        text = scanner.text
        return (text.startswith("///", pos) and not text.startswith("////", pos)) or \
            text.startswith("//!", pos)

    def _parse_doc_lines(self, scanner: Scanner) -> Node:
        """Consecutive ``///`` (or ``//!``) lines, including their newlines."""
        start = scanner.pos
        marker = scanner.text[start:start + 3]
        kind = "doc-line-outer" if marker == "///" else "doc-line-inner"
        while True:
            end = scanner.find("\n")
            if end < 0:
                scanner.pos = len(scanner.text)
                break
            scanner.pos = end + 1
            follow = scanner.match(_INDENTED_DOC_LINE)
            if follow is None or follow.group(1) != marker:
                break
        return scanner.leaf(kind, start)

    def _parse_doc_block(self, scanner: Scanner) -> Node:
        start = scanner.pos
        kind = "doc-block-inner" if scanner.startswith("/*!") else "doc-block-outer"
        self._skip_block_comment(scanner)
        return scanner.leaf(kind, start)

    def _skip_block_comment(self, scanner: Scanner) -> None:
        """Skip a block comment, honouring nested ``/* */`` pairs."""
        start = scanner.pos
        scanner.expect("/*")
        depth = 1
        while depth:
            if scanner.at_end():
                raise scanner.error("unterminated block comment", pos=start)
            if scanner.consume("/*"):
                depth += 1
                if depth > scanner.max_depth:
                    raise scanner.depth_error()
            elif scanner.consume("*/"):
                depth -= 1
            else:
                scanner.advance()

    def _space_doc_block(self, block: DocCommentBlock) -> str:
        prefixes, contents = block.split_prefix_and_content()
        content = "".join(contents)
        spaced_lines = self.delegate("markdown", content).split("\n")

        result_lines = []
        for index, prefix in enumerate(prefixes):
            line = spaced_lines[index] if index < len(spaced_lines) else ""
            result_lines.append(prefix + line)
        result = "\n".join(result_lines)
        if block.raw_lines[-1].endswith("\n") and not result.endswith("\n"):
            result += "\n"
        return result

    def _render_doc_lines(self, node: Node) -> str:
        block = DocCommentBlock(_DOC_BLOCK_KINDS[node.kind], split_lines(node.text))
        return self._space_doc_block(block)

    def _render_doc_block(self, node: Node) -> str:
        opener = node.text[:3]
        body = node.text[3:-2]
        block = DocCommentBlock(_DOC_BLOCK_KINDS[node.kind], split_lines(body))
        return opener + self._space_doc_block(block) + "*/"

    render_doc_line_outer = _render_doc_lines
    render_doc_line_inner = _render_doc_lines
    render_doc_block_outer = _render_doc_block
    render_doc_block_inner = _render_doc_block
