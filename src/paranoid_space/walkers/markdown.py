"""Markdown: text runs, link text and image alt text are prose.

Block structure is recognised line by line. Front matter, fenced and
indented code, link reference definitions and thematic breaks are copied
verbatim. HTML blocks go through the HTML walker in fragment mode. Inside
a line, code spans, autolinks, bare URLs, inline tags, escapes and
emphasis markers split the text into separately spaced runs.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

import frontmatter

from .base import FormatWalker, Node, Scanner

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"(?P<prefix>(?:[ \t]*>)*[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)")
_FENCE_PREFIX = re.compile(r"(?:[ \t]*>)*[ \t]*")
_INDENTED_CODE = re.compile(r"(?: {4}|\t)")
_LINK_DEFINITION = re.compile(r" {0,3}\[[^\]]+\]:[ \t]*\S")
_HTML_BLOCK = re.compile(
    r" {0,3}<(?:!--|\?|![A-Za-z]|!\[CDATA\[|/?(?:address|article|aside|blockquote|body"
    r"|details|dialog|dd|div|dl|dt|fieldset|figcaption|figure|footer|form|h[1-6]|head"
    r"|header|hr|html|iframe|legend|li|link|main|menu|nav|ol|p|pre|script|section|style"
    r"|summary|table|tbody|td|textarea|tfoot|th|thead|title|tr|ul)(?:[\s/>]|$))",
    re.IGNORECASE,
)
_HTML_RAW_BLOCK = re.compile(r" {0,3}<(script|pre|style|textarea)(?:[\s>]|$)", re.IGNORECASE)

_BLOCKQUOTE = re.compile(r"[ \t]{0,3}>[ \t]?")
_LIST_ITEM = re.compile(r"[ \t]*(?:[-+*]|[0-9]{1,9}[.)])(?:[ \t]+|$)")
_TASK = re.compile(r"\[[ xX]\](?:[ \t]+|$)")
_THEMATIC_BREAK = re.compile(r" {0,3}(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
_ATX_HEADING = re.compile(r" {0,3}#{1,6}(?:[ \t]+|$)")

_PLAIN = re.compile(r"[^`\\<!\[*_~hf]+")
_BACKTICKS = re.compile(r"`+")
_ESCAPABLE = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")
_AUTOLINK = re.compile(r"<(?:[A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*|[^\s<>@]+@[^\s<>@]+)>")
_INLINE_HTML = re.compile(r"</?[A-Za-z][A-Za-z0-9-]*(?:\s+[^<>]*)?/?>|<!--.*?-->")
_BARE_URL = re.compile(r"(?:https?|ftp)://[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")
_EMPHASIS = re.compile(r"\*+|_+|~~+")


def front_matter_end(text: str) -> int:
    """Return the offset just past a leading front matter block, or 0."""
    handler = frontmatter.detect_format(text, frontmatter.handlers)
    if handler is None:
        return 0
    boundaries = handler.FM_BOUNDARY.finditer(text)
    first = next(boundaries, None)
    second = next(boundaries, None)
    if first is None or first.start() != 0 or second is None:
        return 0
    end = second.end()
    if text.startswith("\r\n", end):
        end += 2
    elif text.startswith("\n", end):
        end += 1
    logger.debug(f"markdown: front matter ({type(handler).__name__}) spans {end} characters")
    return end


class MarkdownWalker(FormatWalker):
    """Walker for Markdown documents."""

    name = "markdown"
    extensions = (".md", ".markdown")
    description = "Markdown documents"
    prose_kinds = frozenset({"text"})

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children: List[Node] = []

        end = front_matter_end(text)
        if end:
            scanner.pos = end
            children.append(scanner.leaf("front-matter", 0))

        previous_blank = True
        in_list = False
        while not scanner.at_end():
            start = scanner.pos
            line = self._line_at(scanner)

            if not line.strip():
                self._next_line(scanner)
                children.append(scanner.leaf("blank", start))
                previous_blank = True
                continue

            fence = _FENCE_OPEN.match(line)
            if fence and not (fence.group("fence")[0] == "`" and "`" in fence.group("info")):
                self._skip_fenced_code(scanner, fence.group("fence"))
                children.append(scanner.leaf("code-block", start))
            elif previous_blank and not in_list and _INDENTED_CODE.match(line):
                self._skip_indented_code(scanner)
                children.append(scanner.leaf("code-block", start))
            elif _HTML_BLOCK.match(line):
                self._skip_html_block(scanner, line)
                children.append(scanner.leaf("html-block", start))
            elif _LINK_DEFINITION.match(line):
                self._next_line(scanner)
                children.append(scanner.leaf("link-definition", start))
            else:
                node = self._parse_line(scanner, start + len(line))
                if any(child.kind == "list-marker" for child in node.children):
                    in_list = True
                elif not line[:1].isspace():
                    in_list = False
                children.append(node)
            previous_blank = False

        return scanner.node("document", 0, children)

    # Block level

    @staticmethod
    def _line_at(scanner: Scanner) -> str:
        """Text of the current line without its line ending."""
        end = scanner.find("\n")
        if end < 0:
            end = len(scanner.text)
        return scanner.text[scanner.pos:end].rstrip("\r")

    @staticmethod
    def _next_line(scanner: Scanner) -> None:
        end = scanner.find("\n")
        scanner.pos = len(scanner.text) if end < 0 else end + 1

    def _skip_fenced_code(self, scanner: Scanner, fence: str) -> None:
        closing = re.compile(re.escape(fence[0]) + "{" + str(len(fence)) + r",}[ \t]*$")
        self._next_line(scanner)
        while not scanner.at_end():
            line = self._line_at(scanner)
            self._next_line(scanner)
            prefix = _FENCE_PREFIX.match(line)
            if closing.match(line, prefix.end() if prefix else 0):
                return

    def _skip_indented_code(self, scanner: Scanner) -> None:
        while not scanner.at_end():
            line = self._line_at(scanner)
            if _INDENTED_CODE.match(line):
                self._next_line(scanner)
                continue
            if not line.strip():
                # Blank lines belong to the block only when more code follows.
                probe = scanner.pos
                while not scanner.at_end() and not self._line_at(scanner).strip():
                    self._next_line(scanner)
                if not scanner.at_end() and _INDENTED_CODE.match(self._line_at(scanner)):
                    continue
                scanner.pos = probe
            return

    def _skip_html_block(self, scanner: Scanner, first_line: str) -> None:
        raw = _HTML_RAW_BLOCK.match(first_line)
        if first_line.lstrip().startswith("<!--"):
            terminator: Optional[str] = "-->"
        elif raw is not None:
            terminator = "</" + raw.group(1).lower()
        else:
            terminator = None

        while not scanner.at_end():
            line = self._line_at(scanner)
            if terminator is None and not line.strip():
                return
            self._next_line(scanner)
            if terminator is not None and terminator in line.lower():
                return

    def _parse_line(self, scanner: Scanner, content_end: int) -> Node:
        start = scanner.pos
        text = scanner.text
        children: List[Node] = []

        while True:
            marker_start = scanner.pos
            quote = _BLOCKQUOTE.match(text, scanner.pos, content_end)
            if quote is not None:
                scanner.pos = quote.end()
                children.append(scanner.leaf("quote-marker", marker_start))
                continue
            if _THEMATIC_BREAK.match(text, scanner.pos, content_end):
                break
            item = _LIST_ITEM.match(text, scanner.pos, content_end)
            if item is not None:
                scanner.pos = item.end()
                children.append(scanner.leaf("list-marker", marker_start))
                task = _TASK.match(text, scanner.pos, content_end)
                if task is not None:
                    task_start = scanner.pos
                    scanner.pos = task.end()
                    children.append(scanner.leaf("task-marker", task_start))
                continue
            break

        marker_start = scanner.pos
        if _THEMATIC_BREAK.match(text, scanner.pos, content_end):
            scanner.pos = content_end
            children.append(scanner.leaf("rule", marker_start))
        else:
            heading = _ATX_HEADING.match(text, scanner.pos, content_end)
            if heading is not None:
                scanner.pos = heading.end()
                children.append(scanner.leaf("heading-marker", marker_start))
            children.extend(self._parse_inline(scanner, content_end))

        newline_start = scanner.pos
        self._next_line(scanner)
        if scanner.pos > newline_start:
            children.append(scanner.leaf("newline", newline_start))
        return scanner.node("line", start, children)

    # Inline level

    def _parse_inline(self, scanner: Scanner, end: int) -> List[Node]:
        text = scanner.text
        nodes: List[Node] = []
        run_start = scanner.pos

        while scanner.pos < end:
            token_start = scanner.pos
            ch = text[token_start]
            token: Optional[Node] = None

            if ch == "`":
                ticks = _BACKTICKS.match(text, token_start, end).group(0)
                close = self._code_span_end(text, token_start + len(ticks), end, len(ticks))
                if close is None:
                    scanner.pos = token_start + len(ticks)
                    continue
                scanner.pos = close
                token = scanner.leaf("code-span", token_start)
            elif ch == "\\":
                if token_start + 1 < end and text[token_start + 1] in _ESCAPABLE:
                    scanner.pos = token_start + 2
                    token = scanner.leaf("escape", token_start)
            elif ch == "<":
                found = _AUTOLINK.match(text, token_start, end) or _INLINE_HTML.match(
                    text, token_start, end
                )
                if found is not None:
                    scanner.pos = found.end()
                    token = scanner.leaf("inline-markup", token_start)
            elif ch == "!":
                if text.startswith("[", token_start + 1):
                    token = self._parse_link(scanner, end, image=True)
            elif ch == "[":
                token = self._parse_link(scanner, end, image=False)
            elif ch in "*_~":
                token = self._parse_emphasis(scanner, end)
            elif ch in "hf":
                before = text[token_start - 1] if token_start else ""
                if not (before.isascii() and before.isalnum()):
                    url = _BARE_URL.match(text, token_start, end)
                    if url is not None:
                        scanner.pos = url.end()
                        token = scanner.leaf("url", token_start)
            else:
                plain = _PLAIN.match(text, token_start, end)
                scanner.pos = plain.end()
                continue

            if token is None:
                scanner.pos = token_start + 1
                continue
            if token_start > run_start:
                nodes.append(Node("text", text[run_start:token_start], (), run_start, token_start))
            nodes.append(token)
            run_start = scanner.pos

        if scanner.pos > run_start:
            nodes.append(Node("text", text[run_start:scanner.pos], (), run_start, scanner.pos))
        return nodes

    @staticmethod
    def _code_span_end(text: str, pos: int, end: int, length: int) -> Optional[int]:
        for ticks in _BACKTICKS.finditer(text, pos, end):
            if len(ticks.group(0)) == length:
                return ticks.end()
        return None

    def _parse_emphasis(self, scanner: Scanner, end: int) -> Optional[Node]:
        text = scanner.text
        start = scanner.pos
        found = _EMPHASIS.match(text, start, end)
        if found is None:
            return None
        if text[start] == "_":
            before = text[start - 1] if start > 0 else ""
            after = text[found.end()] if found.end() < end else ""
            if before.isalnum() and after.isalnum():
                # snake_case identifiers
                return None
        scanner.pos = found.end()
        return scanner.leaf("emphasis-marker", start)

    def _parse_link(self, scanner: Scanner, end: int, image: bool) -> Optional[Node]:
        text = scanner.text
        start = scanner.pos
        label_start = start + (2 if image else 1)
        label_end = self._closing_bracket(text, label_start, end)
        if label_end is None:
            return None
        tail_end = self._link_tail_end(text, label_end + 1, end)
        if image and tail_end is None:
            return None

        scanner.pos = label_start
        children = [scanner.leaf("link-marker", start)]
        with scanner.nested():
            children.extend(self._parse_inline(scanner, label_end))
        scanner.pos = tail_end if tail_end is not None else label_end + 1
        children.append(scanner.leaf("link-tail", label_end))
        return scanner.node("image" if image else "link", start, children)

    @staticmethod
    def _closing_bracket(text: str, pos: int, end: int) -> Optional[int]:
        depth = 1
        index = pos
        while index < end:
            ch = text[index]
            if ch == "\\":
                index += 2
                continue
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return index
            index += 1
        return None

    @staticmethod
    def _link_tail_end(text: str, pos: int, end: int) -> Optional[int]:
        """End of ``(destination "title")`` or ``[label]`` after a link label."""
        if pos >= end:
            return None
        if text[pos] == "[":
            close = text.find("]", pos + 1, end)
            return close + 1 if close >= 0 else None
        if text[pos] != "(":
            return None
        depth = 0
        index = pos
        while index < end:
            ch = text[index]
            if ch == "\\":
                index += 2
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        return None

    def render_html_block(self, node: Node) -> str:
        return self.delegate("html", node.text, fragment=True)
