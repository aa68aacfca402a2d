"""HTML documents and fragments.

Text nodes are prose, split around character references so an entity is
never spaced into. Quoted values of prose attributes (``title``, ``alt``,
...) are spaced; every other part of a tag is copied verbatim. ``<script>``
bodies go through the JS (or JSON) walker, ``<style>`` bodies through the
CSS walker and comment bodies through this walker in fragment mode.

Document mode is strict: unterminated tags, unclosed elements and
mismatched end tags are syntax errors, except that ``html``, ``head`` and
``body`` may be left open at the end of the input. Fragment mode accepts
unbalanced markup.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..config import SpacingConfig
from ..spacing import spacing, spacing_segments
from .base import FormatWalker, Node, Scanner

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "keygen", "link",
    "meta", "param", "source", "track", "wbr",
})
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})
OPTIONAL_CLOSE_AT_EOF = frozenset({"html", "head", "body"})

JS_SCRIPT_TYPES = frozenset({
    "", "module", "text/javascript", "application/javascript", "text/ecmascript",
    "application/ecmascript", "application/x-javascript", "text/jsx", "text/babel",
})
JSON_SCRIPT_TYPES = frozenset({
    "application/json", "application/ld+json", "application/manifest+json", "importmap",
    "speculationrules",
})

_ENTITY_SOURCE = r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);"
_ENTITY = re.compile(_ENTITY_SOURCE)
# Anything up to a tag, a comment/declaration or a character reference.
_TEXT = re.compile(r"(?:[^<&]|(?!" + _ENTITY_SOURCE + r")&|<(?![A-Za-z/!?]))+")
_TAG_OPEN = re.compile(r"<([A-Za-z][A-Za-z0-9:_.-]*)")
_END_TAG = re.compile(r"</([A-Za-z][A-Za-z0-9:_.-]*)\s*>")
_WHITESPACE = re.compile(r"\s+")
_ATTR_NAME = re.compile(r"[^\s\"'<>/=]+")
_EQUALS = re.compile(r"\s*=\s*")
_UNQUOTED_VALUE = re.compile(r"[^\s\"'=<>`]+")
_MARKUP = re.compile(r"<[^<>]*>|" + _ENTITY_SOURCE)


def space_markup(text: str) -> str:
    """Space text that may contain inline tags and entities.

    Unlike the walker this never fails: anything that looks like a tag or
    a character reference is copied verbatim and the text around it is
    spaced piece by piece.

    >>> space_markup("<h2>变量Output示例</h2>")
    '<h2>变量 Output 示例</h2>'
    """
    return spacing_segments(text, _MARKUP)


class HtmlWalker(FormatWalker):
    """Walker for HTML."""

    name = "html"
    extensions = (".html", ".htm")
    description = "HTML documents"
    prose_kinds = frozenset({"text"})

    def __init__(self, config: Optional[SpacingConfig] = None, fragment: bool = False) -> None:
        super().__init__(config)
        self.fragment = fragment
        self.prose_attributes = frozenset(self.config.html.prose_attributes)

    def parse(self, text: str) -> Node:
        scanner = self.scanner(text)
        children = self._parse_content(scanner, ())
        return scanner.node("document", 0, children)

    def _parse_content(self, scanner: Scanner, open_elements: Tuple[str, ...]) -> List[Node]:
        """Parse nodes until the end of input or the parent's end tag."""
        parent = open_elements[-1] if open_elements else None
        items: List[Node] = []
        while not scanner.at_end():
            start = scanner.pos
            if scanner.consume_match(_TEXT):
                items.append(scanner.leaf("text", start))
            elif scanner.consume_match(_ENTITY):
                items.append(scanner.leaf("entity", start))
            elif scanner.startswith("</"):
                end_tag = scanner.match(_END_TAG)
                if end_tag is None:
                    if not self.fragment:
                        raise scanner.error("unterminated end tag")
                    scanner.advance(2)
                    items.append(scanner.leaf("text", start))
                    continue
                name = end_tag.group(1).lower()
                if name == parent or (self.fragment and name in open_elements):
                    return items
                if not self.fragment:
                    if parent is None:
                        raise scanner.error(f"unexpected end tag </{name}>")
                    raise scanner.error(f"mismatched end tag </{name}>, expected </{parent}>")
                scanner.pos = end_tag.end()
                items.append(scanner.leaf("end-tag", start))
            elif scanner.startswith("<!--"):
                items.append(self._parse_comment(scanner))
            elif scanner.startswith("<![CDATA["):
                items.append(self._parse_until(scanner, "]]>", "cdata"))
            elif scanner.startswith("<!"):
                items.append(self._parse_until(scanner, ">", "declaration"))
            elif scanner.startswith("<?"):
                items.append(self._parse_until(scanner, ">", "processing-instruction"))
            else:
                items.append(self._parse_element(scanner, open_elements))
        return items

    def _parse_until(self, scanner: Scanner, terminator: str, kind: str) -> Node:
        start = scanner.pos
        end = scanner.find(terminator)
        if end < 0:
            raise scanner.error(f"unterminated {kind.replace('-', ' ')}", pos=start)
        scanner.pos = end + len(terminator)
        return scanner.leaf(kind, start)

    def _parse_comment(self, scanner: Scanner) -> Node:
        start = scanner.pos
        scanner.expect("<!--")
        opening = scanner.leaf("delimiter", start)
        body_start = scanner.pos
        end = scanner.find("-->")
        if end < 0:
            raise scanner.error("unterminated comment", pos=start)
        scanner.pos = end
        body = scanner.leaf("comment-body", body_start)
        close_start = scanner.pos
        scanner.advance(3)
        return scanner.node("comment", start, [opening, body, scanner.leaf("delimiter", close_start)])

    def _parse_element(self, scanner: Scanner, open_elements: Tuple[str, ...]) -> Node:
        start = scanner.pos
        tag, name, attributes = self._parse_start_tag(scanner)
        children = [tag]
        if name in VOID_ELEMENTS or tag.children[-1].text == "/>":
            return scanner.node("element", start, children)

        if name in RAW_TEXT_ELEMENTS:
            body_start = scanner.pos
            close = re.compile("</" + name, re.IGNORECASE).search(scanner.text, body_start)
            if close is None:
                raise scanner.error(f"unclosed element <{name}>", pos=start)
            scanner.pos = close.start()
            children.append(scanner.leaf(self._raw_text_kind(name, attributes), body_start))
        else:
            with scanner.nested():
                children.extend(self._parse_content(scanner, open_elements + (name,)))

        end_start = scanner.pos
        end_tag = scanner.match(_END_TAG)
        if end_tag is not None and end_tag.group(1).lower() == name:
            scanner.pos = end_tag.end()
            children.append(scanner.leaf("end-tag", end_start))
        elif not (self.fragment or (scanner.at_end() and name in OPTIONAL_CLOSE_AT_EOF)):
            raise scanner.error(f"unclosed element <{name}>", pos=start)
        return scanner.node("element", start, children)

    def _parse_start_tag(self, scanner: Scanner) -> Tuple[Node, str, Dict[str, str]]:
        start = scanner.pos
        name = scanner.consume_match(_TAG_OPEN)[1:].lower()
        children = [scanner.leaf("tag-open", start)]
        attributes: Dict[str, str] = {}
        while True:
            ws_start = scanner.pos
            if scanner.consume_match(_WHITESPACE):
                children.append(scanner.leaf("whitespace", ws_start))
            if scanner.at_end():
                raise scanner.error(f"unterminated tag <{name}>", pos=start)
            close_start = scanner.pos
            if scanner.consume("/>") or scanner.consume(">"):
                children.append(scanner.leaf("tag-close", close_start))
                break
            if scanner.consume("/"):
                children.append(scanner.leaf("slash", close_start))
                continue
            attribute, attr_name, value = self._parse_attribute(scanner)
            children.append(attribute)
            attributes.setdefault(attr_name, value)
        return scanner.node("start-tag", start, children), name, attributes

    def _parse_attribute(self, scanner: Scanner) -> Tuple[Node, str, str]:
        start = scanner.pos
        name = scanner.consume_match(_ATTR_NAME)
        if name is None:
            raise scanner.error(f"unexpected {scanner.peek()!r} in tag")
        children = [scanner.leaf("attr-name", start)]
        value = ""
        equals = scanner.match(_EQUALS)
        if equals is not None:
            equals_start = scanner.pos
            scanner.pos = equals.end()
            children.append(scanner.leaf("attr-equals", equals_start))
            value_start = scanner.pos
            if scanner.peek() in ("'", '"'):
                node = self._parse_quoted_value(scanner)
                value = node.text[1:-1]
                children.append(node)
            elif scanner.consume_match(_UNQUOTED_VALUE):
                value = scanner.text[value_start:scanner.pos]
                children.append(scanner.leaf("attr-unquoted", value_start))
            else:
                raise scanner.error("expected attribute value")
        return scanner.node("attribute", start, children), name.lower(), value

    def _parse_quoted_value(self, scanner: Scanner) -> Node:
        start = scanner.pos
        quote = scanner.advance()
        children = [scanner.leaf("delimiter", start)]
        end = scanner.find(quote)
        if end < 0:
            raise scanner.error("unterminated attribute value", pos=start)
        while scanner.pos < end:
            part_start = scanner.pos
            entity = scanner.match(_ENTITY)
            if entity is not None and entity.end() <= end:
                scanner.pos = entity.end()
                children.append(scanner.leaf("entity", part_start))
                continue
            next_entity = scanner.text.find("&", scanner.pos + 1, end)
            scanner.pos = end if next_entity < 0 else next_entity
            children.append(scanner.leaf("value-text", part_start))
        close_start = scanner.pos
        scanner.advance()
        children.append(scanner.leaf("delimiter", close_start))
        return scanner.node("attr-value", start, children)

    @staticmethod
    def _raw_text_kind(name: str, attributes: Dict[str, str]) -> str:
        if name == "style":
            return "style-css"
        script_type = attributes.get("type", "").strip().lower().split(";")[0].strip()
        if script_type in JS_SCRIPT_TYPES:
            return "script-js"
        if script_type in JSON_SCRIPT_TYPES:
            return "script-json"
        return "raw-text"

    def render_attribute(self, node: Node) -> str:
        if node.children[0].text.lower() not in self.prose_attributes:
            return node.text
        parts: List[str] = []
        for child in node.children:
            if child.kind != "attr-value":
                parts.append(child.text)
                continue
            for part in child.children:
                parts.append(spacing(part.text) if part.kind == "value-text" else part.text)
        return "".join(parts)

    def render_comment_body(self, node: Node) -> str:
        return self.delegate("html", node.text, fragment=True)

    def _render_embedded(self, fmt: str, node: Node) -> str:
        if not node.text.strip():
            return node.text
        return self.delegate(fmt, node.text)

    def render_script_js(self, node: Node) -> str:
        return self._render_embedded("js", node)

    def render_script_json(self, node: Node) -> str:
        return self._render_embedded("json", node)

    def render_style_css(self, node: Node) -> str:
        return self._render_embedded("css", node)
