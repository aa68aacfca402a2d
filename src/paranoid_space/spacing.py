"""Boundary spacing between full-width and half-width characters.

The engine is a single left-to-right scan with one character of lookback.
For each adjacent pair it decides whether the pair crosses a width
boundary and, if so, whether one of the punctuation/currency exceptions
suppresses the space:

- Full -> Half: space unless the full-width character is closing-style
  punctuation, the half-width character is punctuation/whitespace, or a
  currency sign is followed by a number.
- Half -> Full: space unless the half-width character opens or wraps
  something, the full-width character is punctuation, a currency sign
  precedes a full-width character, or the half-width character is a newline.
- Same class: no space.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Union

from .charclass import is_full

# Full-width punctuation that never takes a space after it.
FULL_PUNCTUATION_BEFORE_HALF = frozenset("，。！？：；“”‘’《》【】（）—…～·、")
# Half-width characters that never take a space before them.
HALF_PUNCTUATION_AFTER_FULL = frozenset(",.!?:;\"'\n\r\t\\")
# Half-width characters that never take a space after them.
HALF_OPENERS_BEFORE_FULL = frozenset("\"'[{<@#%^&_|\\")
# Full-width punctuation that never takes a space before it.
FULL_PUNCTUATION_AFTER_HALF = frozenset("，。！？：；“”‘’《》【】（）—…")

FULL_CURRENCY = frozenset("¥€")
HALF_CURRENCY = frozenset("$¥€")


def _needs_space(prev: str, cur: str) -> bool:
    prev_full = is_full(prev)
    cur_full = is_full(cur)

    if prev_full and not cur_full:
        if cur == " ":
            return False
        if prev in FULL_PUNCTUATION_BEFORE_HALF or cur in HALF_PUNCTUATION_AFTER_FULL:
            return False
        # ¥300, €50
        if prev in FULL_CURRENCY and cur.isnumeric():
            return False
        return True

    if not prev_full and cur_full:
        if prev in HALF_OPENERS_BEFORE_FULL or cur in FULL_PUNCTUATION_AFTER_HALF:
            return False
        if prev in HALF_CURRENCY:
            return False
        if prev == "\n":
            return False
        return True

    return False


def spacing(text: str) -> str:
    """Insert boundary spaces between full-width and half-width characters.

    Total over all strings: never raises, returns "" for "".

    >>> spacing("当你凝视着bug，bug也凝视着你")
    '当你凝视着 bug，bug 也凝视着你'
    """
    if not text:
        return ""

    result: List[str] = [text[0]]
    prev = text[0]
    for cur in text[1:]:
        # Never add a second space after an explicit one.
        if prev != " " and _needs_space(prev, cur):
            result.append(" ")
        result.append(cur)
        prev = cur
    return "".join(result)


# Backslash followed by a line break: a string line continuation.
LINE_CONTINUATION = re.compile(r"\\(?:\r\n|\r|\n|\u2028|\u2029)")


def spacing_segments(text: str, separator: Union[str, Pattern[str]] = LINE_CONTINUATION) -> str:
    """Space each piece of ``text`` between separator matches independently.

    Separators are copied verbatim and never act as a spacing boundary.
    """
    pattern = re.compile(separator) if isinstance(separator, str) else separator
    parts: List[str] = []
    pos = 0
    for match in pattern.finditer(text):
        parts.append(spacing(text[pos:match.start()]))
        parts.append(match.group(0))
        pos = match.end()
    parts.append(spacing(text[pos:]))
    return "".join(parts)
