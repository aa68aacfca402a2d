"""Half-width / full-width character classification."""

from __future__ import annotations

from enum import Enum
import unicodedata


class CharClass(str, Enum):
    """Display width class of a single character."""

    HALF = "half"
    FULL = "full"


# East Asian Width categories rendered in two terminal cells.
_WIDE_CATEGORIES = frozenset({"W", "F"})


def classify(ch: str) -> CharClass:
    """Classify one character by its display width.

    Wide and fullwidth characters occupy two cells and are FULL. Narrow,
    halfwidth, ambiguous and neutral characters (including control
    characters, which have no measurable width) are HALF.
    """
    if unicodedata.east_asian_width(ch) in _WIDE_CATEGORIES:
        return CharClass.FULL
    return CharClass.HALF


def is_full(ch: str) -> bool:
    return classify(ch) is CharClass.FULL


def is_half(ch: str) -> bool:
    return classify(ch) is CharClass.HALF
