"""Tests for the error taxonomy."""

from paranoid_space.errors import (
    ConfigError,
    NestingDepthError,
    ParseError,
    SpacingError,
    UnknownFormatError,
)


def test_hierarchy():
    assert issubclass(ParseError, SpacingError)
    assert issubclass(NestingDepthError, ParseError)
    assert issubclass(UnknownFormatError, SpacingError)
    assert issubclass(ConfigError, SpacingError)


def test_parse_error_message():
    error = ParseError("json", "trailing comma", line=2, column=5, excerpt='  "a": 1,]')
    assert str(error) == "json syntax error at line 2, column 5: trailing comma"
    assert error.get_detailed_message().splitlines() == [
        "json syntax error at line 2, column 5: trailing comma",
        '  |   "a": 1,]',
        "  |     ^",
    ]


def test_parse_error_without_location():
    error = ParseError("css", "broken")
    assert str(error) == "css syntax error: broken"
    assert error.get_detailed_message() == "css syntax error: broken"


def test_nesting_depth_error():
    error = NestingDepthError("html", 4, line=1, column=9)
    assert error.max_depth == 4
    assert error.format == "html"
    assert "nesting deeper than 4 levels" in str(error)


def test_unknown_format_error():
    error = UnknownFormatError("cobol", ["html", "css"])
    assert str(error) == "Unknown format 'cobol' (known: html, css)"
