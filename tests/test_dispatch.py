"""Tests for format resolution and file processing."""

from pathlib import Path

import pytest

from paranoid_space.config import ConfigLoader
from paranoid_space.dispatch import (
    FORMAT_BY_EXTENSION,
    extension_table,
    process_file,
    process_text,
    resolve_format,
    write_result,
)
from paranoid_space.errors import ConfigError, ParseError, UnknownFormatError

from conftest import write_file


class TestResolveFormat:
    @pytest.mark.parametrize(
        "name, fmt",
        [
            ("index.html", "html"),
            ("INDEX.HTM", "html"),
            ("style.css", "css"),
            ("app.js", "js"),
            ("app.mjs", "js"),
            ("app.cjs", "js"),
            ("data.json", "json"),
            ("data.json5", "json5"),
            ("README.md", "markdown"),
            ("notes.markdown", "markdown"),
            ("lib.rs", "rust"),
            ("page.php", "php"),
        ],
    )
    def test_builtin_extensions(self, name, fmt):
        assert resolve_format(name) == fmt

    @pytest.mark.parametrize("name", ["notes.txt", "Makefile", "archive.tar.gz"])
    def test_unknown_extensions_are_plain_text(self, name):
        assert resolve_format(name) is None

    def test_no_path(self):
        assert resolve_format(None) is None

    def test_configured_extensions(self):
        config = ConfigLoader.from_dict({"extensions": {"vue": "html", ".jsonc": "json5", "md": "text"}})
        assert resolve_format("App.vue", config) == "html"
        assert resolve_format("settings.jsonc", config) == "json5"
        assert resolve_format("README.md", config) is None

    def test_configured_unknown_format(self):
        config = ConfigLoader.from_dict({"extensions": {".x": "cobol"}})
        with pytest.raises(ConfigError, match="cobol"):
            extension_table(config)

    def test_builtin_table(self):
        assert FORMAT_BY_EXTENSION[".json5"] == "json5"
        assert ".txt" not in FORMAT_BY_EXTENSION


class TestProcessText:
    def test_plain_text(self):
        assert process_text("中文<b>English</b>") == "中文 <b>English</b>"

    def test_explicit_text_format(self):
        assert process_text("中文English", "text") == "中文 English"

    def test_walker_format(self):
        assert process_text("<b>中文English</b>", "html") == "<b>中文 English</b>"

    def test_unknown_format(self):
        with pytest.raises(UnknownFormatError):
            process_text("x", "cobol")

    def test_parse_error_propagates(self):
        with pytest.raises(ParseError):
            process_text('{"a": ', "json")


class TestProcessFile:
    def test_changed_file(self, tmp_path: Path):
        path = write_file(tmp_path / "a.md", "# 标题Title\r\n")
        result = process_file(path)
        assert result.format == "markdown"
        assert result.changed
        assert result.ok
        assert result.processed == "# 标题 Title\r\n"

    def test_unchanged_file(self, tmp_path: Path):
        path = write_file(tmp_path / "a.json", '{"a": "中文 English"}')
        result = process_file(path)
        assert not result.changed
        assert result.processed == result.original

    def test_parse_error_is_captured(self, tmp_path: Path):
        path = write_file(tmp_path / "broken.html", "<div>中文English")
        result = process_file(path)
        assert not result.ok
        assert isinstance(result.error, ParseError)
        assert not result.changed
        assert result.processed == result.original

    def test_format_override(self, tmp_path: Path):
        path = write_file(tmp_path / "page.txt", "<b>中文English</b>")
        assert process_file(path).processed == "<b> 中文 English</b>"
        assert process_file(path, fmt="html").processed == "<b>中文 English</b>"

    def test_write_result_preserves_line_endings(self, tmp_path: Path):
        path = write_file(tmp_path / "a.css", "/* 注释comment */\r\n")
        result = process_file(path)
        assert write_result(result)
        assert path.read_bytes() == "/* 注释 comment */\r\n".encode("utf-8")
        assert not write_result(process_file(path))
