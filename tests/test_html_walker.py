"""Tests for the HTML walker."""

import logging

import pytest

from paranoid_space.config import ConfigLoader
from paranoid_space.errors import ParseError
from paranoid_space.walkers import get_walker, process_html
from paranoid_space.walkers.html import space_markup


class TestTextNodes:
    def test_text_is_spaced(self):
        assert process_html("<p>中文English</p>") == "<p>中文 English</p>"

    def test_tags_are_not_spaced(self):
        html = '<div class="中文x" id="a中"><span>中文</span></div>'
        assert process_html(html) == html

    def test_entities_split_text(self):
        assert process_html("<p>段落text&amp;中文</p>") == "<p>段落 text&amp;中文</p>"

    def test_numeric_entities_untouched(self):
        html = "<p>&#20013;&#x6587;</p>"
        assert process_html(html) == html

    def test_bare_ampersand_is_text(self):
        assert process_html("<p>中文 & English</p>") == "<p>中文 & English</p>"

    def test_full_document(self):
        source = (
            "<!DOCTYPE html>\n<html>\n<head><title>标题Title</title></head>\n"
            "<body><p>中文English</p></body>\n</html>\n"
        )
        expected = (
            "<!DOCTYPE html>\n<html>\n<head><title>标题 Title</title></head>\n"
            "<body><p>中文 English</p></body>\n</html>\n"
        )
        assert process_html(source) == expected

    def test_html_and_body_may_stay_open(self):
        assert process_html("<html><body><p>中文English</p>") == "<html><body><p>中文 English</p>"


class TestAttributes:
    def test_prose_attributes_spaced(self):
        html = '<img src="图a.png" alt="图片image" title=\'标题Title\'>'
        assert process_html(html) == '<img src="图a.png" alt="图片 image" title=\'标题 Title\'>'

    def test_other_attributes_verbatim(self):
        html = '<a href="/中文page" data-x="中文English">x</a>'
        assert process_html(html) == html

    def test_unquoted_values_verbatim(self):
        html = "<input value=中文English>"
        assert process_html(html) == html

    def test_boolean_and_empty_attributes(self):
        html = '<input disabled placeholder="" checked/>'
        assert process_html(html) == html

    def test_entity_in_attribute_value(self):
        html = '<abbr title="中文&amp;English">x</abbr>'
        assert process_html(html) == html

    def test_configured_prose_attributes(self):
        config = ConfigLoader.from_dict({"html": {"prose_attributes": ["Data-Tip"]}})
        html = '<span data-tip="提示tip" title="标题Title">x</span>'
        expected = '<span data-tip="提示 tip" title="标题Title">x</span>'
        assert process_html(html, config) == expected


class TestEmbedded:
    def test_script_goes_through_js(self):
        assert (
            process_html("<script>let x = '你好world';</script>")
            == "<script>let x = '你好 world';</script>"
        )

    def test_style_goes_through_css(self):
        html = "<style>/* 注释comment */ a { content: '中文abc'; }</style>"
        expected = "<style>/* 注释 comment */ a { content: '中文 abc'; }</style>"
        assert process_html(html) == expected

    def test_json_script(self):
        html = '<script type="application/ld+json">{"name": "名称name"}</script>'
        expected = '<script type="application/ld+json">{"name": "名称 name"}</script>'
        assert process_html(html) == expected

    def test_unknown_script_type_verbatim(self):
        html = '<script type="text/template"><p>中文English</p></script>'
        assert process_html(html) == html

    def test_comment_body_is_spaced(self):
        assert process_html("<!-- 注释comment -->") == "<!-- 注释 comment -->"

    def test_malformed_script_left_unchanged(self, caplog):
        html = "<script>let s = '中文English</script>"
        with caplog.at_level(logging.WARNING, logger="paranoid_space"):
            assert process_html(html) == html
        assert "embedded js left unchanged" in caplog.text

    def test_cdata_and_processing_instruction_verbatim(self):
        html = "<?xml version=\"1.0\"?><svg><![CDATA[中文English]]></svg>"
        assert process_html(html) == html


class TestErrors:
    def test_unclosed_element(self):
        with pytest.raises(ParseError) as exc_info:
            process_html("<div>unclosed")
        assert exc_info.value.format == "html"
        assert exc_info.value.line == 1

    def test_mismatched_end_tag(self):
        with pytest.raises(ParseError, match="mismatched end tag"):
            process_html("<div></span>")

    def test_unexpected_end_tag(self):
        with pytest.raises(ParseError, match="unexpected end tag"):
            process_html("text</p>")

    def test_unterminated_tag(self):
        with pytest.raises(ParseError, match="unterminated tag"):
            process_html('<p class="x"')

    def test_unterminated_comment(self):
        with pytest.raises(ParseError, match="unterminated comment"):
            process_html("<!-- never closed")

    def test_nesting_limit(self):
        config = ConfigLoader.from_dict({"max_depth": 3})
        with pytest.raises(ParseError):
            process_html("<b><i><u><s>x</s></u></i></b>", config)


class TestFragmentMode:
    def test_unbalanced_markup_accepted(self):
        walker = get_walker("html", fragment=True)
        assert walker.process("</p><p>中文English") == "</p><p>中文 English"

    def test_space_markup(self):
        assert space_markup("<h2>变量Output示例</h2>") == "<h2>变量 Output 示例</h2>"
        assert space_markup("a < b 中文x") == "a < b 中文 x"
