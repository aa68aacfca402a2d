"""Tests for the Markdown walker."""

from hypothesis import given, strategies as st

from paranoid_space.walkers import process_markdown
from paranoid_space.walkers.markdown import front_matter_end


class TestBlocks:
    def test_paragraph_and_heading(self):
        source = "# 标题Title\n\n段落paragraph文字。\n"
        assert process_markdown(source) == "# 标题 Title\n\n段落 paragraph 文字。\n"

    def test_lists_and_quotes(self):
        source = "- 列表item\n  1. 嵌套nested\n- [x] 任务task\n> 引用quote\n"
        expected = "- 列表 item\n  1. 嵌套 nested\n- [x] 任务 task\n> 引用 quote\n"
        assert process_markdown(source) == expected

    def test_fenced_code_verbatim(self):
        source = "说明text\n\n```python\nprint('中文English')\n```\n\n结尾end\n"
        expected = "说明 text\n\n```python\nprint('中文English')\n```\n\n结尾 end\n"
        assert process_markdown(source) == expected

    def test_unclosed_fence_runs_to_end(self):
        source = "~~~\n中文English\n"
        assert process_markdown(source) == source

    def test_indented_code_verbatim(self):
        source = "段落text\n\n    code中文English\n\n后面after\n"
        expected = "段落 text\n\n    code中文English\n\n后面 after\n"
        assert process_markdown(source) == expected

    def test_thematic_break_and_link_definition(self):
        source = "***\n[标签]: http://example.com/中文a\n"
        assert process_markdown(source) == source

    def test_html_block_goes_through_html(self):
        source = "<div>\n中文English\n</div>\n\n文本text\n"
        expected = "<div>\n中文 English\n</div>\n\n文本 text\n"
        assert process_markdown(source) == expected

    def test_crlf_line_endings(self):
        source = "# 标题Title\r\n正文text\r\n"
        assert process_markdown(source) == "# 标题 Title\r\n正文 text\r\n"


class TestInline:
    def test_code_span_verbatim(self):
        source = "使用`中文code`命令run\n"
        assert process_markdown(source) == "使用`中文code`命令 run\n"

    def test_link_text_spaced_url_kept(self):
        source = "请看[链接link](http://example.com/中文a \"标题\")。\n"
        expected = "请看[链接 link](http://example.com/中文a \"标题\")。\n"
        assert process_markdown(source) == expected

    def test_image_alt_spaced(self):
        source = "![图片image](a.png)\n"
        assert process_markdown(source) == "![图片 image](a.png)\n"

    def test_emphasis(self):
        source = "这是**粗体bold**和*斜体*。\n"
        assert process_markdown(source) == "这是**粗体 bold**和*斜体*。\n"

    def test_snake_case_is_text(self):
        assert process_markdown("变量my_var名\n") == "变量 my_var 名\n"

    def test_autolink_and_bare_url(self):
        source = "访问<https://example.com/中a>或https://example.com/b中文\n"
        assert process_markdown(source) == source

    def test_inline_html_tag_verbatim(self):
        source = "中文<kbd>Ctrl</kbd>键\n"
        assert process_markdown(source) == source

    def test_escape(self):
        assert process_markdown("中文\\*abc\n") == "中文\\*abc\n"


class TestFrontMatter:
    def test_yaml_front_matter_verbatim(self):
        source = "---\ntitle: 中文English\n---\n正文text\n"
        assert process_markdown(source) == "---\ntitle: 中文English\n---\n正文 text\n"

    def test_front_matter_end(self):
        assert front_matter_end("---\na: 1\n---\nbody\n") == len("---\na: 1\n---\n")
        assert front_matter_end("no front matter\n") == 0
        assert front_matter_end("---\nunterminated\n") == 0


@given(st.text(alphabet="abc #*_-`[]()!<>\\\n 1.", max_size=80))
def test_ascii_round_trip(text):
    assert process_markdown(text) == text
