"""Tests for the PHP walker."""

import pytest

from paranoid_space.errors import ParseError
from paranoid_space.walkers import process_php


class TestTemplates:
    def test_html_and_php_blocks(self):
        source = '<p>中文English</p>\n<?php echo "<h2>变量Output示例</h2>"; ?>\n'
        expected = '<p>中文 English</p>\n<?php echo "<h2>变量 Output 示例</h2>"; ?>\n'
        assert process_php(source) == expected

    def test_short_echo_tag(self):
        source = "<div><?= '标题Title' ?></div>"
        assert process_php(source) == "<div><?= '标题 Title' ?></div>"

    def test_file_may_end_in_php_mode(self):
        source = "<?php\n$s = '中文English';\n"
        assert process_php(source) == "<?php\n$s = '中文 English';\n"

    def test_plain_html_only(self):
        assert process_php("<b>粗体bold</b>") == "<b>粗体 bold</b>"


class TestPhpInsideTags:
    def test_echo_in_attribute_value(self):
        source = '<a href="<?= $u ?>">链接</a>'
        assert process_php(source) == source

    def test_php_block_in_input_value(self):
        source = '<input type="text" value="<?php echo $value; ?>">'
        assert process_php(source) == source

    def test_text_after_tag_is_spaced(self):
        source = '<p class="<?= $c ?>">中文abc</p>'
        assert process_php(source) == '<p class="<?= $c ?>">中文 abc</p>'

    def test_several_blocks_in_one_tag(self):
        source = '<img src="<?= $a ?>" alt="<?= $b ?>">说明text'
        assert process_php(source) == '<img src="<?= $a ?>" alt="<?= $b ?>">说明 text'

    def test_text_before_tag_is_spaced(self):
        source = '<p>中文abc<a href="<?= $u ?>">x</a></p>'
        assert process_php(source) == '<p>中文 abc<a href="<?= $u ?>">x</a></p>'


class TestComments:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("<?php // 注释comment\n", "<?php // 注释 comment\n"),
            ("<?php # 注释comment\n", "<?php # 注释 comment\n"),
            ("<?php /* 块block */ ?>", "<?php /* 块 block */ ?>"),
        ],
    )
    def test_spaced(self, source, expected):
        assert process_php(source) == expected

    def test_line_comment_ends_before_close_tag(self):
        source = "<?php // 注释comment ?><p>中文x</p>"
        assert process_php(source) == "<?php // 注释 comment ?><p>中文 x</p>"

    def test_attribute_is_not_a_comment(self):
        source = "<?php #[Route('路由a')]\nfunction f() {}\n"
        assert process_php(source) == "<?php #[Route('路由 a')]\nfunction f() {}\n"


class TestStrings:
    def test_interpolation_verbatim(self):
        source = '<?php echo "你好{$name}朋友site，欢迎${user}来到site";'
        expected = '<?php echo "你好{$name}朋友 site，欢迎${user}来到 site";'
        assert process_php(source) == expected

    def test_simple_interpolation_with_index_and_property(self):
        source = '<?php echo "值$arr[0]和$obj->prop 中文abc";'
        expected = '<?php echo "值$arr[0]和$obj->prop 中文 abc";'
        assert process_php(source) == expected

    def test_heredoc(self):
        source = "<?php\n$s = <<<EOT\n中文English $name 结束\n  EOT;\n"
        expected = "<?php\n$s = <<<EOT\n中文 English $name 结束\n  EOT;\n"
        assert process_php(source) == expected

    def test_nowdoc(self):
        source = "<?php\n$s = <<<'EOT'\n中文English $name\nEOT;\n"
        expected = "<?php\n$s = <<<'EOT'\n中文 English $name\nEOT;\n"
        assert process_php(source) == expected

    def test_backtick_shell_verbatim(self):
        source = "<?php $out = `echo 中文English`;"
        assert process_php(source) == source

    def test_identifiers_untouched(self):
        source = "<?php $中文name = strlen($变量value) << 2;"
        assert process_php(source) == source


class TestErrors:
    def test_unterminated_double_quoted(self):
        with pytest.raises(ParseError) as exc_info:
            process_php('<?php echo "中文')
        assert exc_info.value.format == "php"

    def test_unterminated_heredoc(self):
        with pytest.raises(ParseError, match="heredoc"):
            process_php("<?php $s = <<<EOT\n中文\n")

    def test_unterminated_comment(self):
        with pytest.raises(ParseError):
            process_php("<?php /* 注释")
