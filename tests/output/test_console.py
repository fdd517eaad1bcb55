"""Tests for the Rich console factory and theme."""

from io import StringIO

from sankeyctl.domain.types import NodeCategory
from sankeyctl.output.console import SANKEY_THEME, create_console, get_output, style_for_category


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_widths(self) -> None:
        assert create_console().width == 120
        assert create_console(width=80).width == 80


class TestCategoryStyles:
    def test_every_category_has_a_theme_style(self) -> None:
        for category in NodeCategory:
            assert style_for_category(category) in SANKEY_THEME.styles

    def test_style_name(self) -> None:
        assert style_for_category("center") == "sk.cat.center"
