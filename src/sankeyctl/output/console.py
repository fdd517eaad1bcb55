"""Rich Console factory and theme for sankeyctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SANKEY_THEME = Theme(
    {
        "sk.ok": "bold green",
        "sk.error": "bold red",
        "sk.op": "bold cyan",
        "sk.key": "dim",
        "sk.id": "bold blue",
        "sk.title": "bold",
        "sk.value": "magenta",
        "sk.cat.incomeItem": "green",
        "sk.cat.incomeCategory": "bright_green",
        "sk.cat.center": "bold yellow",
        "sk.cat.expenseCategory": "bright_red",
        "sk.cat.expenseItem": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=SANKEY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_category(category: str) -> str:
    """Return the Rich style name for a node category."""
    return f"sk.cat.{category}"
