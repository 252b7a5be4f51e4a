"""Rich Console factory and theme for hafrag output.

Consoles render to a StringIO buffer so formatters keep a
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

HAFRAG_THEME = Theme(
    {
        "hafrag.ok": "bold green",
        "hafrag.error": "bold red",
        "hafrag.warning": "bold yellow",
        "hafrag.op": "bold cyan",
        "hafrag.key": "dim",
        "hafrag.path": "bold blue",
        "hafrag.section": "bold",
        "hafrag.count": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=HAFRAG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
