"""Rich Console factory and theme for pantryform output.

Consoles render to a StringIO buffer so renderers keep a plain
``str`` return value. Rich drops color codes on its own when the
output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PANTRY_THEME = Theme(
    {
        "pantry.ok": "bold green",
        "pantry.error": "bold red",
        "pantry.warning": "bold yellow",
        "pantry.op": "bold cyan",
        "pantry.key": "dim",
        "pantry.id": "bold blue",
        "pantry.path": "dim",
        "pantry.item": "bold",
        "pantry.qty": "magenta",
        "pantry.skip": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=PANTRY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    if not isinstance(console.file, StringIO):
        msg = "console is not buffer-backed"
        raise TypeError(msg)
    return console.file.getvalue()
