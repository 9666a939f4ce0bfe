"""Rich Console factory and theme for strata output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

STRATA_THEME = Theme(
    {
        "strata.ok": "bold green",
        "strata.error": "bold red",
        "strata.warning": "bold yellow",
        "strata.op": "bold cyan",
        "strata.key": "dim",
        "strata.name": "bold blue",
        "strata.zone": "magenta",
        "strata.rule": "italic",
        "strata.stale": "bold red",
        "strata.draft": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=STRATA_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
