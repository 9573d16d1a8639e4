"""Rich Console factory and theme for vetclinic output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

VET_THEME = Theme(
    {
        "vet.ok": "bold green",
        "vet.error": "bold red",
        "vet.warning": "bold yellow",
        "vet.op": "bold cyan",
        "vet.key": "dim",
        "vet.id": "bold blue",
        "vet.name": "bold",
        "vet.price": "magenta",
        "vet.kind.dog": "yellow",
        "vet.kind.cat": "green",
        "vet.kind.bird": "cyan",
    }
)

_KIND_STYLES: dict[str, str] = {
    "Dog": "vet.kind.dog",
    "Cat": "vet.kind.cat",
    "Bird": "vet.kind.bird",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=VET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for an animal kind."""
    return _KIND_STYLES.get(kind, "")
