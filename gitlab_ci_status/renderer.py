"""Colored rendering of pipeline and job statuses."""

from collections.abc import Mapping

from rich.console import Console
from rich.text import Text

BULLET = "●"

DEFAULT_STYLE = "bold white"

STATUS_LABELS: Mapping[str, tuple[str, str]] = {
    "success": ("SUCCESS", "bold green"),
    "failed": ("FAILED", "bold red"),
    "running": ("BUILDING", "bold yellow"),
    "pending": ("BUILDING", "bold yellow"),
    "canceled": ("CANCELED", "bold white"),
    "skipped": ("SKIPPED", "bold blue"),
}


def render_status(status: str) -> Text:
    """Return the colored label for a GitLab status.

    Unknown statuses are shown upper-cased in the default style.
    """
    label, style = STATUS_LABELS.get(status.lower(), (status.upper(), DEFAULT_STYLE))
    return Text(f"{BULLET} {label}", style=style)


def display_status(console: Console, status: str, prefix: str = "") -> None:
    """Print the colored label for a status, after an optional plain prefix."""
    console.print(Text.assemble(prefix, render_status(status)))
