"""Console output helpers shared by the commands."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

# Width at which the upload description is cut for display
DISPLAY_DESC_LENGTH = 100


def setup_logging(err_console: Console, *, verbose: bool = False) -> None:
    """Route the ``mpci`` loggers to the error console."""
    level = logging.DEBUG if verbose or os.environ.get("DEBUG") else logging.INFO
    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    logger = logging.getLogger("mpci")
    logger.handlers[:] = [handler]
    logger.setLevel(level)


def print_step(console: Console, number: int, title: str, description: str = "") -> None:
    console.print(f"[blue][{number}][/] [bold]{escape(title)}[/]")
    if description:
        console.print(f"    [dim]{escape(description)}[/]")


def print_details(console: Console, title: str, details: Mapping[str, object]) -> None:
    """Print a two-column key/value table."""
    table = Table(title=title, title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column(style="cyan")
    table.add_column()
    for key, value in details.items():
        table.add_row(key, escape(str(value)))
    console.print(table)


def shorten_for_display(text: str, limit: int = DISPLAY_DESC_LENGTH) -> str:
    return text if len(text) <= limit else text[:limit] + "..."
