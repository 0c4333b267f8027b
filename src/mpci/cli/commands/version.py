"""Implementation of the 'version show' and 'version bump' commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from mpci.cli.commands.common import load_project_config, make_version_state

if TYPE_CHECKING:
    from rich.console import Console

    from mpci.core.version import BumpType


def run_version_show(path: str | None, console: Console, err_console: Console) -> None:
    config = load_project_config(path, err_console)
    resolved = make_version_state(config).resolve()
    console.print(f"[green]{escape(resolved.version)}[/] [dim]({escape(resolved.source)})[/]")


def run_version_bump(
    path: str | None,
    bump_type: BumpType | None,
    console: Console,
    err_console: Console,
) -> None:
    """Increment the manifest version.

    A manifest that cannot be written is reported by a warning in the log;
    the new version is printed either way.
    """
    config = load_project_config(path, err_console)
    state = make_version_state(config)
    current = state.get_current_version()
    new_version = state.get_and_increment_version(bump_type or config.version.increment_type)
    console.print(f"[cyan]{escape(current)}[/] → [green]{escape(new_version)}[/]")
