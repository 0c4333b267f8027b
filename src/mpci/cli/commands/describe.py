"""Implementation of the 'describe' command.

Prints the upload description that would be generated for the current
git history, which is handy for choosing a description format.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mpci.cli.commands.common import build_format_options, compose_description, load_project_config

if TYPE_CHECKING:
    from rich.console import Console

    from mpci.core.changelog import DescriptionFormat


def run_describe(
    path: str | None,
    desc_format: DescriptionFormat | None,
    commit_count: int | None,
    max_length: int | None,
    include_hash: bool | None,
    console: Console,
    err_console: Console,
) -> None:
    config = load_project_config(path, err_console)
    options = build_format_options(
        config,
        desc_format=desc_format,
        max_length=max_length,
        include_hash=include_hash,
    )
    context = compose_description(config, options, commit_count)
    console.print(context.text, markup=False, highlight=False, soft_wrap=True)
