"""Implementation of the 'preview' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from mpci.ci import MiniProgramCi
from mpci.cli.commands.common import (
    build_format_options,
    compose_description,
    load_project_config,
    validate_deploy_config,
)
from mpci.cli.output import print_details, print_step, shorten_for_display
from mpci.exceptions import CiToolError

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from mpci.core.changelog import DescriptionFormat


def run_preview(
    path: str | None,
    desc: str | None,
    robot: int | None,
    qrcode_format: str | None,
    qrcode_output: Path | None,
    page_path: str | None,
    search_query: str | None,
    scene: int | None,
    desc_format: DescriptionFormat | None,
    commit_count: int | None,
    max_length: int | None,
    include_hash: bool | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the preview command.

    The preview description defaults to the commit summary, falling back
    to the configured preview description when there is no git history.
    """
    print_step(console, 1, "Load configuration")
    config = load_project_config(path, err_console)
    if not dry_run:
        validate_deploy_config(config, err_console)

    options = build_format_options(
        config,
        desc_format=desc_format,
        max_length=max_length,
        include_hash=include_hash,
    )
    context = compose_description(config, options, commit_count)
    description = desc or (context.text if context.commits else config.preview.desc)
    robot = robot or config.robot
    fmt = qrcode_format or config.preview.qrcode_format

    print_step(console, 2, "Prepare preview")
    details: dict[str, object] = {
        "Robot": robot,
        "QR code format": fmt,
        "Scene": scene if scene is not None else config.preview.scene,
        "Description": shorten_for_display(description),
    }
    if fmt != "terminal":
        details["QR code output"] = qrcode_output or config.preview.qrcode_output_dest
    if page_path or config.preview.page_path:
        details["Page path"] = page_path or config.preview.page_path
    print_details(console, "Preview", details)

    if dry_run:
        console.print(
            Panel(
                "[bold]Would build a preview and print its QR code.[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return

    print_step(console, 3, "Build preview")
    try:
        result = MiniProgramCi(config).preview(
            description,
            robot,
            qrcode_format=fmt,
            qrcode_output=qrcode_output,
            page_path=page_path,
            search_query=search_query,
            scene=scene,
        )
    except CiToolError as e:
        err_console.print(f"[red]Preview failed:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if fmt == "terminal" and result.stdout:
        # The QR code is drawn by miniprogram-ci itself
        console.print(result.stdout, markup=False, highlight=False, soft_wrap=True)

    console.print("[green]✓[/] Preview ready")
