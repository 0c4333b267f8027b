"""Implementation of the 'upload' command.

The upload command resolves the version, composes a description from
recent commits and hands both to miniprogram-ci.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from mpci.ci import MiniProgramCi
from mpci.cli.commands.common import (
    build_format_options,
    compose_description,
    load_project_config,
    make_version_state,
    validate_deploy_config,
)
from mpci.cli.output import print_details, print_step, shorten_for_display
from mpci.core.version import BumpType, increment, parse_version
from mpci.exceptions import CiToolError

if TYPE_CHECKING:
    from rich.console import Console

    from mpci.config.models import MpciConfig
    from mpci.core.changelog import DescriptionFormat


def resolve_upload_version(
    config: MpciConfig,
    *,
    version_override: str | None,
    auto_increment: bool,
    increment_type: BumpType,
    persist: bool,
) -> tuple[str, dict[str, str]]:
    """Work out the version to upload and describe how it was chosen.

    An explicit version always wins. Otherwise the current version is
    incremented (and written back when ``persist`` is set) or used as is.
    """
    if version_override:
        return version_override, {"Mode": "explicit", "Version": version_override}

    state = make_version_state(config)
    current = state.resolve()

    if not auto_increment:
        return current.version, {
            "Mode": "current",
            "Version": current.version,
            "Source": current.source,
        }

    if persist:
        new_version = state.get_and_increment_version(increment_type)
    else:
        new_version = str(increment(parse_version(current.version), increment_type))
    return new_version, {
        "Mode": "auto-increment",
        "Current version": current.version,
        "New version": new_version,
        "Increment": str(increment_type),
    }


def run_upload(
    path: str | None,
    version_override: str | None,
    desc: str | None,
    robot: int | None,
    increment_type: BumpType | None,
    auto_increment: bool | None,
    desc_format: DescriptionFormat | None,
    commit_count: int | None,
    max_length: int | None,
    include_hash: bool | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the upload command.

    Args:
        path: Optional path to project directory
        version_override: Version to upload as; disables auto-increment
        desc: Upload description; defaults to the commit summary
        robot: CI robot number (1-30)
        increment_type: Which version component to bump
        auto_increment: Whether to bump the version before uploading
        desc_format: Description format override
        commit_count: Number of commits to summarize
        max_length: Description length limit
        include_hash: Whether to append commit hashes
        dry_run: Show what would happen without uploading or writing files
        console: Console for standard output
        err_console: Console for error output
    """
    print_step(console, 1, "Load configuration", "Read config file and check required settings")
    config = load_project_config(path, err_console)
    if not dry_run:
        validate_deploy_config(config, err_console)

    print_step(console, 2, "Resolve version")
    version, version_info = resolve_upload_version(
        config,
        version_override=version_override,
        auto_increment=config.version.auto_increment if auto_increment is None else auto_increment,
        increment_type=increment_type or config.version.increment_type,
        persist=not dry_run,
    )
    print_details(console, "Version", version_info)

    print_step(console, 3, "Prepare upload", "Compose the description from git history")
    options = build_format_options(
        config,
        desc_format=desc_format,
        max_length=max_length,
        include_hash=include_hash,
    )
    context = compose_description(config, options, commit_count)
    description = desc or (context.text if context.commits else config.upload.desc)
    robot = robot or config.robot

    print_details(
        console,
        "Upload",
        {
            "Version": version,
            "Robot": robot,
            "Developer": context.user.name if context.user else "unknown",
            "Commits": len(context.commits),
        },
    )
    console.print("[bold]Description:[/]")
    console.print(f"  [dim]{escape(shorten_for_display(description))}[/]")

    if dry_run:
        console.print(
            Panel(
                "[bold]Would upload:[/]\n\n"
                f"  • Version [cyan]{escape(version)}[/] with robot [cyan]{robot}[/]\n"
                f"  • From [cyan]{escape(str(config.project_path))}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run without [cyan]--dry-run[/] to upload.[/]")
        return

    print_step(console, 4, "Upload", "Sending the package to the Mini Program platform")
    try:
        MiniProgramCi(config).upload(version, description, robot)
    except CiToolError as e:
        err_console.print(f"[red]Upload failed:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Uploaded version {escape(version)}![/]\n\n"
            f"  Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"  Robot: {robot}",
            title="[green]Upload Complete[/]",
            border_style="green",
        )
    )
