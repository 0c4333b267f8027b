"""Command line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from mpci.cli.commands.describe import run_describe
from mpci.cli.commands.pack_npm import run_pack_npm
from mpci.cli.commands.preview import run_preview
from mpci.cli.commands.upload import run_upload
from mpci.cli.commands.version import run_version_bump, run_version_show
from mpci.cli.output import setup_logging
from mpci.core.changelog import DescriptionFormat
from mpci.core.version import BumpType

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="mpci",
    help="Preview, upload and version Mini Programs through miniprogram-ci.",
    no_args_is_help=True,
    add_completion=False,
)
version_app = typer.Typer(help="Show or bump the project version.", no_args_is_help=True)
app.add_typer(version_app, name="version")

PathOption = Annotated[
    str | None,
    typer.Option("--path", "-p", help="Project directory (defaults to the current directory)"),
]
DescOption = Annotated[str | None, typer.Option("--desc", help="Description text")]
RobotOption = Annotated[
    int | None, typer.Option("--robot", min=1, max=30, help="CI robot number (1-30)")
]
FormatOption = Annotated[
    DescriptionFormat | None,
    typer.Option("--desc-format", help="Description format when generated from commits"),
]
CommitCountOption = Annotated[
    int | None, typer.Option("--commit-count", min=1, help="Number of commits to summarize")
]
MaxLengthOption = Annotated[
    int | None, typer.Option("--desc-max-length", min=1, help="Maximum description length")
]
IncludeHashOption = Annotated[
    bool | None,
    typer.Option("--include-hash/--no-include-hash", help="Append commit hashes"),
]
DryRunOption = Annotated[
    bool, typer.Option("--dry-run", help="Show what would happen without doing it")
]


@app.callback()
def callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    setup_logging(err_console, verbose=verbose)


@app.command()
def upload(
    path: PathOption = None,
    version: Annotated[
        str | None,
        typer.Option("--version", help="Version to upload as (disables auto-increment)"),
    ] = None,
    desc: DescOption = None,
    robot: RobotOption = None,
    increment_type: Annotated[
        BumpType | None, typer.Option("--increment-type", help="Version component to bump")
    ] = None,
    auto_increment: Annotated[
        bool | None,
        typer.Option("--auto-increment/--no-auto-increment", help="Bump the version first"),
    ] = None,
    desc_format: FormatOption = None,
    commit_count: CommitCountOption = None,
    desc_max_length: MaxLengthOption = None,
    include_hash: IncludeHashOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Upload the Mini Program, using recent commits as the description."""
    run_upload(
        path=path,
        version_override=version,
        desc=desc,
        robot=robot,
        increment_type=increment_type,
        auto_increment=auto_increment,
        desc_format=desc_format,
        commit_count=commit_count,
        max_length=desc_max_length,
        include_hash=include_hash,
        dry_run=dry_run,
        console=console,
        err_console=err_console,
    )


@app.command()
def preview(
    path: PathOption = None,
    desc: DescOption = None,
    robot: RobotOption = None,
    qrcode_format: Annotated[
        str | None,
        typer.Option("--qrcode-format", help="QR code format: image, base64 or terminal"),
    ] = None,
    qrcode_output: Annotated[
        Path | None, typer.Option("--qrcode-output", help="Where to write the QR code")
    ] = None,
    page_path: Annotated[str | None, typer.Option("--page-path", help="Page to open")] = None,
    search_query: Annotated[
        str | None, typer.Option("--search-query", help="Query string for the page")
    ] = None,
    scene: Annotated[int | None, typer.Option("--scene", help="Scene value")] = None,
    desc_format: FormatOption = None,
    commit_count: CommitCountOption = None,
    desc_max_length: MaxLengthOption = None,
    include_hash: IncludeHashOption = None,
    dry_run: DryRunOption = False,
) -> None:
    """Build a preview and print its QR code."""
    if qrcode_format is not None and qrcode_format not in ("image", "base64", "terminal"):
        raise typer.BadParameter(
            "must be one of image, base64, terminal", param_hint="--qrcode-format"
        )
    run_preview(
        path=path,
        desc=desc,
        robot=robot,
        qrcode_format=qrcode_format,
        qrcode_output=qrcode_output,
        page_path=page_path,
        search_query=search_query,
        scene=scene,
        desc_format=desc_format,
        commit_count=commit_count,
        max_length=desc_max_length,
        include_hash=include_hash,
        dry_run=dry_run,
        console=console,
        err_console=err_console,
    )


@app.command("pack-npm")
def pack_npm(
    path: PathOption = None,
    ignores: Annotated[
        str | None, typer.Option("--ignores", help="Comma separated patterns to exclude")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show build output")] = False,
) -> None:
    """Build miniprogram_npm from node_modules."""
    run_pack_npm(
        path=path, ignores=ignores, verbose=verbose, console=console, err_console=err_console
    )


@app.command()
def describe(
    path: PathOption = None,
    desc_format: FormatOption = None,
    commit_count: CommitCountOption = None,
    desc_max_length: MaxLengthOption = None,
    include_hash: IncludeHashOption = None,
) -> None:
    """Print the description generated from recent commits."""
    run_describe(
        path=path,
        desc_format=desc_format,
        commit_count=commit_count,
        max_length=desc_max_length,
        include_hash=include_hash,
        console=console,
        err_console=err_console,
    )


@version_app.command("show")
def version_show(path: PathOption = None) -> None:
    """Print the current version and where it comes from."""
    run_version_show(path=path, console=console, err_console=err_console)


@version_app.command("bump")
def version_bump(
    bump_type: Annotated[
        BumpType | None, typer.Argument(help="major, minor or patch (default from config)")
    ] = None,
    path: PathOption = None,
) -> None:
    """Increment the version stored in the manifest."""
    run_version_bump(path=path, bump_type=bump_type, console=console, err_console=err_console)


def main() -> None:
    app()
