"""Implementation of the 'pack-npm' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from mpci.ci import MiniProgramCi
from mpci.cli.commands.common import load_project_config, validate_deploy_config
from mpci.cli.output import print_step
from mpci.exceptions import CiToolError

if TYPE_CHECKING:
    from rich.console import Console


def parse_ignores(value: str | None) -> list[str]:
    """Split a comma separated ignore list."""
    if not value:
        return []
    return [pattern.strip() for pattern in value.split(",") if pattern.strip()]


def run_pack_npm(
    path: str | None,
    ignores: str | None,
    verbose: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Build miniprogram_npm, the equivalent of the IDE's "build npm"."""
    print_step(console, 1, "Load configuration")
    config = load_project_config(path, err_console)
    validate_deploy_config(config, err_console)

    patterns = parse_ignores(ignores)
    print_step(
        console,
        2,
        "Build npm",
        f"Ignoring: {', '.join(patterns)}" if patterns else "",
    )
    try:
        result = MiniProgramCi(config).pack_npm(patterns)
    except CiToolError as e:
        err_console.print(f"[red]npm build failed:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if verbose and result.stdout:
        console.print(result.stdout, markup=False, highlight=False, soft_wrap=True)
    console.print("[green]✓[/] npm build finished")
