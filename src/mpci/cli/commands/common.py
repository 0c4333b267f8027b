"""Helpers shared by the deploy commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from mpci.config import load_config
from mpci.core.changelog import DescriptionFormat, FormatOptions, format_commits_for_upload
from mpci.core.version_state import VersionState
from mpci.exceptions import GitError, MpciError
from mpci.project import open_manifest_store
from mpci.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from mpci.config.models import MpciConfig
    from mpci.vcs import Commit, GitUser

logger = logging.getLogger(__name__)


@dataclass
class DescriptionContext:
    """The composed description and the git data it came from."""

    text: str
    commits: list[Commit] = field(default_factory=list)
    user: GitUser | None = None


def load_project_config(path: str | None, err_console: Console) -> MpciConfig:
    project_path = Path(path) if path else Path.cwd()
    try:
        return load_config(project_path)
    except MpciError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e


def build_format_options(
    config: MpciConfig,
    *,
    desc_format: DescriptionFormat | None = None,
    max_length: int | None = None,
    include_hash: bool | None = None,
) -> FormatOptions:
    """Merge command line overrides over the configured description options."""
    updates = {
        key: value
        for key, value in {
            "format": desc_format,
            "max_length": max_length,
            "include_hash": include_hash,
        }.items()
        if value is not None
    }
    description = config.description.model_copy(update=updates)
    return FormatOptions.from_config(description)


def read_git_history(project_path: Path, count: int) -> tuple[list[Commit], GitUser | None]:
    """Return recent commits and the git user, or nothing outside a repository."""
    try:
        repo = GitRepository(project_path)
    except GitError as e:
        logger.warning("%s; using the fallback description", e)
        return [], None
    return repo.get_recent_commits(count), repo.get_user()


def compose_description(
    config: MpciConfig,
    options: FormatOptions,
    commit_count: int | None = None,
) -> DescriptionContext:
    count = commit_count or config.description.commit_count
    commits, user = read_git_history(config.project_path, count)
    return DescriptionContext(
        text=format_commits_for_upload(commits, options),
        commits=commits,
        user=user,
    )


def make_version_state(config: MpciConfig) -> VersionState:
    return VersionState(
        open_manifest_store(config.manifest_path),
        default_version=config.version.default_version,
        env_var=config.version.env_var,
    )


def validate_deploy_config(config: MpciConfig, err_console: Console) -> None:
    try:
        config.validate_for_deploy()
    except MpciError as e:
        err_console.print(f"[red]Invalid configuration:[/] {e}")
        raise SystemExit(1) from e
