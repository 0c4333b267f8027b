"""Upload description composition.

Turns the most recent commits into the free-text description sent along
with a preview or upload. Three output modes are supported:

- ``simple``: the latest commit subject only
- ``detailed``: a numbered list of all commits under a header line
- ``changelog``: commits grouped by conventional commit type

Every mode is bounded by ``max_length``; longer text is cut hard and
ends with ``"..."``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from mpci.core.commits import (
    CHANGELOG_TYPES,
    format_commit_for_changelog,
    group_commits_by_type,
    parse_commits,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mpci.config.models import DescriptionConfig
    from mpci.vcs.git import Commit

FALLBACK_DESCRIPTION = "Automated upload, no commit information available"
DETAILED_HEADER = "Recent changes:"
ELLIPSIS = "..."
DEFAULT_MAX_LENGTH = 500

GROUP_TITLES: dict[str, str] = {
    "feat": "✨ Features",
    "fix": "🐛 Bug Fixes",
    "docs": "📚 Documentation",
    "style": "💄 Style",
    "refactor": "♻️ Refactoring",
    "perf": "⚡ Performance",
    "test": "🧪 Tests",
    "build": "📦 Build",
    "ci": "🔧 CI",
    "chore": "🔨 Chores",
}


class DescriptionFormat(StrEnum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    CHANGELOG = "changelog"


@dataclass(frozen=True)
class FormatOptions:
    """How to render commits into a description."""

    format: DescriptionFormat = DescriptionFormat.DETAILED
    max_length: int = DEFAULT_MAX_LENGTH
    include_hash: bool = True
    group_by_type: bool = False

    @property
    def grouped(self) -> bool:
        return self.group_by_type or self.format == DescriptionFormat.CHANGELOG

    @classmethod
    def from_config(cls, config: DescriptionConfig) -> FormatOptions:
        return cls(
            format=config.format,
            max_length=config.max_length,
            include_hash=config.include_hash,
            group_by_type=config.format == DescriptionFormat.CHANGELOG,
        )


def truncate_description(text: str, max_length: int) -> str:
    """Cut ``text`` to at most ``max_length`` characters.

    Text that fits is returned unchanged. Otherwise the first
    ``max_length - 3`` characters are kept and ``"..."`` is appended.
    Budgets of three characters or fewer yield a prefix of the ellipsis.
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return ELLIPSIS[: max(max_length, 0)]
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def _hash_suffix(commit: Commit, include_hash: bool) -> str:
    return f" ({commit.sha})" if include_hash else ""


def format_simple(commits: Sequence[Commit], options: FormatOptions) -> str:
    latest = commits[0]
    return f"{latest.message}{_hash_suffix(latest, options.include_hash)}"


def format_detailed(commits: Sequence[Commit], options: FormatOptions) -> str:
    lines = [DETAILED_HEADER]
    lines.extend(
        f"{index}. {commit.message}{_hash_suffix(commit, options.include_hash)}"
        for index, commit in enumerate(commits, start=1)
    )
    return "\n".join(lines)


def format_as_changelog(commits: Sequence[Commit], options: FormatOptions | None = None) -> str:
    """Render commits grouped by conventional commit type.

    Groups appear in a fixed order regardless of input order, empty
    groups are left out, and each group is followed by a blank line.

    Args:
        commits: Commits, newest first
        options: Formatting options (``include_hash`` and ``max_length``
            are honoured here)

    Returns:
        The grouped, length-bounded changelog text
    """
    options = options or FormatOptions(format=DescriptionFormat.CHANGELOG)
    grouped = group_commits_by_type(parse_commits(commits))

    lines: list[str] = []
    for group in CHANGELOG_TYPES:
        items = grouped[group]
        if not items:
            continue
        lines.append(GROUP_TITLES[group])
        for pc in items:
            lines.append(f"- {format_commit_for_changelog(pc, include_sha=options.include_hash)}")
        lines.append("")

    text = "\n".join(lines).strip()
    if not text:
        return FALLBACK_DESCRIPTION
    return truncate_description(text, options.max_length)


def format_commits_for_upload(
    commits: Sequence[Commit],
    options: FormatOptions | None = None,
) -> str:
    """Compose the upload description for ``commits``.

    Args:
        commits: Commits, newest first
        options: Formatting options, defaults to detailed mode

    Returns:
        Description text no longer than ``options.max_length``, or the
        fallback text when there are no commits
    """
    options = options or FormatOptions()
    if not commits:
        return FALLBACK_DESCRIPTION

    if options.grouped:
        return format_as_changelog(commits, options)

    if options.format == DescriptionFormat.SIMPLE:
        text = format_simple(commits, options)
    else:
        text = format_detailed(commits, options)
    return truncate_description(text, options.max_length)
