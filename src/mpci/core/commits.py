"""Conventional commit subject parsing and grouping.

A subject either matches ``type(scope): description`` and becomes a
:class:`ConventionalSubject`, or it does not and is kept verbatim as a
:class:`RawSubject`. Both variants go through the same grouping rule:
known types get their own group, everything else lands in ``chore``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mpci.vcs.git import Commit

# Display order of changelog groups
CHANGELOG_TYPES: tuple[str, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
)

DEFAULT_GROUP = "chore"

SUBJECT_PATTERN = re.compile(r"^(\w+)(\([^)]*\))?:\s*(.+)$")


@dataclass(frozen=True)
class ConventionalSubject:
    """A subject of the form ``type(scope): description``.

    ``scope`` keeps its surrounding parentheses, e.g. ``"(api)"``.
    """

    commit_type: str
    description: str
    scope: str | None = None

    @property
    def group(self) -> str:
        return self.commit_type if self.commit_type in CHANGELOG_TYPES else DEFAULT_GROUP

    def render(self) -> str:
        if self.scope:
            return f"{self.scope}{self.description}"
        return self.description


@dataclass(frozen=True)
class RawSubject:
    """A subject that does not follow the conventional format."""

    raw: str

    @property
    def group(self) -> str:
        return DEFAULT_GROUP

    def render(self) -> str:
        return self.raw


Subject = ConventionalSubject | RawSubject


def parse_subject(message: str) -> Subject:
    """Parse a commit subject line.

    Only the first line of ``message`` is considered.
    """
    lines = message.strip().splitlines()
    first_line = lines[0].strip() if lines else ""
    match = SUBJECT_PATTERN.match(first_line)
    if not match:
        return RawSubject(raw=first_line)
    commit_type, scope, description = match.groups()
    if scope is not None and not scope[1:-1].strip():
        scope = None
    return ConventionalSubject(
        commit_type=commit_type,
        description=description.strip(),
        scope=scope,
    )


@dataclass(frozen=True)
class ParsedCommit:
    """A commit together with its parsed subject."""

    commit: Commit
    subject: Subject

    @classmethod
    def from_commit(cls, commit: Commit) -> ParsedCommit:
        return cls(commit=commit, subject=parse_subject(commit.message))

    @property
    def group(self) -> str:
        return self.subject.group

    @property
    def is_conventional(self) -> bool:
        return isinstance(self.subject, ConventionalSubject)


def parse_commits(commits: Iterable[Commit]) -> list[ParsedCommit]:
    return [ParsedCommit.from_commit(c) for c in commits]


def group_commits_by_type(parsed: Iterable[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    """Bucket parsed commits into the fixed changelog groups.

    Every group key is present in display order, possibly empty. Commit
    order inside a group follows input order.
    """
    groups: dict[str, list[ParsedCommit]] = {name: [] for name in CHANGELOG_TYPES}
    for pc in parsed:
        groups[pc.group].append(pc)
    return groups


def format_commit_for_changelog(pc: ParsedCommit, *, include_sha: bool = False) -> str:
    """Render one changelog item (without the bullet)."""
    text = pc.subject.render()
    if include_sha:
        text += f" ({pc.commit.sha})"
    return text
