"""Core business logic for mpci.

This module contains the fundamental building blocks:
- Semantic version parsing and incrementing
- Conventional commit subject parsing and grouping
- Upload description composition
- Manifest-backed version state
"""

from __future__ import annotations

from mpci.core.changelog import (
    FALLBACK_DESCRIPTION,
    DescriptionFormat,
    FormatOptions,
    format_as_changelog,
    format_commits_for_upload,
    truncate_description,
)
from mpci.core.commits import (
    ConventionalSubject,
    ParsedCommit,
    RawSubject,
    group_commits_by_type,
    parse_commits,
    parse_subject,
)
from mpci.core.version import BumpType, SemanticVersion, increment, parse_version
from mpci.core.version_state import ResolvedVersion, VersionState

__all__ = [
    # Changelog
    "FALLBACK_DESCRIPTION",
    # Version
    "BumpType",
    # Commits
    "ConventionalSubject",
    "DescriptionFormat",
    "FormatOptions",
    "ParsedCommit",
    "RawSubject",
    "ResolvedVersion",
    "SemanticVersion",
    "VersionState",
    "format_as_changelog",
    "format_commits_for_upload",
    "group_commits_by_type",
    "increment",
    "parse_commits",
    "parse_subject",
    "parse_version",
    "truncate_description",
]
