"""Read-only access to git history.

Only the handful of git queries the upload flow needs are wrapped here:
the most recent commit subjects and the configured user identity.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from mpci.exceptions import GitError

logger = logging.getLogger(__name__)

# %h|%an|%ad|%s; the subject goes last so it may itself contain "|"
LOG_FORMAT = "%h|%an|%ad|%s"
FIELD_SEPARATOR = "|"


@dataclass(frozen=True)
class Commit:
    """A single commit as read from ``git log``."""

    sha: str
    author: str
    date: str
    message: str

    @classmethod
    def from_log_line(cls, line: str) -> Commit | None:
        """Parse one ``%h|%an|%ad|%s`` line, or return None if malformed."""
        parts = line.split(FIELD_SEPARATOR, 3)
        if len(parts) != 4:
            return None
        sha, author, date, message = (p.strip() for p in parts)
        if not sha:
            return None
        return cls(sha=sha, author=author, date=date, message=message)


@dataclass(frozen=True)
class GitUser:
    name: str
    email: str | None = None


class GitRepository:
    """A git working tree."""

    def __init__(self, path: Path) -> None:
        self.path = path.resolve()
        try:
            self._run("rev-parse", "--is-inside-work-tree")
        except GitError as e:
            raise GitError(f"Not a git repository: {self.path}") from e

    def _run(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {' '.join(args)} failed: {(e.stderr or '').strip()}") from e
        return result.stdout

    def get_recent_commits(self, count: int = 5) -> list[Commit]:
        """Return up to ``count`` commits, newest first.

        A failing ``git log`` (for example on a repository without any
        commits yet) yields an empty list instead of an error.
        """
        try:
            output = self._run(
                "log",
                f"-n{max(count, 0)}",
                f"--pretty=format:{LOG_FORMAT}",
                "--date=short",
            )
        except GitError as e:
            logger.warning("Could not read git history: %s", e)
            return []

        commits = []
        for line in output.splitlines():
            commit = Commit.from_log_line(line)
            if commit is None:
                logger.debug("Skipping unparsable log line: %r", line)
                continue
            commits.append(commit)
        return commits

    def get_user(self) -> GitUser | None:
        """Return the configured git identity, if any."""
        try:
            name = self._run("config", "user.name").strip()
        except GitError:
            return None
        if not name:
            return None
        try:
            email = self._run("config", "user.email").strip() or None
        except GitError:
            email = None
        return GitUser(name=name, email=email)
