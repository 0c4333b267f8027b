"""Version control access."""

from __future__ import annotations

from mpci.vcs.git import Commit, GitRepository, GitUser

__all__ = ["Commit", "GitRepository", "GitUser"]
