"""Exception hierarchy for mpci.

Core components degrade instead of raising wherever they can; the
exceptions below surface from the outer shell (configuration, git,
manifest writes, the external CI tool) and are reported by the CLI.
"""

from __future__ import annotations


class MpciError(Exception):
    """Base class for all mpci errors."""


# Configuration


class ConfigError(MpciError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """No mpci.toml or [tool.mpci] table was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid or incomplete."""


# Manifest


class ManifestError(MpciError):
    """The version manifest could not be read or written."""


class ManifestNotFoundError(ManifestError):
    """The version manifest does not exist."""


class ManifestWriteError(ManifestError):
    """Writing the new version into the manifest failed."""


# Version control


class GitError(MpciError):
    """A git command failed or the path is not a repository."""


# External CI tool


class CiToolError(MpciError):
    """The miniprogram-ci command exited with a failure."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}\n{self.stderr.strip()}"
        return base


class CiToolNotFoundError(CiToolError):
    """The miniprogram-ci executable is not installed."""
