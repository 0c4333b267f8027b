"""pyproject.toml as a version manifest.

Reads ``[project].version`` or ``[tool.poetry].version`` and updates it
in place with a targeted regex replacement, so formatting and comments
in the rest of the file survive.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from mpci.core.version import SemanticVersion, parse_version
from mpci.exceptions import ManifestNotFoundError, ManifestWriteError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Sections that may carry the version, in lookup order
VERSION_SECTIONS = (r"\[project\]", r"\[tool\.poetry\]")

_VERSION_LINE = r'^(version\s*=\s*)["\']([^"\']*)["\']'


def _section_pattern(header: str) -> re.Pattern[str]:
    # The section runs up to the next table header or EOF
    return re.compile(rf"^{header}[ \t]*$.*?(?=^\[|\Z)", re.MULTILINE | re.DOTALL)


def find_version(content: str) -> str | None:
    """Return the version string declared in ``content``, if any."""
    for header in VERSION_SECTIONS:
        section = _section_pattern(header).search(content)
        if not section:
            continue
        match = re.search(_VERSION_LINE, section.group(0), re.MULTILINE)
        if match:
            return match.group(2)
    return None


def replace_version(content: str, new_version: str) -> str | None:
    """Return ``content`` with the version replaced, or None if none was found."""
    for header in VERSION_SECTIONS:
        pattern = _section_pattern(header)
        section = pattern.search(content)
        if not section:
            continue
        updated, count = re.subn(
            _VERSION_LINE,
            rf'\g<1>"{new_version}"',
            section.group(0),
            count=1,
            flags=re.MULTILINE,
        )
        if count:
            return content[: section.start()] + updated + content[section.end() :]
    return None


class PyprojectManifestStore:
    """The version declared in a ``pyproject.toml``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    def _content(self) -> str | None:
        if not self.path.is_file():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read manifest %s: %s", self.path, e)
            return None

    def read(self) -> SemanticVersion | None:
        content = self._content()
        if content is None:
            return None
        version = find_version(content)
        if not version or not version.strip():
            return None
        return parse_version(version)

    def write(self, version: SemanticVersion) -> None:
        """Set the declared version.

        Raises:
            ManifestNotFoundError: If the file or its version line is missing
            ManifestWriteError: If the file cannot be written
        """
        content = self._content()
        if content is None:
            raise ManifestNotFoundError(f"No readable manifest at {self.path}")

        updated = replace_version(content, str(version))
        if updated is None:
            raise ManifestNotFoundError(
                f"Could not find version to update in {self.path}. "
                "Expected [project].version or [tool.poetry].version."
            )

        try:
            self.path.write_text(updated, encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(f"Could not write {self.path}: {e}") from e
