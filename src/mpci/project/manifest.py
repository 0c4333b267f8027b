"""Version manifests.

A manifest is the project file that holds the current version string,
``package.json`` for Mini Program projects. Stores expose exactly two
operations: ``read`` returns the stored version or ``None`` when the
manifest is missing, unreadable or has no version, and ``write``
replaces the version field and nothing else.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from mpci.core.version import SemanticVersion, parse_version
from mpci.exceptions import ManifestNotFoundError, ManifestWriteError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ManifestStore(Protocol):
    """Where the current project version is persisted."""

    @property
    def location(self) -> str: ...

    def read(self) -> SemanticVersion | None: ...

    def write(self, version: SemanticVersion) -> None: ...


class JsonManifestStore:
    """The ``version`` field of a JSON document such as ``package.json``.

    Other keys and their order are left untouched on write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    def _load(self) -> dict[str, Any] | None:
        if not self.path.is_file():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Could not read manifest %s: %s", self.path, e)
            return None
        return data if isinstance(data, dict) else None

    def read(self) -> SemanticVersion | None:
        data = self._load()
        if data is None:
            return None
        version = data.get("version")
        if not isinstance(version, str) or not version.strip():
            return None
        return parse_version(version)

    def write(self, version: SemanticVersion) -> None:
        """Set the manifest version.

        Raises:
            ManifestNotFoundError: If the manifest is missing or not a JSON object
            ManifestWriteError: If the file cannot be written
        """
        data = self._load()
        if data is None:
            raise ManifestNotFoundError(f"No readable manifest at {self.path}")
        data["version"] = str(version)
        try:
            self.path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise ManifestWriteError(f"Could not write {self.path}: {e}") from e


def open_manifest_store(path: Path) -> ManifestStore:
    """Pick a store for ``path`` by file type."""
    if path.suffix == ".toml":
        from mpci.project.pyproject import PyprojectManifestStore

        return PyprojectManifestStore(path)
    return JsonManifestStore(path)
