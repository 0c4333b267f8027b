"""Project files that carry the version."""

from __future__ import annotations

from mpci.project.manifest import JsonManifestStore, ManifestStore, open_manifest_store
from mpci.project.pyproject import PyprojectManifestStore

__all__ = [
    "JsonManifestStore",
    "ManifestStore",
    "PyprojectManifestStore",
    "open_manifest_store",
]
