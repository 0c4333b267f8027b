"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mpci.core.version import SemanticVersion, parse_version
from mpci.exceptions import ManifestWriteError
from mpci.vcs.git import Commit

if TYPE_CHECKING:
    from pathlib import Path


class InMemoryManifestStore:
    """Manifest store backed by a plain attribute."""

    def __init__(self, version: str | None = None) -> None:
        self.version = version
        self.writes: list[SemanticVersion] = []

    @property
    def location(self) -> str:
        return "memory"

    def read(self) -> SemanticVersion | None:
        if not self.version:
            return None
        return parse_version(self.version)

    def write(self, version: SemanticVersion) -> None:
        self.writes.append(version)
        self.version = str(version)


class FailingManifestStore(InMemoryManifestStore):
    """Manifest store whose writes always fail."""

    def write(self, version: SemanticVersion) -> None:
        raise ManifestWriteError("disk full")


@pytest.fixture
def memory_store() -> InMemoryManifestStore:
    return InMemoryManifestStore("1.2.3")


@pytest.fixture
def failing_store() -> FailingManifestStore:
    return FailingManifestStore("1.2.3")


@pytest.fixture
def feat_commit() -> Commit:
    return Commit("feat123", "Alice", "2024-01-15", "feat(pages): add profile page")


@pytest.fixture
def fix_commit() -> Commit:
    return Commit("fix4567", "Bob", "2024-01-14", "fix(api): handle login timeout")


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Mixed history, newest first."""
    return [
        Commit("a1b2c3d", "Alice", "2024-01-15", "feat(pages): add profile page"),
        Commit("b2c3d4e", "Bob", "2024-01-14", "fix(api): handle login timeout"),
        Commit("c3d4e5f", "Carol", "2024-01-14", "style(components): tidy button styles"),
        Commit("d4e5f6a", "Dave", "2024-01-13", "docs: update API docs"),
        Commit("e5f6a7b", "Erin", "2024-01-13", "chore: bump dependencies"),
        Commit("f6a7b8c", "Frank", "2024-01-12", "feat(api): add data export"),
        Commit("a7b8c9d", "Grace", "2024-01-12", "Merge branch 'main'"),
    ]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with mpci.toml, package.json and a private key."""
    (tmp_path / "mpci.toml").write_text(
        """\
appid = "wx1234567890"

[description]
format = "simple"
commit_count = 3

[env.production]
desc = "Production"
setting = { minified = true, upload_with_source_map = false }
"""
    )
    (tmp_path / "package.json").write_text('{\n  "name": "demo",\n  "version": "1.4.2"\n}\n')
    (tmp_path / "private.wx1234567890.key").write_text("key")
    return tmp_path
