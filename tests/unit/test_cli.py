"""Tests for the command line interface."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from mpci.cli.app import app
from mpci.core.changelog import FALLBACK_DESCRIPTION
from mpci.exceptions import CiToolError, GitError
from mpci.vcs.git import Commit, GitUser

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VERSION", "MPCI_ENV", "APPID", "ROBOT", "HTTPS_PROXY", "HTTP_PROXY", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_git() -> Iterator[MagicMock]:
    with patch("mpci.cli.commands.common.GitRepository") as repo_cls:
        repo = repo_cls.return_value
        repo.get_recent_commits.return_value = [
            Commit("abc1234", "Alice", "2024-01-15", "feat(api): add export"),
            Commit("def5678", "Bob", "2024-01-14", "fix: login crash"),
        ]
        repo.get_user.return_value = GitUser("Alice", "alice@example.com")
        yield repo


def _manifest_version(project_dir: Path) -> str:
    return json.loads((project_dir / "package.json").read_text())["version"]


class TestUpload:
    """Tests for the upload command."""

    def test_upload_increments_and_calls_tool(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert _manifest_version(project_dir) == "1.4.3"
        ci_cls.return_value.upload.assert_called_once_with(
            "1.4.3", "feat(api): add export (abc1234)", 1
        )
        mock_git.get_recent_commits.assert_called_once_with(3)
        assert "Upload Complete" in result.output

    def test_dry_run_changes_nothing(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(app, ["upload", "--path", str(project_dir), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Dry Run Preview" in result.output
        assert "1.4.3" in result.output
        assert _manifest_version(project_dir) == "1.4.2"
        ci_cls.assert_not_called()

    def test_explicit_version(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(
                app,
                ["upload", "--path", str(project_dir), "--version", "2.0.0", "--desc", "Hotfix"],
            )

        assert result.exit_code == 0, result.output
        ci_cls.return_value.upload.assert_called_once_with("2.0.0", "Hotfix", 1)
        assert _manifest_version(project_dir) == "1.4.2"

    def test_no_auto_increment(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(
                app, ["upload", "--path", str(project_dir), "--no-auto-increment", "--robot", "5"]
            )

        assert result.exit_code == 0, result.output
        version, _, robot = ci_cls.return_value.upload.call_args[0]
        assert version == "1.4.2"
        assert robot == 5

    def test_minor_increment_and_changelog_description(
        self, project_dir: Path, mock_git: MagicMock
    ):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(
                app,
                [
                    "upload",
                    "--path",
                    str(project_dir),
                    "--increment-type",
                    "minor",
                    "--desc-format",
                    "changelog",
                    "--no-include-hash",
                ],
            )

        assert result.exit_code == 0, result.output
        version, desc, _ = ci_cls.return_value.upload.call_args[0]
        assert version == "1.5.0"
        assert desc == "✨ Features\n- (api)add export\n\n🐛 Bug Fixes\n- login crash"

    def test_version_from_environment(
        self, project_dir: Path, mock_git: MagicMock, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("VERSION", "3.1.0")

        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert ci_cls.return_value.upload.call_args[0][0] == "3.1.1"
        assert _manifest_version(project_dir) == "3.1.1"

    def test_outside_git_uses_configured_desc(self, project_dir: Path):
        with (
            patch(
                "mpci.cli.commands.common.GitRepository",
                side_effect=GitError("Not a git repository"),
            ),
            patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls,
        ):
            result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert ci_cls.return_value.upload.call_args[0][1] == "Uploaded via CI"

    def test_empty_history_uses_environment_desc(
        self, project_dir: Path, mock_git: MagicMock, monkeypatch: pytest.MonkeyPatch
    ):
        mock_git.get_recent_commits.return_value = []
        monkeypatch.setenv("MPCI_ENV", "production")

        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert ci_cls.return_value.upload.call_args[0][1] == "Production - Uploaded via CI"

    def test_tool_failure_exits_nonzero(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.upload.MiniProgramCi") as ci_cls:
            ci_cls.return_value.upload.side_effect = CiToolError("upload failed", stderr="bad key")
            result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "Upload failed" in result.output

    def test_missing_private_key(self, project_dir: Path, mock_git: MagicMock):
        (project_dir / "private.wx1234567890.key").unlink()

        result = runner.invoke(app, ["upload", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "Private key not found" in result.output
        assert _manifest_version(project_dir) == "1.4.2"

    def test_missing_config(self, tmp_path: Path):
        result = runner.invoke(app, ["upload", "--path", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error loading config" in result.output


class TestPreview:
    """Tests for the preview command."""

    def test_preview_calls_tool(self, project_dir: Path, mock_git: MagicMock):
        with patch("mpci.cli.commands.preview.MiniProgramCi") as ci_cls:
            ci_cls.return_value.preview.return_value = MagicMock(stdout="")
            result = runner.invoke(
                app, ["preview", "--path", str(project_dir), "--page-path", "pages/index/index"]
            )

        assert result.exit_code == 0, result.output
        call = ci_cls.return_value.preview.call_args
        assert call.args == ("feat(api): add export (abc1234)", 1)
        assert call.kwargs["qrcode_format"] == "terminal"
        assert call.kwargs["page_path"] == "pages/index/index"

    def test_preview_without_history_uses_configured_desc(
        self, project_dir: Path, mock_git: MagicMock
    ):
        mock_git.get_recent_commits.return_value = []

        with patch("mpci.cli.commands.preview.MiniProgramCi") as ci_cls:
            ci_cls.return_value.preview.return_value = MagicMock(stdout="")
            result = runner.invoke(app, ["preview", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert ci_cls.return_value.preview.call_args.args[0] == "Preview build"

    def test_invalid_qrcode_format(self, project_dir: Path):
        result = runner.invoke(
            app, ["preview", "--path", str(project_dir), "--qrcode-format", "svg"]
        )

        assert result.exit_code != 0


class TestPackNpm:
    def test_ignores_are_split(self, project_dir: Path):
        with patch("mpci.cli.commands.pack_npm.MiniProgramCi") as ci_cls:
            result = runner.invoke(
                app, ["pack-npm", "--path", str(project_dir), "--ignores", "test/**/*, docs/**/*"]
            )

        assert result.exit_code == 0, result.output
        ci_cls.return_value.pack_npm.assert_called_once_with(["test/**/*", "docs/**/*"])


class TestDescribe:
    def test_describe_detailed(self, project_dir: Path, mock_git: MagicMock):
        result = runner.invoke(
            app,
            [
                "describe",
                "--path",
                str(project_dir),
                "--desc-format",
                "detailed",
                "--no-include-hash",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "1. feat(api): add export" in result.output
        assert "2. fix: login crash" in result.output

    def test_describe_without_history_prints_fallback(
        self, project_dir: Path, mock_git: MagicMock
    ):
        mock_git.get_recent_commits.return_value = []

        result = runner.invoke(app, ["describe", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert FALLBACK_DESCRIPTION in result.output


class TestVersionCommands:
    """Tests for 'version show' and 'version bump'."""

    def test_show(self, project_dir: Path):
        result = runner.invoke(app, ["version", "show", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert "1.4.2" in result.output

    def test_bump_minor(self, project_dir: Path):
        result = runner.invoke(app, ["version", "bump", "minor", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert "1.5.0" in result.output
        assert _manifest_version(project_dir) == "1.5.0"

    def test_bump_default_patch(self, project_dir: Path):
        result = runner.invoke(app, ["version", "bump", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert _manifest_version(project_dir) == "1.4.3"
