"""Configuration models.

All models are pydantic v2 models that reject unknown keys, so typos in
``mpci.toml`` surface as validation errors instead of being ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from mpci.core.changelog import DEFAULT_MAX_LENGTH, DescriptionFormat
from mpci.core.version import BumpType
from mpci.core.version_state import DEFAULT_ENV_VAR, DEFAULT_VERSION
from mpci.exceptions import ConfigValidationError

DEFAULT_ENVIRONMENT = "development"


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class CompileSettings(_Model):
    """Compilation settings passed to miniprogram-ci."""

    es6: bool = True
    es7: bool = False
    minified: bool = True
    minify_wxss: bool = True
    minify_wxml: bool = True
    minify_js: bool = True
    auto_prefix_wxss: bool = False
    upload_with_source_map: bool = False


class PreviewConfig(_Model):
    qrcode_format: Literal["image", "base64", "terminal"] = "terminal"
    qrcode_output_dest: Path = Path("preview-qrcode.jpg")
    page_path: str = ""
    search_query: str = ""
    scene: int = 1001
    desc: str = "Preview build"


class UploadConfig(_Model):
    desc: str = "Uploaded via CI"


class DescriptionConfig(_Model):
    """How commit history is turned into an upload description."""

    format: DescriptionFormat = DescriptionFormat.DETAILED
    max_length: int = Field(default=DEFAULT_MAX_LENGTH, gt=0)
    include_hash: bool = True
    commit_count: int = Field(default=5, gt=0)


class VersionConfig(_Model):
    """Where the version lives and how it is bumped."""

    manifest: Path = Path("package.json")
    increment_type: BumpType = BumpType.PATCH
    auto_increment: bool = True
    default_version: str = DEFAULT_VERSION
    env_var: str | None = DEFAULT_ENV_VAR


class EnvironmentProfile(_Model):
    """Overrides applied when running in a named environment."""

    desc: str | None = None
    setting: dict[str, bool] = Field(default_factory=dict)


class MpciConfig(_Model):
    """Root configuration for mpci."""

    appid: str = ""
    project_path: Path = Path(".")
    miniprogram_root: str = "miniprogram/"
    private_key_path: Path | None = None
    ignores: list[str] = Field(
        default_factory=lambda: [
            "node_modules/**/*",
            ".git/**/*",
            "*.log",
            "private.*.key",
        ]
    )
    robot: int = Field(default=1, ge=1, le=30)
    proxy: str = ""

    setting: CompileSettings = Field(default_factory=CompileSettings)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    description: DescriptionConfig = Field(default_factory=DescriptionConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    env: dict[str, EnvironmentProfile] = Field(default_factory=dict)

    @property
    def effective_private_key_path(self) -> Path:
        if self.private_key_path is not None:
            return self.private_key_path
        return self.project_path / f"private.{self.appid}.key"

    @property
    def manifest_path(self) -> Path:
        return self.project_path / self.version.manifest

    def resolve_paths(self, base: Path) -> MpciConfig:
        """Return a copy with relative paths anchored at ``base``."""
        project_path = self.project_path
        if not project_path.is_absolute():
            project_path = base / project_path
        updates: dict[str, Any] = {"project_path": project_path.resolve()}
        if self.private_key_path is not None and not self.private_key_path.is_absolute():
            updates["private_key_path"] = (base / self.private_key_path).resolve()
        preview_dest = self.preview.qrcode_output_dest
        if not preview_dest.is_absolute():
            updates["preview"] = self.preview.model_copy(
                update={"qrcode_output_dest": (base / preview_dest).resolve()}
            )
        return self.model_copy(update=updates)

    def for_environment(self, name: str | None) -> MpciConfig:
        """Return a copy with the named environment profile applied.

        Unknown environment names leave the configuration unchanged.
        """
        profile = self.env.get(name or DEFAULT_ENVIRONMENT)
        if profile is None:
            return self

        try:
            setting = CompileSettings.model_validate(
                {**self.setting.model_dump(), **profile.setting}
            )
        except ValueError as e:
            raise ConfigValidationError(f"Invalid settings in environment {name!r}: {e}") from e

        upload = self.upload
        if profile.desc:
            upload = upload.model_copy(update={"desc": f"{profile.desc} - {upload.desc}"})

        return self.model_copy(update={"setting": setting, "upload": upload})

    def validate_for_deploy(self) -> None:
        """Check the fields miniprogram-ci needs before any call to it.

        Raises:
            ConfigValidationError: If appid, project path or private key is missing
        """
        if not self.appid:
            raise ConfigValidationError("Missing required setting: appid")
        if not self.project_path.exists():
            raise ConfigValidationError(f"Project path does not exist: {self.project_path}")
        key_path = self.effective_private_key_path
        if not key_path.is_file():
            raise ConfigValidationError(
                f"Private key not found: {key_path}. "
                "Download it from the Mini Program admin console and place it in the project root."
            )
