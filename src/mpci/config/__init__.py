"""Configuration management for mpci."""

from __future__ import annotations

from mpci.config.loader import find_config_file, load_config
from mpci.config.models import (
    CompileSettings,
    DescriptionConfig,
    EnvironmentProfile,
    MpciConfig,
    PreviewConfig,
    UploadConfig,
    VersionConfig,
)

__all__ = [
    "CompileSettings",
    "DescriptionConfig",
    "EnvironmentProfile",
    "MpciConfig",
    "PreviewConfig",
    "UploadConfig",
    "VersionConfig",
    "find_config_file",
    "load_config",
]
