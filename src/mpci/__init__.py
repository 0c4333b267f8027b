"""mpci - a command-line wrapper around miniprogram-ci.

Loads project configuration, turns recent git history into upload
descriptions, keeps the manifest version in step with uploads and
forwards preview, upload and pack-npm calls to the miniprogram-ci tool.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
