"""Wrapper around the miniprogram-ci command line tool."""

from __future__ import annotations

from mpci.ci.tool import CiResult, MiniProgramCi

__all__ = ["CiResult", "MiniProgramCi"]
