"""Command line interface for mpci."""

from __future__ import annotations

from mpci.cli.app import app, main

__all__ = ["app", "main"]
