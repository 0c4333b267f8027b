"""miniprogram-ci invocation.

The actual build, preview and upload work is done by the ``miniprogram-ci``
command line tool. This module only turns configuration into its
arguments and runs it as a subprocess; its output is captured and
returned for display.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mpci.exceptions import CiToolError, CiToolNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    from mpci.config.models import CompileSettings, MpciConfig

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "miniprogram-ci"
EXECUTABLE_ENV_VAR = "MPCI_CI_BIN"

# CompileSettings field -> miniprogram-ci flag
SETTING_FLAGS = {
    "es6": "--enable-es6",
    "es7": "--enable-es7",
    "minified": "--enable-minify",
    "minify_wxss": "--enable-minifyWXSS",
    "minify_wxml": "--enable-minifyWXML",
    "minify_js": "--enable-minifyJS",
    "auto_prefix_wxss": "--enable-autoprefixwxss",
    "upload_with_source_map": "--upload-with-source-map",
}


@dataclass(frozen=True)
class CiResult:
    args: list[str]
    stdout: str
    stderr: str


def _flag_value(value: bool) -> str:
    return "true" if value else "false"


def setting_args(setting: CompileSettings) -> list[str]:
    args: list[str] = []
    for field, flag in SETTING_FLAGS.items():
        args.extend([flag, _flag_value(getattr(setting, field))])
    return args


class MiniProgramCi:
    """Runs miniprogram-ci commands for one project."""

    def __init__(self, config: MpciConfig, executable: str | None = None) -> None:
        self.config = config
        self.executable = executable or os.environ.get(EXECUTABLE_ENV_VAR) or DEFAULT_EXECUTABLE

    def _base_args(self, command: str) -> list[str]:
        args = [
            *shlex.split(self.executable),
            command,
            "--pp",
            str(self.config.project_path),
            "--pkp",
            str(self.config.effective_private_key_path),
            "--appid",
            self.config.appid,
        ]
        if self.config.proxy:
            args.extend(["--proxy", self.config.proxy])
        return args

    def _run(self, args: list[str]) -> CiResult:
        logger.debug("Running %s", shlex.join(args))
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.config.project_path,
            )
        except FileNotFoundError as e:
            raise CiToolNotFoundError(
                f"{args[0]} not found. Install it with: npm install -g miniprogram-ci"
            ) from e
        except subprocess.CalledProcessError as e:
            raise CiToolError(
                f"miniprogram-ci {args[len(shlex.split(self.executable))]} failed "
                f"with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return CiResult(args=args, stdout=result.stdout, stderr=result.stderr)

    def upload_args(self, version: str, desc: str, robot: int) -> list[str]:
        return [
            *self._base_args("upload"),
            "--uv",
            version,
            "--ud",
            desc,
            "-r",
            str(robot),
            *setting_args(self.config.setting),
        ]

    def preview_args(
        self,
        desc: str,
        robot: int,
        *,
        qrcode_format: str | None = None,
        qrcode_output: Path | None = None,
        page_path: str | None = None,
        search_query: str | None = None,
        scene: int | None = None,
    ) -> list[str]:
        preview = self.config.preview
        fmt = qrcode_format or preview.qrcode_format
        args = [
            *self._base_args("preview"),
            "--ud",
            desc,
            "-r",
            str(robot),
            "--qrcode-format",
            fmt,
            "--scene",
            str(scene if scene is not None else preview.scene),
        ]
        if fmt != "terminal":
            args.extend(["--qrcode-output-dest", str(qrcode_output or preview.qrcode_output_dest)])
        page = page_path if page_path is not None else preview.page_path
        if page:
            args.extend(["--preview-page-path", page])
        query = search_query if search_query is not None else preview.search_query
        if query:
            args.extend(["--preview-search-query", query])
        args.extend(setting_args(self.config.setting))
        return args

    def pack_npm_args(self, ignores: list[str] | None = None) -> list[str]:
        args = self._base_args("pack-npm")
        if ignores:
            args.extend(["--ignores", ",".join(ignores)])
        return args

    def upload(self, version: str, desc: str, robot: int) -> CiResult:
        """Upload the project as ``version``.

        Raises:
            CiToolNotFoundError: If miniprogram-ci is not installed
            CiToolError: If the upload fails
        """
        return self._run(self.upload_args(version, desc, robot))

    def preview(
        self,
        desc: str,
        robot: int,
        *,
        qrcode_format: str | None = None,
        qrcode_output: Path | None = None,
        page_path: str | None = None,
        search_query: str | None = None,
        scene: int | None = None,
    ) -> CiResult:
        return self._run(
            self.preview_args(
                desc,
                robot,
                qrcode_format=qrcode_format,
                qrcode_output=qrcode_output,
                page_path=page_path,
                search_query=search_query,
                scene=scene,
            )
        )

    def pack_npm(self, ignores: list[str] | None = None) -> CiResult:
        return self._run(self.pack_npm_args(ignores))
