"""Configuration loading.

Configuration is read from ``mpci.toml`` or from the ``[tool.mpci]``
table of ``pyproject.toml``, searching upwards from the project
directory. A handful of environment variables override file values:

- ``MPCI_ENV``: name of the environment profile to apply
- ``APPID``: Mini Program app id
- ``ROBOT``: CI robot number (1-30)
- ``HTTPS_PROXY`` / ``HTTP_PROXY``: proxy passed to miniprogram-ci
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from mpci.config.models import DEFAULT_ENVIRONMENT, MpciConfig
from mpci.exceptions import ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "mpci.toml"
PYPROJECT_FILENAME = "pyproject.toml"
ENVIRONMENT_VAR = "MPCI_ENV"


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_mpci_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.mpci]`` table, or an empty dict."""
    table = pyproject.get("tool", {}).get("mpci", {})
    return table if isinstance(table, dict) else {}


def find_config_file(start: Path | None = None) -> Path:
    """Find the nearest config file, walking up from ``start``.

    ``mpci.toml`` wins over ``pyproject.toml`` in the same directory, and
    a ``pyproject.toml`` only counts when it has a ``[tool.mpci]`` table.

    Raises:
        ConfigNotFoundError: If no config file is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file():
            try:
                has_table = bool(extract_mpci_config(load_toml(pyproject)))
            except ConfigValidationError:
                has_table = False
            if has_table:
                return pyproject

    raise ConfigNotFoundError(
        f"No {CONFIG_FILENAME} or [tool.mpci] table found in {current} or its parents"
    )


def read_config_data(path: Path) -> dict[str, Any]:
    data = load_toml(path)
    if path.name == PYPROJECT_FILENAME:
        return extract_mpci_config(data)
    return data


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(data)
    if environ.get("APPID"):
        merged["appid"] = environ["APPID"]
    if environ.get("ROBOT"):
        try:
            merged["robot"] = int(environ["ROBOT"])
        except ValueError as e:
            raise ConfigValidationError(f"ROBOT must be a number, got {environ['ROBOT']!r}") from e
    proxy = environ.get("HTTPS_PROXY") or environ.get("HTTP_PROXY")
    if proxy and not merged.get("proxy"):
        merged["proxy"] = proxy
    return merged


def load_config(
    path: Path | None = None,
    *,
    environment: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> MpciConfig:
    """Load, validate and resolve the configuration.

    Args:
        path: Project directory or config file; defaults to the cwd
        environment: Environment profile to apply; defaults to ``MPCI_ENV``
            or ``development``
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        The configuration with relative paths anchored at the config file

    Raises:
        ConfigNotFoundError: If no configuration is found
        ConfigValidationError: If the configuration is invalid
    """
    environ = os.environ if environ is None else environ

    if path is not None and path.is_file():
        config_path = path
    else:
        config_path = find_config_file(path)
    logger.debug("Using configuration from %s", config_path)

    data = apply_env_overrides(read_config_data(config_path), environ)
    try:
        config = MpciConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}:\n{e}") from e

    env_name = environment or environ.get(ENVIRONMENT_VAR) or DEFAULT_ENVIRONMENT
    return config.resolve_paths(config_path.parent).for_environment(env_name)
