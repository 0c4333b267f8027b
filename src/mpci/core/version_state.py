"""Current version lookup and best-effort version bumping.

The current version is resolved from, in order:

1. an explicit override in the environment (``VERSION`` by default)
2. the version stored in the project manifest
3. the configured default

Bumping persists the new version back into the manifest when it can.
A failed write is logged and otherwise ignored; the new version is
still returned so the upload can go ahead.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mpci.core.version import BumpType, increment, parse_version
from mpci.exceptions import ManifestError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mpci.project.manifest import ManifestStore

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "1.0.0"
DEFAULT_ENV_VAR = "VERSION"


@dataclass(frozen=True)
class ResolvedVersion:
    """A version string and where it came from."""

    version: str
    source: str


class VersionState:
    """Tracks the project version stored in a manifest."""

    def __init__(
        self,
        store: ManifestStore,
        *,
        default_version: str = DEFAULT_VERSION,
        env_var: str | None = DEFAULT_ENV_VAR,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.store = store
        self.default_version = default_version
        self.env_var = env_var
        self._environ = os.environ if environ is None else environ

    def resolve(self) -> ResolvedVersion:
        if self.env_var:
            override = self._environ.get(self.env_var, "").strip()
            if override:
                return ResolvedVersion(override, f"environment variable {self.env_var}")

        stored = self.store.read()
        if stored is not None:
            return ResolvedVersion(str(stored), self.store.location)

        return ResolvedVersion(self.default_version, "default")

    def get_current_version(self) -> str:
        return self.resolve().version

    def get_and_increment_version(self, bump_type: BumpType | str = BumpType.PATCH) -> str:
        """Increment the current version and try to persist it.

        Args:
            bump_type: ``major``, ``minor`` or ``patch``; anything else
                counts as ``patch``

        Returns:
            The incremented version, whether or not it was persisted
        """
        current = self.get_current_version()
        new_version = increment(parse_version(current), bump_type)

        try:
            self.store.write(new_version)
        except ManifestError as e:
            logger.warning(
                "Could not update version in %s, continuing with %s: %s",
                self.store.location,
                new_version,
                e,
            )
        else:
            logger.info("Version updated: %s -> %s", current, new_version)

        return str(new_version)
