"""Semantic version parsing and incrementing.

Versions are plain ``major.minor.patch`` triples. Parsing never fails:
any component that is missing or not a non-negative integer becomes 0,
so ``"2.x.1"`` reads as ``2.0.1`` and ``"1.2"`` as ``1.2.0``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum


class BumpType(StrEnum):
    """Which component of the version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def coerce(cls, value: BumpType | str | None) -> BumpType:
        """Return the matching bump type, falling back to PATCH."""
        if isinstance(value, BumpType):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return cls.PATCH


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A ``major.minor.patch`` version with non-negative components."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        return parse_version(text)

    def bump(self, bump_type: BumpType | str = BumpType.PATCH) -> SemanticVersion:
        """Return the next version, resetting lower components."""
        return increment(self, bump_type)


def _component(part: str | None) -> int:
    if part is None:
        return 0
    part = part.strip()
    # isdecimal rejects signs, so negative components read as 0
    if not part.isdecimal():
        return 0
    try:
        return int(part)
    except ValueError:
        # Beyond the interpreter's integer string conversion limit
        return 0


def parse_version(text: str | None) -> SemanticVersion:
    """Parse a version string, degrading unparsable parts to 0.

    Args:
        text: Version string such as ``"1.4.2"``

    Returns:
        The parsed version; ``None`` or an empty string gives ``0.0.0``
    """
    parts = (text or "").split(".")
    padded = [*parts[:3], *([None] * (3 - len(parts[:3])))]
    return SemanticVersion(*(_component(p) for p in padded))


def format_version(version: SemanticVersion) -> str:
    return str(version)


def increment(
    version: SemanticVersion,
    bump_type: BumpType | str = BumpType.PATCH,
) -> SemanticVersion:
    """Increment a version.

    ``major`` resets minor and patch, ``minor`` resets patch. Anything
    that is not a recognized bump type counts as ``patch``.
    """
    kind = BumpType.coerce(bump_type)
    if kind == BumpType.MAJOR:
        return SemanticVersion(version.major + 1, 0, 0)
    if kind == BumpType.MINOR:
        return SemanticVersion(version.major, version.minor + 1, 0)
    return replace(version, patch=version.patch + 1)


def increment_version(text: str, bump_type: BumpType | str = BumpType.PATCH) -> str:
    """String-in, string-out shorthand for :func:`increment`."""
    return str(increment(parse_version(text), bump_type))
