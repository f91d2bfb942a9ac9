"""Cargo-style version requirement matching.

Requirements such as ``^1.2``, ``~0.3.1``, ``>=1.0, <2.0`` or ``1.*`` are
translated into half-open version ranges and checked with
``semver.Version`` precedence. Build metadata never affects matching.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from semver import Version

from core.errors import MetadataParsingError

_COMPARATOR_PATTERN = re.compile(
    r"^(?P<op>\^|~|=|>=|<=|>|<)?\s*"
    r"(?P<major>\d+|[*xX])"
    r"(?:\.(?P<minor>\d+|[*xX]))?"
    r"(?:\.(?P<patch>\d+|[*xX]))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_WILDCARDS = {"*", "x", "X"}


@dataclass(frozen=True)
class _Bound:
    version: Version
    inclusive: bool


@dataclass(frozen=True)
class Comparator:
    """One comparator as a version range.

    Attributes:
        lower: Lower bound, unbounded when ``None``.
        upper: Upper bound, unbounded when ``None``.
        prerelease_triple: Release triple of an explicit pre-release in the
            comparator, if any.
    """

    lower: _Bound | None
    upper: _Bound | None
    prerelease_triple: tuple[int, int, int] | None

    def matches(self, version: Version) -> bool:
        """Return whether ``version`` falls inside this comparator's range."""
        if self.lower is not None:
            if version < self.lower.version:
                return False
            if version == self.lower.version and not self.lower.inclusive:
                return False
        if self.upper is not None:
            if version > self.upper.version:
                return False
            if version == self.upper.version and not self.upper.inclusive:
                return False
        return True


@dataclass(frozen=True)
class VersionRequirement:
    """Parsed requirement: every comparator must match."""

    text: str
    comparators: tuple[Comparator, ...]

    def matches(self, version: str | Version) -> bool:
        """Check whether a version satisfies the requirement.

        Args:
            version: Version string or parsed version.

        Returns:
            True when every comparator matches. Pre-release versions only
            match when a comparator names a pre-release of the same release.
        """
        if isinstance(version, str):
            try:
                version = Version.parse(version.strip())
            except ValueError:
                return False
        version = version.replace(build=None)
        if version.prerelease is not None:
            triple = _release_triple(version)
            if not any(item.prerelease_triple == triple for item in self.comparators):
                return False
        return all(comparator.matches(version) for comparator in self.comparators)


def parse_requirement(text: str) -> VersionRequirement:
    """Parse a comma-separated Cargo version requirement.

    Args:
        text: Requirement text such as ``^1.0.0``.

    Returns:
        Parsed requirement.

    Raises:
        MetadataParsingError: If any comparator is malformed.
    """
    parts = [part.strip() for part in text.split(",")]
    if not text.strip() or any(not part for part in parts):
        raise MetadataParsingError(f"Invalid version requirement '{text}': empty comparator.")
    return VersionRequirement(
        text=text,
        comparators=tuple(_parse_comparator(part, text) for part in parts),
    )


def _parse_comparator(part: str, text: str) -> Comparator:
    match = _COMPARATOR_PATTERN.match(part)
    if match is None:
        raise MetadataParsingError(
            f"Invalid version requirement '{text}': cannot parse comparator '{part}'."
        )
    op = match.group("op") or "^"
    major, minor, patch = (match.group(name) for name in ("major", "minor", "patch"))
    pre = match.group("pre")
    if major in _WILDCARDS:
        if op not in ("^", "=") or minor is not None or pre is not None:
            raise MetadataParsingError(
                f"Invalid version requirement '{text}': wildcard comparator '{part}'."
            )
        return Comparator(lower=None, upper=None, prerelease_triple=None)
    if minor in _WILDCARDS or patch in _WILDCARDS:
        return _wildcard_range(int(major), minor, patch, part, text)
    numbers = (int(major), _optional_int(minor), _optional_int(patch))
    try:
        return _operator_range(op, numbers, pre)
    except ValueError as error:
        raise MetadataParsingError(
            f"Invalid version requirement '{text}': unsupported pre-release in '{part}'."
        ) from error


def _wildcard_range(
    major: int,
    minor: str | None,
    patch: str | None,
    part: str,
    text: str,
) -> Comparator:
    if minor in _WILDCARDS:
        if patch is not None and patch not in _WILDCARDS:
            raise MetadataParsingError(
                f"Invalid version requirement '{text}': wildcard comparator '{part}'."
            )
        return _range(_version(major, 0, 0), _version(major + 1, 0, 0))
    minor_number = int(minor or 0)
    return _range(_version(major, minor_number, 0), _version(major, minor_number + 1, 0))


def _operator_range(
    op: str,
    numbers: tuple[int, int | None, int | None],
    pre: str | None,
) -> Comparator:
    major, minor, patch = numbers
    floor = _version(major, minor or 0, patch or 0, pre)
    prerelease_triple = (major, minor or 0, patch or 0) if pre is not None else None
    if op == "^":
        upper = _caret_upper(major, minor, patch)
        return Comparator(_Bound(floor, True), _Bound(upper, False), prerelease_triple)
    if op == "~":
        upper = _version(major + 1, 0, 0) if minor is None else _version(major, minor + 1, 0)
        return Comparator(_Bound(floor, True), _Bound(upper, False), prerelease_triple)
    if op == "=":
        if minor is None:
            return _range(_version(major, 0, 0), _version(major + 1, 0, 0))
        if patch is None:
            return _range(_version(major, minor, 0), _version(major, minor + 1, 0))
        return Comparator(_Bound(floor, True), _Bound(floor, True), prerelease_triple)
    if op == ">=":
        return Comparator(_Bound(floor, True), None, prerelease_triple)
    if op == ">":
        if minor is None:
            return Comparator(_Bound(_version(major + 1, 0, 0), True), None, None)
        if patch is None:
            return Comparator(_Bound(_version(major, minor + 1, 0), True), None, None)
        return Comparator(_Bound(floor, False), None, prerelease_triple)
    if op == "<":
        return Comparator(None, _Bound(floor, False), prerelease_triple)
    if minor is None:
        return Comparator(None, _Bound(_version(major + 1, 0, 0), False), None)
    if patch is None:
        return Comparator(None, _Bound(_version(major, minor + 1, 0), False), None)
    return Comparator(None, _Bound(floor, True), prerelease_triple)


def _caret_upper(major: int, minor: int | None, patch: int | None) -> Version:
    if major > 0 or minor is None:
        return _version(major + 1, 0, 0)
    if minor > 0 or patch is None:
        return _version(0, minor + 1, 0)
    return _version(0, 0, patch + 1)


def _range(lower: Version, upper: Version) -> Comparator:
    return Comparator(_Bound(lower, True), _Bound(upper, False), None)


def _version(major: int, minor: int, patch: int, pre: str | None = None) -> Version:
    suffix = f"-{pre}" if pre is not None else ""
    return Version.parse(f"{major}.{minor}.{patch}{suffix}")


def _optional_int(value: str | None) -> int | None:
    return int(value) if value is not None else None


def _release_triple(version: Version) -> tuple[int, int, int]:
    return (version.major, version.minor, version.patch)
