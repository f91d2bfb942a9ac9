"""Unit tests for Cargo-style version requirement matching."""

from __future__ import annotations

import pytest

from core.errors import MetadataParsingError
from loading.version_requirement import parse_requirement


@pytest.mark.parametrize(
    ("requirement", "version", "expected"),
    [
        ("^1.2", "1.2.0", True),
        ("^1.2", "1.9.3", True),
        ("^1.2", "2.0.0", False),
        ("^1.2", "1.1.9", False),
        ("1.2.3", "1.4.0", True),
        ("^0.3.1", "0.3.9", True),
        ("^0.3.1", "0.4.0", False),
        ("^0.0.3", "0.0.4", False),
        ("~1.2.3", "1.2.9", True),
        ("~1.2.3", "1.3.0", False),
        ("~1", "1.9.0", True),
        ("=1.2.3", "1.2.3", True),
        ("=1.2.3", "1.2.4", False),
        ("=1.2", "1.2.7", True),
        (">1.2", "1.2.9", False),
        (">1.2", "1.3.0", True),
        ("<=1.2", "1.2.9", True),
        (">=1.0, <2.0", "1.5.0", True),
        (">=1.0, <2.0", "2.0.0", False),
        ("1.*", "1.7.0", True),
        ("1.*", "2.0.0", False),
        ("1.2.x", "1.2.5", True),
        ("*", "42.0.0", True),
    ],
)
def test_requirement_matching(requirement: str, version: str, expected: bool) -> None:
    """Requirements should follow Cargo comparator semantics."""
    assert parse_requirement(requirement).matches(version) is expected


def test_prerelease_matches_only_with_same_release_comparator() -> None:
    """Pre-releases should match only when the requirement names one for the same release."""
    assert not parse_requirement(">=1.0.0").matches("1.5.0-alpha.1")
    assert parse_requirement(">=1.5.0-alpha.1").matches("1.5.0-beta")
    assert not parse_requirement(">=1.5.0-alpha.1").matches("1.6.0-alpha.1")


def test_unparseable_version_never_matches() -> None:
    """Versions outside the semver grammar should not match any requirement."""
    assert not parse_requirement("*").matches("not-a-version")


@pytest.mark.parametrize("requirement", ["", "^", "1.2,", ">>1.0", "*.2", "1.0.0-???"])
def test_invalid_requirements_raise(requirement: str) -> None:
    """Malformed requirements should raise metadata parsing errors."""
    with pytest.raises(MetadataParsingError):
        parse_requirement(requirement)


@pytest.mark.parametrize("requirement", ["=0.11.0", "<=0.11.0", "^0.11"])
def test_build_metadata_is_ignored(requirement: str) -> None:
    """Build metadata should not move a version away from its release."""
    assert parse_requirement(requirement).matches("0.11.0+wasi-snapshot-preview1")


def test_numeric_prerelease_is_still_prerelease() -> None:
    """Numeric pre-release identifiers should sort before the release they precede."""
    assert not parse_requirement("^1.0.0").matches("1.0.0-1")
    assert parse_requirement(">=1.0.0-0, <1.0.0").matches("1.0.0-1")
    assert parse_requirement(">=1.0.0-1").matches("1.0.0-alpha")


def test_dotted_prerelease_matches_exact_requirement() -> None:
    """Dotted alphanumeric pre-releases should parse and match exactly."""
    requirement = parse_requirement("=1.0.0-alpha.beta")

    assert requirement.matches("1.0.0-alpha.beta")
    assert not requirement.matches("1.0.0-alpha.1")
