"""Template filters for splitting revision lists at a cutoff.

Dispatch arms differ in shape on either side of a cutoff revision, e.g.
when a plugin constructor gained or lost a parameter, so templates iterate
the two halves separately. Both filters keep the input order.
"""

from __future__ import annotations

from typing import Iterable

from jinja2.exceptions import FilterArgumentError


def at_most(revisions: Iterable[int], cutoff: int) -> list[int]:
    """Keep revisions less than or equal to ``cutoff``."""
    _check_cutoff(cutoff)
    return [revision for revision in revisions if revision <= cutoff]


def greater_than(revisions: Iterable[int], cutoff: int) -> list[int]:
    """Keep revisions strictly greater than ``cutoff``."""
    _check_cutoff(cutoff)
    return [revision for revision in revisions if revision > cutoff]


def _check_cutoff(cutoff: object) -> None:
    if isinstance(cutoff, bool) or not isinstance(cutoff, int):
        raise FilterArgumentError(f"revision cutoff must be an integer, got {cutoff!r}")
