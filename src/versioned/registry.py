"""Revision plugin registry.

Generated from templates/registry.py.j2 by ``docquery generate``. Do not edit
by hand; rerun the generator with the supported revision list instead.
"""

from __future__ import annotations

from core.config import DocQueryConfig
from core.errors import UnsupportedFormatError
from revisions.base import RevisionPlugin
from revisions.legacy import LegacyRevision
from revisions.modern import ModernRevision

SUPPORTED_REVISIONS: tuple[int, ...] = (
    28,
    29,
    30,
    32,
    33,
    34,
    35,
    36,
    37,
    39,
)


def plugin_for(revision: int, config: DocQueryConfig) -> RevisionPlugin:
    """Return the plugin for a supported revision.

    Raises:
        UnsupportedFormatError: If the revision is not in SUPPORTED_REVISIONS.
    """
    if revision == 28:
        return LegacyRevision(28, target_triple=config.target_triple)
    if revision == 29:
        return LegacyRevision(29, target_triple=config.target_triple)
    if revision == 30:
        return LegacyRevision(30, target_triple=config.target_triple)
    if revision == 32:
        return ModernRevision(32)
    if revision == 33:
        return ModernRevision(33)
    if revision == 34:
        return ModernRevision(34)
    if revision == 35:
        return ModernRevision(35)
    if revision == 36:
        return ModernRevision(36)
    if revision == 37:
        return ModernRevision(37)
    if revision == 39:
        return ModernRevision(39)
    raise UnsupportedFormatError(revision, SUPPORTED_REVISIONS)
