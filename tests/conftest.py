"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src and the project root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test without inherited docquery environment overrides."""
    monkeypatch.delenv("DOCQUERY_TARGET_TRIPLE", raising=False)
    monkeypatch.delenv("DOCQUERY_PROJECT_ROOT", raising=False)
