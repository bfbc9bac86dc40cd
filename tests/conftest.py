# tests/conftest.py
"""
Root conftest - shared fixtures for foldkeep tests.

Test Tiers:
- tier1: Pure logic tests, no I/O
         Run: pytest -m tier1
- tier2: Tests touching the filesystem, asyncio or the CLI
         Run: pytest -m "tier1 or tier2"
"""

from __future__ import annotations

from pathlib import Path

import pytest

from foldkeep.core.paths import FoldPaths

from tests.fakes import FakeWorkspace, RecordingNotifier

TIER1_PATTERNS = [
    "test_fold_ranges",
    "test_range_codec",
    "test_identity_registry",
    "test_fold_record_store",
    "test_capture_engine",
    "test_logging",
]


def pytest_collection_modifyitems(items):
    """Mark pure-logic modules tier1 and everything else tier2."""
    for item in items:
        module = item.module.__name__.rsplit(".", 1)[-1]
        if module in TIER1_PATTERNS:
            item.add_marker(pytest.mark.tier1)
        else:
            item.add_marker(pytest.mark.tier2)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with an empty .js-folds directory."""
    (tmp_path / ".js-folds").mkdir()
    return tmp_path


@pytest.fixture
def paths(project: Path) -> FoldPaths:
    return FoldPaths(project)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def workspace() -> FakeWorkspace:
    return FakeWorkspace()
