"""Shared pytest configuration and fixtures for float_planner tests."""

import json
import sys
from pathlib import Path

import pytest

# Ensure the float_planner package is importable when running tests from the repo root
sys.path.insert(0, str(Path(__file__).parent.parent))

from float_planner.store import SnapshotStore  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"
SNAPSHOT_PATH = FIXTURES / "current_river.json"


@pytest.fixture
def snapshot_path():
    return SNAPSHOT_PATH


@pytest.fixture
def snapshot():
    """Raw snapshot mapping; tests may modify their own copy."""
    with open(SNAPSHOT_PATH) as f:
        return json.load(f)


@pytest.fixture
def store(snapshot):
    return SnapshotStore.from_dict(snapshot)
