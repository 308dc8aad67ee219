"""Root pytest configuration for all tests.

Provides a temporary LocalStorage file, a deterministic clock, and a
WikiStore wired to both.
"""

import logging
import random

import pytest

from src.wiki_store import LocalStorage, WikiStore
from tests.helpers.clock import StepClock

# Keep library debug output out of captured logs
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture
def storage(tmp_path):
    """LocalStorage backed by a file in the test's temp directory."""
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def clock():
    """Clock starting at 2024-01-15T10:30:00Z, one minute per call."""
    return StepClock()


@pytest.fixture
def store(storage, clock):
    """Empty WikiStore with deterministic time and randomness."""
    return WikiStore(storage, clock=clock, rng=random.Random(42))
