import os

import pytest

from slotsim.engine.random import RandomManager

os.environ.setdefault("MPLBACKEND", "Agg")


@pytest.fixture(autouse=True)
def _default_log_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def random_manager():
    return RandomManager(root_seed=12345)


@pytest.fixture
def backoff_rng(random_manager):
    return random_manager.get_or_create_stream("contention/backoff")
