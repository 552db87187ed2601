"""Shared fixtures for GridTrader tests."""

import pytest

from gridtrader.config import EngineConfig
from gridtrader.engine import TickScheduler
from gridtrader.publisher import Outbox

from helpers import START_TIME, FlatRandom


@pytest.fixture
def flat_rng():
    return FlatRandom()


@pytest.fixture
def make_scheduler():
    """Factory for schedulers with no warm-up and an Outbox publisher."""

    def _make(rng=None, **overrides):
        settings = {"warmup_ticks": 0, "seed": 7}
        settings.update(overrides)
        config = EngineConfig(**settings)
        outbox = Outbox()
        scheduler = TickScheduler.from_config(
            config,
            publisher=outbox,
            rng=rng,
            start_time=START_TIME,
        )
        return scheduler, outbox

    return _make
