"""Test helpers for GridTrader."""

import random

START_TIME = 1_700_000_000


class FlatRandom(random.Random):
    """Random source that always draws 0.5, so the price never moves."""

    def random(self) -> float:
        return 0.5
