"""Bounded random-walk price process producing one candle per tick."""

import logging
import random
import time
from collections import deque
from typing import Optional

from gridtrader.models import Candle

logger = logging.getLogger(__name__)


class PriceProcess:
    """Synthetic single-instrument price series.

    Each tick advances simulated time by one second and draws a uniform
    close-to-close change scaled by ``volatility``. Wicks extend the body
    by up to ``WICK_SIZE``. On construction the process silently pre-rolls
    ``warmup_ticks`` candles so a fresh room starts with history.
    """

    WICK_SIZE = 0.05

    def __init__(
        self,
        start_price: float = 100.0,
        volatility: float = 0.2,
        warmup_ticks: int = 3600,
        history_size: int = 5000,
        start_time: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the price process.

        Args:
            start_price: Opening price of the first warm-up candle.
            volatility: Width of the uniform per-tick price change.
            warmup_ticks: Candles generated before the first live tick.
            history_size: Maximum candles retained (oldest evicted first).
            start_time: Epoch second before the first warm-up candle.
                Defaults to now minus the warm-up, so history ends at now.
            rng: Random source; pass a seeded instance for reproducible runs.
        """
        if history_size < 1:
            raise ValueError("history_size must be positive")
        self._price = start_price
        self._volatility = volatility
        self._rng = rng or random.Random()
        self._time = int(time.time()) - warmup_ticks if start_time is None else start_time
        self._history: deque[Candle] = deque(maxlen=history_size)

        for _ in range(warmup_ticks):
            self._step()
        logger.debug("Price process warmed up with %d candles, price %.4f", warmup_ticks, self._price)

    @property
    def current_price(self) -> float:
        return self._price

    @property
    def current_time(self) -> int:
        return self._time

    def history(self) -> tuple[Candle, ...]:
        """Return the retained candles, oldest first."""
        return tuple(self._history)

    def latest(self) -> Optional[Candle]:
        return self._history[-1] if self._history else None

    def tick(self) -> Candle:
        """Advance one second and return the new candle."""
        return self._step()

    def _step(self) -> Candle:
        change = (self._rng.random() - 0.5) * self._volatility

        open_price = self._price
        close = open_price + change
        high = max(open_price, close) + self._rng.random() * self.WICK_SIZE
        low = min(open_price, close) - self._rng.random() * self.WICK_SIZE

        self._price = close
        self._time += 1

        candle = Candle(time=self._time, open=open_price, high=high, low=low, close=close)
        self._history.append(candle)
        return candle
