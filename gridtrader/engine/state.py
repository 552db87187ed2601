"""The owned aggregate of all state for one engine instance."""

import random
from dataclasses import dataclass, field
from typing import Optional

from gridtrader.config import EngineConfig
from gridtrader.engine.ledger import Ledger
from gridtrader.engine.timers import ReconnectTimers
from gridtrader.market import GridGenerator, PriceProcess, PricingModel


@dataclass
class EngineState:
    """Price history, open cells, players and their bets, and grace timers."""

    price: PriceProcess
    grid: GridGenerator
    ledger: Ledger
    timers: ReconnectTimers = field(default_factory=ReconnectTimers)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        rng: Optional[random.Random] = None,
        start_time: Optional[int] = None,
    ) -> "EngineState":
        """Build fresh state from configuration.

        Args:
            config: Engine constants.
            rng: Random source for the price process. Seeded from
                ``config.seed`` when not given.
            start_time: Epoch second before the first warm-up candle.
        """
        if rng is None:
            rng = random.Random(config.seed)

        pricing = PricingModel(
            sigma=config.sigma,
            house_edge=config.house_edge,
            seconds_per_year=config.seconds_per_year,
        )
        return cls(
            price=PriceProcess(
                start_price=config.start_price,
                volatility=config.volatility,
                warmup_ticks=config.warmup_ticks,
                history_size=config.history_size,
                start_time=start_time,
                rng=rng,
            ),
            grid=GridGenerator(
                pricing,
                price_height=config.cell_price_height,
                layers=config.layers,
                duration=config.cell_duration,
                generation_interval=config.generation_interval,
            ),
            ledger=Ledger(
                starting_balance=config.starting_balance,
                minimum_bet=config.minimum_bet,
            ),
        )
