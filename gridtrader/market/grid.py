"""Prediction grid generation and open-cell bookkeeping."""

import logging
import math
import uuid
from typing import Optional

from gridtrader.market.pricing import PricingModel
from gridtrader.models import Candle, PredictionCell

logger = logging.getLogger(__name__)


class GridGenerator:
    """Derives ladders of priced cells around the current price.

    Owns the set of open cells: cells are only ever added by ``generate``
    and removed by ``expire``.
    """

    def __init__(
        self,
        pricing: PricingModel,
        price_height: float = 1.0,
        layers: int = 12,
        duration: int = 30,
        generation_interval: int = 30,
    ):
        """Initialize the grid generator.

        Args:
            pricing: Model used to price every cell.
            price_height: Height of each cell in price units.
            layers: Number of cells per batch (vertical ladder size).
            duration: Lifetime of each cell in seconds.
            generation_interval: Seconds of simulated time between batches.
        """
        if price_height <= 0:
            raise ValueError("price_height must be positive")
        if layers < 1:
            raise ValueError("layers must be at least 1")
        if duration < 1 or generation_interval < 1:
            raise ValueError("duration and generation_interval must be positive")
        self.pricing = pricing
        self.price_height = price_height
        self.layers = layers
        self.duration = duration
        self.generation_interval = generation_interval
        self.last_generation_time: Optional[int] = None
        self._cells: dict[str, PredictionCell] = {}

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell_id: str) -> bool:
        return cell_id in self._cells

    def get(self, cell_id: str) -> Optional[PredictionCell]:
        return self._cells.get(cell_id)

    def open_cells(self) -> list[PredictionCell]:
        return list(self._cells.values())

    def add(self, cell: PredictionCell) -> None:
        """Register a cell as open."""
        if cell.id in self._cells:
            raise ValueError(f"cell {cell.id} is already open")
        self._cells[cell.id] = cell

    def ladder(self, current_price: float) -> list[tuple[float, float]]:
        """Compute the ``(low, high)`` bounds of one batch, top row first.

        The snapped base price sits in the middle of the ladder: half the
        layers lie above it and half below.
        """
        h = self.price_height
        base = math.floor(current_price / h) * h
        top = self.layers // 2 - 1

        bounds = []
        for i in range(self.layers):
            low = round(base + (top - i) * h, 8)
            bounds.append((low, round(low + h, 8)))
        return bounds

    def generate(self, current_price: float, current_time: int) -> list[PredictionCell]:
        """Create, price and register one batch of cells.

        Every layer gets a cell, however extreme its odds.

        Args:
            current_price: Price the batch is centred and priced on.
            current_time: Start time of the batch's window.

        Returns:
            The new cells, top row first.
        """
        end_time = current_time + self.duration

        batch = []
        for low, high in self.ladder(current_price):
            probability, odds = self.pricing.price_interval(current_price, low, high, self.duration)
            cell = PredictionCell(
                id=uuid.uuid4().hex[:12],
                start_time=current_time,
                end_time=end_time,
                low_price=low,
                high_price=high,
                probability=probability,
                odds=odds,
            )
            self.add(cell)
            batch.append(cell)

        logger.debug("Generated %d cells for [%d, %d) at price %.4f", len(batch), current_time, end_time, current_price)
        return batch

    def pregenerate(self, current_price: float, current_time: int, columns: int) -> list[PredictionCell]:
        """Generate a runway of ``columns`` consecutive batches.

        The generation clock is fast-forwarded to the last pre-generated
        column so live generation picks up right after it.
        """
        cells = []
        for i in range(columns):
            cells.extend(self.generate(current_price, current_time + i * self.generation_interval))
        if columns > 0:
            self.last_generation_time = current_time + (columns - 1) * self.generation_interval
        return cells

    def is_due(self, now: int) -> bool:
        if self.last_generation_time is None:
            return True
        return now - self.last_generation_time >= self.generation_interval

    def maybe_generate(self, candle: Candle) -> list[PredictionCell]:
        """Generate a batch from ``candle`` if the cadence says one is due.

        Returns:
            The new cells, or an empty list if no batch was due.
        """
        if not self.is_due(candle.time):
            return []
        self.last_generation_time = candle.time
        return self.generate(candle.close, candle.time)

    def expire(self, now: int) -> list[PredictionCell]:
        """Remove and return every cell whose window ended before ``now``."""
        expired = [cell for cell in self._cells.values() if now > cell.end_time]
        for cell in expired:
            del self._cells[cell.id]
        return expired
