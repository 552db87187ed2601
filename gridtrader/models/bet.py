"""Bet data model."""

import uuid
from typing import Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from gridtrader.models.cell import PredictionCell

BetStatus = Literal["pending", "won", "lost"]


def to_cents(value: float) -> float:
    """Round a money amount to whole cents."""
    return round(value, 2)


class Bet(BaseModel):
    """A participant's stake on one prediction cell.

    Bounds and odds are copied from the cell at placement, so a bet
    settles on its own snapshot after the cell itself has expired.
    """

    id: str = Field(..., min_length=1, description="Unique bet identifier")
    cell_id: str = Field(..., description="Originating cell ID")
    start_time: int = Field(..., description="Window start (epoch seconds)")
    end_time: int = Field(..., description="Maturity (epoch seconds)")
    low_price: float = Field(..., description="Inclusive lower price bound")
    high_price: float = Field(..., description="Exclusive upper price bound")
    amount: float = Field(..., gt=0, description="Staked amount")
    odds: float = Field(..., gt=0, description="Locked payout multiplier")
    payout: float = Field(default=0.0, ge=0, description="Amount credited on settlement")
    status: BetStatus = Field(default="pending", description="Settlement status")
    owner_id: str = Field(..., description="Owning player ID")

    model_config = {"validate_assignment": True, "alias_generator": to_camel, "populate_by_name": True}

    @classmethod
    def from_cell(cls, cell: PredictionCell, owner_id: str, amount: float) -> "Bet":
        """Create a pending bet snapshotting a cell's bounds and odds.

        Args:
            cell: Cell being wagered on.
            owner_id: Player placing the bet.
            amount: Staked amount.

        Returns:
            New pending Bet.
        """
        return cls(
            id=uuid.uuid4().hex[:12],
            cell_id=cell.id,
            start_time=cell.start_time,
            end_time=cell.end_time,
            low_price=cell.low_price,
            high_price=cell.high_price,
            amount=amount,
            odds=cell.odds,
            owner_id=owner_id,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    def wins_at(self, price: float) -> bool:
        """Check the half-open win condition [low_price, high_price)."""
        return self.low_price <= price < self.high_price

    def resolve(self, won: bool) -> float:
        """Move the bet to its terminal status.

        Args:
            won: Whether the realized price landed in the bet's interval.

        Returns:
            The payout in whole cents (0 for a loss).

        Raises:
            RuntimeError: If the bet is already settled.
        """
        if not self.is_pending:
            raise RuntimeError(f"bet {self.id} already settled as {self.status}")
        if won:
            self.payout = to_cents(self.amount * self.odds)
            self.status = "won"
        else:
            self.payout = 0.0
            self.status = "lost"
        return self.payout
