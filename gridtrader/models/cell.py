"""Prediction cell data model."""

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class PredictionCell(BaseModel):
    """A price interval x time window offered for wagering.

    Probability and odds are locked when the cell is generated.
    """

    id: str = Field(..., min_length=1, description="Unique cell identifier")
    start_time: int = Field(..., description="Window start (epoch seconds)")
    end_time: int = Field(..., description="Window end / maturity (epoch seconds)")
    low_price: float = Field(..., description="Inclusive lower price bound")
    high_price: float = Field(..., description="Exclusive upper price bound")
    probability: float = Field(..., ge=0, le=1, description="Model win probability")
    odds: float = Field(..., gt=0, description="Payout multiplier")

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "PredictionCell":
        if self.end_time <= self.start_time:
            raise ValueError("cell must end after it starts")
        if self.high_price <= self.low_price:
            raise ValueError("cell high price must exceed its low price")
        return self

    def contains(self, price: float) -> bool:
        """Check whether a price falls in [low_price, high_price)."""
        return self.low_price <= price < self.high_price
