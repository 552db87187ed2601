"""Candle (OHLC) data model."""

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class Candle(BaseModel):
    """Represents a single one-second OHLC sample of the synthetic price."""

    time: int = Field(..., description="Candle time in epoch seconds")
    open: float = Field(..., description="Opening price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Closing price")

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_range(self) -> "Candle":
        if self.high < max(self.open, self.close):
            raise ValueError(f"high {self.high} below body of candle at {self.time}")
        if self.low > min(self.open, self.close):
            raise ValueError(f"low {self.low} above body of candle at {self.time}")
        return self
