"""Inbound requests and outbound events exchanged with the transport layer.

Both sides are closed sets of tagged variants discriminated on ``type``.
Outbound events serialize to camelCase JSON-safe dicts via ``to_message``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from gridtrader.models.bet import BetStatus
from gridtrader.models.candle import Candle
from gridtrader.models.cell import PredictionCell


class _Message(BaseModel):
    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    def to_message(self) -> dict[str, Any]:
        """Serialize for the wire."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Inbound requests
# ============================================================================

class JoinRequest(_Message):
    """A participant joining or reconnecting."""

    type: Literal["join"] = "join"


class LeaveRequest(_Message):
    """A participant's session dropping.

    ``consented`` marks a deliberate leave, which skips the reconnect grace.
    """

    type: Literal["leave"] = "leave"
    consented: bool = Field(default=False, description="Deliberate, acknowledged leave")


class PlaceBetRequest(_Message):
    """Stake ``amount`` on the open cell ``cell_id``."""

    type: Literal["place_bet"] = "place_bet"
    cell_id: str = Field(..., description="Target cell ID")
    amount: float = Field(..., description="Amount to stake")


Request = Annotated[
    Union[JoinRequest, LeaveRequest, PlaceBetRequest],
    Field(discriminator="type"),
]

_request_adapter = TypeAdapter(Request)


def parse_request(payload: dict[str, Any]) -> Union[JoinRequest, LeaveRequest, PlaceBetRequest]:
    """Validate a raw payload into one of the request variants.

    Raises:
        pydantic.ValidationError: If the payload matches no variant.
    """
    return _request_adapter.validate_python(payload)


# ============================================================================
# Outbound events
# ============================================================================

class HistoryEvent(_Message):
    """Full candle backlog, sent to a participant on join."""

    type: Literal["history"] = "history"
    candles: list[Candle]


class PriceEvent(_Message):
    """Newest candle, broadcast every tick."""

    type: Literal["price"] = "price"
    candle: Candle


class CellsAddedEvent(_Message):
    type: Literal["cells_added"] = "cells_added"
    cells: list[PredictionCell]


class CellsRemovedEvent(_Message):
    type: Literal["cells_removed"] = "cells_removed"
    cell_ids: list[str]


class BetPlacedEvent(_Message):
    """Placement acknowledgment."""

    type: Literal["bet_placed"] = "bet_placed"
    id: str
    odds: float
    cell_id: str


class BetResultEvent(_Message):
    """Terminal resolution of a bet."""

    type: Literal["bet_result"] = "bet_result"
    id: str
    status: BetStatus
    payout: float
    cell_id: str


class BetsRemovedEvent(_Message):
    type: Literal["bets_removed"] = "bets_removed"
    bet_ids: list[str]


class BalanceEvent(_Message):
    type: Literal["balance"] = "balance"
    player_id: str
    balance: float


class ErrorEvent(_Message):
    """A rejected request, with a stable code and readable reason."""

    type: Literal["error"] = "error"
    code: str
    message: str


Event = Annotated[
    Union[
        HistoryEvent,
        PriceEvent,
        CellsAddedEvent,
        CellsRemovedEvent,
        BetPlacedEvent,
        BetResultEvent,
        BetsRemovedEvent,
        BalanceEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]
