"""Data models for GridTrader."""

from gridtrader.models.candle import Candle
from gridtrader.models.cell import PredictionCell
from gridtrader.models.bet import Bet, BetStatus, to_cents
from gridtrader.models.player import Player
from gridtrader.models.events import (
    BalanceEvent,
    BetPlacedEvent,
    BetResultEvent,
    BetsRemovedEvent,
    CellsAddedEvent,
    CellsRemovedEvent,
    ErrorEvent,
    Event,
    HistoryEvent,
    JoinRequest,
    LeaveRequest,
    PlaceBetRequest,
    PriceEvent,
    Request,
    parse_request,
)

__all__ = [
    "BalanceEvent",
    "Bet",
    "BetPlacedEvent",
    "BetResultEvent",
    "BetStatus",
    "BetsRemovedEvent",
    "Candle",
    "CellsAddedEvent",
    "CellsRemovedEvent",
    "ErrorEvent",
    "Event",
    "HistoryEvent",
    "JoinRequest",
    "LeaveRequest",
    "PlaceBetRequest",
    "Player",
    "PredictionCell",
    "PriceEvent",
    "Request",
    "parse_request",
    "to_cents",
]
