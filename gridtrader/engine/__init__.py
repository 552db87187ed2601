"""Game engine: ledger, settlement and the tick loop."""

from gridtrader.engine.errors import (
    BetRejected,
    CellExpired,
    DuplicateBet,
    InsufficientBalance,
    InvalidAmount,
    InvalidRequest,
    UnknownPlayer,
)
from gridtrader.engine.ledger import Ledger
from gridtrader.engine.scheduler import TickReport, TickScheduler
from gridtrader.engine.settlement import SettlementEngine, SettlementReport
from gridtrader.engine.state import EngineState
from gridtrader.engine.timers import ReconnectTimers

__all__ = [
    "BetRejected",
    "CellExpired",
    "DuplicateBet",
    "EngineState",
    "InsufficientBalance",
    "InvalidAmount",
    "InvalidRequest",
    "Ledger",
    "ReconnectTimers",
    "SettlementEngine",
    "SettlementReport",
    "TickReport",
    "TickScheduler",
    "UnknownPlayer",
]
