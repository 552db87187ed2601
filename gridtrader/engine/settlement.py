"""Resolution of matured bets and cleanup of stale state."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from gridtrader.engine.ledger import Ledger
from gridtrader.market.grid import GridGenerator
from gridtrader.models import Bet, Candle, Player, PredictionCell, to_cents

logger = logging.getLogger(__name__)


@dataclass
class SettlementReport:
    """Everything one settlement pass changed."""

    resolved: list[Bet] = field(default_factory=list)
    purged_bets: list[Bet] = field(default_factory=list)
    expired_cells: list[PredictionCell] = field(default_factory=list)


class SettlementEngine:
    """Settles pending bets at maturity against the realized close.

    A bet wins when the close at or after its end time lies in
    ``[low_price, high_price)``. Settled bets are kept for
    ``retention_seconds`` past maturity, then purged.
    """

    def __init__(self, retention_seconds: int = 60):
        self.retention_seconds = retention_seconds

    def settle(self, candle: Candle, players: Iterable[Player]) -> list[Bet]:
        """Resolve every pending bet that has matured by ``candle.time``.

        Args:
            candle: Newest realized candle.
            players: Players whose bets are checked.

        Returns:
            Bets resolved in this pass.
        """
        resolved = []
        for player in players:
            for bet in player.bets.values():
                if not bet.is_pending or candle.time < bet.end_time:
                    continue

                payout = bet.resolve(bet.wins_at(candle.close))
                if bet.status == "won":
                    player.balance = to_cents(player.balance + payout)
                    logger.info("Bet %s WON, payout %.2f to %s", bet.id, payout, player.id)
                else:
                    logger.info("Bet %s LOST", bet.id)
                resolved.append(bet)
        return resolved

    def purge(self, now: int, players: Iterable[Player]) -> list[Bet]:
        """Drop settled bets whose retention window has passed."""
        purged = []
        for player in players:
            stale = [
                bet for bet in player.bets.values()
                if not bet.is_pending and now > bet.end_time + self.retention_seconds
            ]
            for bet in stale:
                del player.bets[bet.id]
            purged.extend(stale)
        return purged

    def run(self, candle: Candle, ledger: Ledger, grid: GridGenerator) -> SettlementReport:
        """Settle, purge old bets and expire cells for one tick."""
        players = ledger.players()
        report = SettlementReport()
        report.resolved = self.settle(candle, players)
        report.purged_bets = self.purge(candle.time, players)
        report.expired_cells = grid.expire(candle.time)
        return report
