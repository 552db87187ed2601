"""Player balances and bet placement."""

import logging
import math
from typing import Optional

from gridtrader.engine.errors import (
    CellExpired,
    DuplicateBet,
    InsufficientBalance,
    InvalidAmount,
    UnknownPlayer,
)
from gridtrader.market.grid import GridGenerator
from gridtrader.models import Bet, Player, to_cents

logger = logging.getLogger(__name__)


class Ledger:
    """Owns every Player and, through them, every Bet.

    Stakes are debited at placement and held for the bet's lifetime;
    winnings are credited by the settlement engine. Balances and stakes
    are kept in whole cents.
    """

    def __init__(self, starting_balance: float = 10000.0, minimum_bet: float = 10.0):
        """Initialize the ledger.

        Args:
            starting_balance: Balance given to a newly joined player.
            minimum_bet: Smallest stake accepted.
        """
        self.starting_balance = starting_balance
        self.minimum_bet = minimum_bet
        self._players: dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def players(self) -> list[Player]:
        return list(self._players.values())

    def join(self, player_id: str) -> tuple[Player, bool]:
        """Create a player, or reattach an existing one.

        Returns:
            The player and whether it was newly created.
        """
        existing = self._players.get(player_id)
        if existing is not None:
            existing.connected = True
            return existing, False

        player = Player(id=player_id, balance=to_cents(self.starting_balance))
        self._players[player_id] = player
        logger.info("Player %s joined with balance %.2f", player_id, player.balance)
        return player, True

    def mark_disconnected(self, player_id: str) -> Optional[Player]:
        player = self._players.get(player_id)
        if player is not None:
            player.connected = False
        return player

    def remove(self, player_id: str) -> Optional[Player]:
        """Delete a player record along with all of its bets."""
        return self._players.pop(player_id, None)

    def place_bet(
        self,
        player_id: str,
        cell_id: str,
        amount: float,
        grid: GridGenerator,
        now: Optional[int] = None,
    ) -> Bet:
        """Validate and record a bet, escrowing the stake.

        Checks run in a fixed order and nothing is mutated unless all pass.

        Args:
            player_id: Player placing the bet.
            cell_id: Open cell being wagered on.
            amount: Amount to stake, rounded to cents.
            grid: Grid holding the open cells.
            now: Current simulated time. Cells whose end time has been
                reached no longer accept bets.

        Returns:
            The new pending Bet.

        Raises:
            InvalidAmount: If the amount is below the minimum or not finite.
            UnknownPlayer: If the player has no record.
            CellExpired: If the cell is not open or has matured.
            DuplicateBet: If the player already bet on the cell.
            InsufficientBalance: If the player cannot cover the stake.
        """
        if not math.isfinite(amount) or to_cents(amount) < self.minimum_bet:
            raise InvalidAmount(f"Minimum bet amount is {self.minimum_bet:g}")

        player = self._players.get(player_id)
        if player is None:
            raise UnknownPlayer("No active session for this player")

        cell = grid.get(cell_id)
        if cell is None or (now is not None and now >= cell.end_time):
            raise CellExpired("Prediction cell not found or expired")

        if player.has_bet_on(cell_id):
            raise DuplicateBet("You have already placed a bet on this cell")

        stake = to_cents(amount)
        if player.balance < stake:
            raise InsufficientBalance(
                f"Insufficient balance. Required: {stake:.2f}, Available: {player.balance:.2f}"
            )

        bet = Bet.from_cell(cell, owner_id=player_id, amount=stake)
        player.balance = to_cents(player.balance - stake)
        player.bets[bet.id] = bet

        logger.info(
            "Bet %s placed by %s on %s: amount %.2f odds %.2f, balance now %.2f",
            bet.id, player_id, cell_id, stake, bet.odds, player.balance,
        )
        return bet
