"""Player data model."""

from pydantic import BaseModel, Field

from gridtrader.models.bet import Bet


class Player(BaseModel):
    """A participant's balance and the bets they own."""

    id: str = Field(..., min_length=1, description="Player/session ID")
    balance: float = Field(..., description="Available balance")
    connected: bool = Field(default=True, description="Whether a session is attached")
    bets: dict[str, Bet] = Field(default_factory=dict, description="Bets keyed by bet ID")

    def has_bet_on(self, cell_id: str) -> bool:
        return any(b.cell_id == cell_id for b in self.bets.values())

    def pending_bets(self) -> list[Bet]:
        return [b for b in self.bets.values() if b.is_pending]
