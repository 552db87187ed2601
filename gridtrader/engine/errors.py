"""Rejections of participant requests and bet placements.

All are participant-caused and recoverable; a rejected placement leaves
balances and bets untouched.
"""


class BetRejected(Exception):
    """Base class for rejected bet placements."""

    code = "rejected"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(BetRejected):
    code = "invalid_amount"


class UnknownPlayer(BetRejected):
    code = "unknown_player"


class CellExpired(BetRejected):
    code = "cell_expired"


class DuplicateBet(BetRejected):
    code = "duplicate_bet"


class InsufficientBalance(BetRejected):
    code = "insufficient_balance"


class InvalidRequest(BetRejected):
    code = "invalid_request"
