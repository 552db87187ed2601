"""Tests for wire requests and events.

**Feature: grid-trading-engine**
"""

import pytest
from pydantic import ValidationError

from gridtrader.models import (
    Bet,
    BetPlacedEvent,
    BetResultEvent,
    Candle,
    CellsAddedEvent,
    ErrorEvent,
    JoinRequest,
    LeaveRequest,
    PlaceBetRequest,
    PredictionCell,
    PriceEvent,
    parse_request,
)


class TestRequests:
    """Inbound payloads parse into exactly one request variant."""

    def test_place_bet_camel_case(self):
        request = parse_request({"type": "place_bet", "cellId": "abc", "amount": 25})
        assert isinstance(request, PlaceBetRequest)
        assert request.cell_id == "abc"
        assert request.amount == 25

    def test_place_bet_snake_case(self):
        request = parse_request({"type": "place_bet", "cell_id": "abc", "amount": "25.5"})
        assert request.amount == 25.5

    def test_join_and_leave(self):
        assert isinstance(parse_request({"type": "join"}), JoinRequest)
        leave = parse_request({"type": "leave"})
        assert isinstance(leave, LeaveRequest)
        assert leave.consented is False

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"type": "cancel_bet", "cellId": "abc"},
            {"type": "place_bet", "amount": 10},
            {"type": "place_bet", "cellId": "abc", "amount": "lots"},
        ],
    )
    def test_malformed_payloads_rejected(self, payload):
        with pytest.raises(ValidationError):
            parse_request(payload)


class TestEvents:
    """Outbound events serialize to camelCase JSON-safe dicts."""

    def test_bet_placed_message(self):
        message = BetPlacedEvent(id="b1", odds=1.9, cell_id="c1").to_message()
        assert message == {"type": "bet_placed", "id": "b1", "odds": 1.9, "cellId": "c1"}

    def test_bet_result_message(self):
        message = BetResultEvent(id="b1", status="won", payout=190.0, cell_id="c1").to_message()
        assert message == {"type": "bet_result", "id": "b1", "status": "won", "payout": 190.0, "cellId": "c1"}

    def test_bet_result_status_is_closed(self):
        with pytest.raises(ValidationError):
            BetResultEvent(id="b1", status="void", payout=0, cell_id="c1")

    def test_price_message(self):
        candle = Candle(time=5, open=1.0, high=2.0, low=0.5, close=1.5)
        message = PriceEvent(candle=candle).to_message()
        assert message == {
            "type": "price",
            "candle": {"time": 5, "open": 1.0, "high": 2.0, "low": 0.5, "close": 1.5},
        }

    def test_cells_message_uses_camel_case(self):
        cell = PredictionCell(
            id="c1", start_time=0, end_time=30, low_price=99.0, high_price=100.0,
            probability=0.4, odds=2.38,
        )
        message = CellsAddedEvent(cells=[cell]).to_message()
        assert message["cells"][0] == {
            "id": "c1", "startTime": 0, "endTime": 30, "lowPrice": 99.0,
            "highPrice": 100.0, "probability": 0.4, "odds": 2.38,
        }

    def test_error_message(self):
        message = ErrorEvent(code="invalid_amount", message="Minimum bet amount is 10").to_message()
        assert message["type"] == "error"
        assert message["message"] == "Minimum bet amount is 10"


class TestBetResolution:
    """Payouts are credited in whole cents."""

    def _bet(self, amount: float, odds: float) -> Bet:
        cell = PredictionCell(
            id="c1", start_time=0, end_time=30, low_price=99.0, high_price=100.0,
            probability=0.8, odds=odds,
        )
        return Bet.from_cell(cell, owner_id="alice", amount=amount)

    def test_won_payout_rounded_to_cents(self):
        bet = self._bet(10.1, 1.13)
        assert bet.resolve(True) == 11.41
        assert (bet.status, bet.payout) == ("won", 11.41)

    def test_lost_payout_is_zero(self):
        bet = self._bet(10.1, 1.13)
        assert bet.resolve(False) == 0
        assert bet.status == "lost"
