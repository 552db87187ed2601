"""Tests for bet placement on the ledger.

**Feature: grid-trading-engine**
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gridtrader.engine import (
    CellExpired,
    DuplicateBet,
    InsufficientBalance,
    InvalidAmount,
    Ledger,
    UnknownPlayer,
)
from gridtrader.market import GridGenerator, PricingModel
from gridtrader.models import PredictionCell, to_cents


@pytest.fixture
def grid():
    generator = GridGenerator(PricingModel())
    generator.add(PredictionCell(
        id="cell-1", start_time=1000, end_time=1030, low_price=99.5, high_price=100.5,
        probability=0.5, odds=1.8,
    ))
    generator.add(PredictionCell(
        id="cell-2", start_time=1000, end_time=1030, low_price=100.5, high_price=101.5,
        probability=0.2, odds=4.75,
    ))
    return generator


@pytest.fixture
def ledger():
    ledger = Ledger()
    ledger.join("alice")
    return ledger


class TestPlacement:
    """A valid placement escrows the stake and snapshots the cell."""

    def test_place_bet_debits_and_snapshots(self, ledger, grid):
        bet = ledger.place_bet("alice", "cell-1", 100, grid)
        player = ledger.get("alice")

        assert player.balance == 9900
        assert player.bets == {bet.id: bet}
        assert bet.status == "pending"
        assert bet.payout == 0
        assert bet.owner_id == "alice"
        assert (bet.cell_id, bet.low_price, bet.high_price, bet.odds) == ("cell-1", 99.5, 100.5, 1.8)
        assert (bet.start_time, bet.end_time) == (1000, 1030)

    def test_bets_on_different_cells(self, ledger, grid):
        ledger.place_bet("alice", "cell-1", 100, grid)
        ledger.place_bet("alice", "cell-2", 50, grid)
        assert ledger.get("alice").balance == 9850
        assert len(ledger.get("alice").bets) == 2

    def test_whole_balance_can_be_staked(self, ledger, grid):
        ledger.place_bet("alice", "cell-1", 10000, grid)
        assert ledger.get("alice").balance == 0

    def test_stake_held_in_cents(self, ledger, grid):
        bet = ledger.place_bet("alice", "cell-1", 25.126, grid)
        assert bet.amount == 25.13
        assert ledger.get("alice").balance == 9974.87


class TestRejections:
    """
    **Feature: grid-trading-engine, Property 7: All-or-Nothing Placement**

    *For any* rejected placement, the balance and bet set are unchanged.
    """

    def test_below_minimum_is_invalid_amount(self, ledger, grid):
        with pytest.raises(InvalidAmount):
            ledger.place_bet("alice", "cell-1", 5, grid)
        assert ledger.get("alice").balance == 10000
        assert ledger.get("alice").bets == {}

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), 0, -10])
    def test_non_finite_or_non_positive_amount(self, ledger, grid, amount):
        with pytest.raises(InvalidAmount):
            ledger.place_bet("alice", "cell-1", amount, grid)

    def test_unknown_player(self, ledger, grid):
        with pytest.raises(UnknownPlayer):
            ledger.place_bet("bob", "cell-1", 100, grid)

    def test_expired_cell(self, ledger, grid):
        grid.expire(1031)
        with pytest.raises(CellExpired):
            ledger.place_bet("alice", "cell-1", 100, grid)

    def test_matured_cell_still_listed(self, ledger, grid):
        with pytest.raises(CellExpired):
            ledger.place_bet("alice", "cell-1", 100, grid, now=1030)
        assert ledger.get("alice").balance == 10000
        assert ledger.place_bet("alice", "cell-1", 100, grid, now=1029).cell_id == "cell-1"

    def test_duplicate_bet(self, ledger, grid):
        ledger.place_bet("alice", "cell-1", 100, grid)
        with pytest.raises(DuplicateBet):
            ledger.place_bet("alice", "cell-1", 100, grid)
        assert ledger.get("alice").balance == 9900
        assert len(ledger.get("alice").bets) == 1

    def test_insufficient_balance(self, ledger, grid):
        with pytest.raises(InsufficientBalance):
            ledger.place_bet("alice", "cell-1", 10000.01, grid)
        assert ledger.get("alice").balance == 10000

    def test_checks_run_in_order(self, ledger, grid):
        # amount before player, player before cell, cell before duplicate
        with pytest.raises(InvalidAmount):
            ledger.place_bet("nobody", "missing", 1, grid)
        with pytest.raises(UnknownPlayer):
            ledger.place_bet("nobody", "missing", 100, grid)
        ledger.place_bet("alice", "cell-1", 100, grid)
        with pytest.raises(CellExpired):
            ledger.place_bet("alice", "missing", 100000, grid)
        with pytest.raises(DuplicateBet):
            ledger.place_bet("alice", "cell-1", 100000, grid)

    @given(amounts=st.lists(st.floats(min_value=0, max_value=20000, allow_nan=False), min_size=1, max_size=30))
    @settings(max_examples=50)
    def test_balance_never_negative(self, amounts: list[float]):
        generator = GridGenerator(PricingModel())
        ledger = Ledger()
        ledger.join("p")
        staked = 0.0
        for amount in amounts:
            cell = generator.generate(100.0, 0)[0]
            try:
                bet = ledger.place_bet("p", cell.id, amount, generator)
                staked += bet.amount
            except (InvalidAmount, InsufficientBalance):
                pass
            assert ledger.get("p").balance >= 0
        assert ledger.get("p").balance == to_cents(10000 - staked)


class TestPlayers:
    """Join, disconnect and removal of player records."""

    def test_join_creates_with_starting_balance(self):
        ledger = Ledger(starting_balance=500)
        player, created = ledger.join("p1")
        assert created
        assert player.balance == 500
        assert player.connected

    def test_rejoin_keeps_record(self, ledger, grid):
        ledger.place_bet("alice", "cell-1", 100, grid)
        ledger.mark_disconnected("alice")
        assert not ledger.get("alice").connected

        player, created = ledger.join("alice")
        assert not created
        assert player.connected
        assert player.balance == 9900
        assert len(player.bets) == 1

    def test_remove(self, ledger):
        removed = ledger.remove("alice")
        assert removed.id == "alice"
        assert ledger.get("alice") is None
        assert ledger.remove("alice") is None
        assert ledger.mark_disconnected("alice") is None

    def test_error_codes(self):
        assert InvalidAmount("x").code == "invalid_amount"
        assert UnknownPlayer("x").code == "unknown_player"
        assert CellExpired("x").code == "cell_expired"
        assert DuplicateBet("x").code == "duplicate_bet"
        assert InsufficientBalance("x").code == "insufficient_balance"
