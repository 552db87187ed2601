"""The authoritative tick loop and the single entry point for mutations.

Every tick advances the price, generates a new batch of cells when one
is due, settles matured bets, purges stale bets and cells, and fires
expired reconnect timers, in that order. Requests from participants are
applied under the same lock, so a placement lands entirely before or
entirely after a tick's settlement pass.
"""

import logging
import random
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from gridtrader.config import EngineConfig
from gridtrader.engine.errors import BetRejected, InvalidAmount, InvalidRequest
from gridtrader.engine.settlement import SettlementEngine, SettlementReport
from gridtrader.engine.state import EngineState
from gridtrader.models import (
    BalanceEvent,
    BetPlacedEvent,
    BetResultEvent,
    BetsRemovedEvent,
    Candle,
    CellsAddedEvent,
    CellsRemovedEvent,
    ErrorEvent,
    HistoryEvent,
    JoinRequest,
    LeaveRequest,
    PlaceBetRequest,
    Player,
    PredictionCell,
    PriceEvent,
    parse_request,
)
from gridtrader.publisher import NullPublisher, Publisher

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What one tick produced."""

    candle: Candle
    new_cells: list[PredictionCell] = field(default_factory=list)
    settlement: SettlementReport = field(default_factory=SettlementReport)
    removed_players: list[str] = field(default_factory=list)


class TickScheduler:
    """Drives one engine instance and serializes all access to its state."""

    def __init__(
        self,
        state: EngineState,
        publisher: Optional[Publisher] = None,
        config: Optional[EngineConfig] = None,
    ):
        """Initialize the scheduler.

        Args:
            state: Engine state this scheduler exclusively owns.
            publisher: Sink for outbound events.
            config: Engine constants (tick interval, grace, retention, ...).
        """
        self.state = state
        self.publisher = publisher or NullPublisher()
        self.config = config or EngineConfig()
        self.settlement = SettlementEngine(retention_seconds=self.config.bet_retention)
        self.tick_count = 0
        self._started = False
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        publisher: Optional[Publisher] = None,
        rng: Optional[random.Random] = None,
        start_time: Optional[int] = None,
    ) -> "TickScheduler":
        """Build a scheduler with fresh state."""
        state = EngineState.from_config(config, rng=rng, start_time=start_time)
        return cls(state, publisher=publisher, config=config)

    @property
    def now(self) -> int:
        """Current simulated time (epoch seconds)."""
        return self.state.price.current_time

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Pre-generate the initial runway of cells. Idempotent."""
        with self._lock:
            if self._started:
                return
            price = self.state.price
            cells = self.state.grid.pregenerate(
                price.current_price, price.current_time, self.config.initial_columns
            )
            self._started = True
            if cells:
                self.publisher.publish(CellsAddedEvent(cells=cells))
            logger.info(
                "Room started at price %.4f with %d pre-generated cells",
                price.current_price, len(cells),
            )

    def tick(self) -> TickReport:
        """Run one full tick cycle."""
        with self._lock:
            if not self._started:
                self.start()

            candle = self.state.price.tick()
            self.tick_count += 1
            self.publisher.publish(PriceEvent(candle=candle))

            report = TickReport(candle=candle)
            report.new_cells = self.state.grid.maybe_generate(candle)
            if report.new_cells:
                self.publisher.publish(CellsAddedEvent(cells=report.new_cells))

            report.settlement = self.settlement.run(candle, self.state.ledger, self.state.grid)
            self._publish_settlement(report.settlement)

            for player_id in self.state.timers.pop_due(candle.time):
                logger.info("Reconnect grace expired for %s", player_id)
                self._remove_player(player_id)
                report.removed_players.append(player_id)

            return report

    def _publish_settlement(self, settlement: SettlementReport) -> None:
        credited = set()
        for bet in settlement.resolved:
            self.publisher.publish(
                BetResultEvent(id=bet.id, status=bet.status, payout=bet.payout, cell_id=bet.cell_id),
                recipient=bet.owner_id,
            )
            if bet.status == "won":
                credited.add(bet.owner_id)

        for player_id in credited:
            player = self.state.ledger.get(player_id)
            if player is not None:
                self._publish_balance(player)

        purged_by_owner: dict[str, list[str]] = defaultdict(list)
        for bet in settlement.purged_bets:
            purged_by_owner[bet.owner_id].append(bet.id)
        for owner_id, bet_ids in purged_by_owner.items():
            self.publisher.publish(BetsRemovedEvent(bet_ids=bet_ids), recipient=owner_id)

        if settlement.expired_cells:
            self.publisher.publish(
                CellsRemovedEvent(cell_ids=[cell.id for cell in settlement.expired_cells])
            )

    def run(
        self,
        max_ticks: Optional[int] = None,
        realtime: bool = True,
        stop_event: Optional[threading.Event] = None,
        on_tick: Optional[Callable[[TickReport], None]] = None,
    ) -> int:
        """Run the tick loop.

        Args:
            max_ticks: Stop after this many ticks. None runs until stopped.
            realtime: Pace ticks at ``config.tick_interval`` of wall time.
            stop_event: Set from another thread to stop the loop.
            on_tick: Called with each tick's report.

        Returns:
            Number of ticks run.
        """
        self.start()
        interval = self.config.tick_interval
        next_at = time.monotonic()
        count = 0

        while max_ticks is None or count < max_ticks:
            if stop_event is not None and stop_event.is_set():
                break
            if realtime:
                next_at += interval
                delay = next_at - time.monotonic()
                if delay > 0:
                    if stop_event is not None:
                        if stop_event.wait(delay):
                            break
                    else:
                        time.sleep(delay)

            report = self.tick()
            count += 1
            if on_tick is not None:
                on_tick(report)

        return count

    # ------------------------------------------------------------------
    # Participant requests
    # ------------------------------------------------------------------

    def submit(
        self,
        player_id: str,
        request: Union[JoinRequest, LeaveRequest, PlaceBetRequest, dict[str, Any]],
    ) -> Optional[Union[BetPlacedEvent, ErrorEvent]]:
        """Apply an inbound request from ``player_id``.

        Raw dict payloads are validated into a request variant first; a
        payload that fails validation is rejected back to ``player_id``.

        Returns:
            The response event for a placement or a rejected payload,
            otherwise None.
        """
        if isinstance(request, dict):
            try:
                request = parse_request(request)
            except ValidationError as e:
                logger.info("Rejected malformed request from %s: %d errors", player_id, e.error_count())
                with self._lock:
                    return self._reject(player_id, self._payload_error(e))

        if isinstance(request, PlaceBetRequest):
            return self.place_bet(player_id, request.cell_id, request.amount)
        if isinstance(request, JoinRequest):
            self.join(player_id)
            return None
        if isinstance(request, LeaveRequest):
            self.leave(player_id, consented=request.consented)
            return None
        raise TypeError(f"Unsupported request: {type(request).__name__}")

    def join(self, player_id: str) -> Player:
        """Join a new player or resume a disconnected one.

        The joining player is sent the candle history, the open cells and
        their balance.
        """
        with self._lock:
            player, created = self.state.ledger.join(player_id)
            if self.state.timers.cancel(player_id):
                logger.info("Player %s reconnected", player_id)
            elif not created:
                logger.info("Player %s rejoined", player_id)

            self.publisher.publish(
                HistoryEvent(candles=list(self.state.price.history())), recipient=player_id
            )
            self.publisher.publish(
                CellsAddedEvent(cells=self.state.grid.open_cells()), recipient=player_id
            )
            self._publish_balance(player)
            return player

    def leave(self, player_id: str, consented: bool = False) -> None:
        """Handle a dropped session.

        A deliberate leave removes the player at once; otherwise removal
        is deferred by the reconnect grace window. Pending bets keep
        settling either way until the record is removed.
        """
        with self._lock:
            player = self.state.ledger.mark_disconnected(player_id)
            if player is None:
                return

            if consented or self.config.reconnect_grace == 0:
                logger.info("Player %s left", player_id)
                self._remove_player(player_id)
                return

            deadline = self.now + self.config.reconnect_grace
            self.state.timers.schedule(player_id, deadline)
            logger.info("Player %s disconnected, holding until %d", player_id, deadline)

    def place_bet(self, player_id: str, cell_id: str, amount: float) -> Union[BetPlacedEvent, ErrorEvent]:
        """Place a bet and report the outcome to the player.

        Returns:
            BetPlacedEvent on success, ErrorEvent if the placement was rejected.
        """
        with self._lock:
            try:
                bet = self.state.ledger.place_bet(
                    player_id, cell_id, amount, self.state.grid, now=self.now
                )
            except BetRejected as e:
                logger.info("Rejected bet from %s on %s: %s", player_id, cell_id, e.message)
                return self._reject(player_id, e)

            ack = BetPlacedEvent(id=bet.id, odds=bet.odds, cell_id=bet.cell_id)
            self.publisher.publish(ack, recipient=player_id)
            self._publish_balance(self.state.ledger.get(player_id))
            return ack

    def _payload_error(self, error: ValidationError) -> BetRejected:
        """Map a malformed payload to the rejection reported to its sender."""
        details = error.errors()
        if any("amount" in detail["loc"] for detail in details):
            return InvalidAmount(f"Minimum bet amount is {self.config.minimum_bet:g}")
        first = details[0]
        field_name = ".".join(str(part) for part in first["loc"]) or "payload"
        return InvalidRequest(f"Malformed request: {field_name}: {first['msg']}")

    def _reject(self, player_id: str, rejection: BetRejected) -> ErrorEvent:
        error = ErrorEvent(code=rejection.code, message=rejection.message)
        self.publisher.publish(error, recipient=player_id)
        return error

    def _publish_balance(self, player: Player) -> None:
        self.publisher.publish(
            BalanceEvent(player_id=player.id, balance=player.balance), recipient=player.id
        )

    def _remove_player(self, player_id: str) -> None:
        self.state.timers.cancel(player_id)
        player = self.state.ledger.remove(player_id)
        if player is None:
            return

        orphaned = player.pending_bets()
        if orphaned:
            # TODO: refund or keep settling orphaned stakes once the product decides
            logger.warning(
                "Removed player %s with %d pending bets (%.2f staked, not refunded)",
                player_id, len(orphaned), sum(b.amount for b in orphaned),
            )
        else:
            logger.info("Removed player %s", player_id)
