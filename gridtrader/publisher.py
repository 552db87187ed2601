"""Outbound event publishers.

The engine pushes discrete events to a ``Publisher`` and never assumes
anyone is listening. ``recipient=None`` means broadcast to every viewer.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console

from gridtrader.models import Event


class Publisher(ABC):
    """Abstract sink for engine events."""

    @abstractmethod
    def publish(self, event: Event, recipient: Optional[str] = None) -> None:
        """Deliver an event.

        Args:
            event: Event to deliver.
            recipient: Target player ID, or None to broadcast.
        """
        pass


class NullPublisher(Publisher):
    """Discards every event."""

    def publish(self, event: Event, recipient: Optional[str] = None) -> None:
        pass


class Outbox(Publisher):
    """Collects events in memory for a transport (or a test) to drain."""

    def __init__(self):
        self.events: list[tuple[Optional[str], Event]] = []

    def publish(self, event: Event, recipient: Optional[str] = None) -> None:
        self.events.append((recipient, event))

    def drain(self) -> list[tuple[Optional[str], Event]]:
        """Return and clear the collected events."""
        events, self.events = self.events, []
        return events

    def of_type(self, event_type: str, recipient: Optional[str] = None) -> list[Event]:
        """Collected events of one type, optionally for one recipient."""
        return [
            event for to, event in self.events
            if event.type == event_type and (recipient is None or to == recipient)
        ]


class ConsolePublisher(Publisher):
    """Prints events as JSON lines, skipping the noisy ones."""

    def __init__(self, console: Optional[Console] = None, include: Optional[set[str]] = None):
        """Initialize the console publisher.

        Args:
            console: Rich console to print to.
            include: Event types to print. Defaults to bet lifecycle and errors.
        """
        self._console = console or Console()
        self._include = include or {"bet_placed", "bet_result", "error"}

    def publish(self, event: Event, recipient: Optional[str] = None) -> None:
        if event.type not in self._include:
            return
        target = recipient or "*"
        self._console.print(f"[dim]-> {target}[/dim] {json.dumps(event.to_message())}", highlight=False)
