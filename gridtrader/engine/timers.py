"""Cancellable reconnect-grace timers on the engine clock."""

from typing import Optional


class ReconnectTimers:
    """Deferred player removals keyed by player ID.

    Timers never fire on their own: the tick loop calls ``pop_due`` so
    removals go through the same serialized path as any tick mutation.
    """

    def __init__(self):
        self._deadlines: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._deadlines)

    def schedule(self, player_id: str, deadline: int) -> None:
        """Arm (or re-arm) the removal of ``player_id`` at ``deadline``."""
        self._deadlines[player_id] = deadline

    def cancel(self, player_id: str) -> bool:
        """Disarm a timer. Returns True if one was pending."""
        return self._deadlines.pop(player_id, None) is not None

    def deadline(self, player_id: str) -> Optional[int]:
        return self._deadlines.get(player_id)

    def pop_due(self, now: int) -> list[str]:
        """Remove and return the players whose grace ran out by ``now``."""
        due = [pid for pid, deadline in self._deadlines.items() if now >= deadline]
        for pid in due:
            del self._deadlines[pid]
        return due
