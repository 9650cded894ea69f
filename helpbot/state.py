from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

SEEN_EVENTS_LIMIT = 1000


@dataclass
class BotState:
    """Mutable runtime state (ephemeral, not persisted)."""

    startup_time: float = 0.0
    sync_count: int = 0
    seen_event_ids: deque[str] = field(
        default_factory=lambda: deque(maxlen=SEEN_EVENTS_LIMIT)
    )
    direct_rooms: dict[str, str] = field(default_factory=dict)

    def mark_event_seen(self, event_id: str) -> bool:
        """Remember an event ID. Returns False if it was already seen."""
        if event_id in self.seen_event_ids:
            return False
        self.seen_event_ids.append(event_id)
        return True
