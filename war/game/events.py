"""Events raised while resolving moves."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """What happened at the table."""

    GAME_STARTED = "game_started"
    GAME_ENDED = "game_ended"

    # One draw per side
    CARDS_DRAWN = "cards_drawn"
    ROUND_WON = "round_won"

    WAR_STARTED = "war_started"
    WAR_EXTENDED = "war_extended"
    WAR_RESOLVED = "war_resolved"
    FORCED_WAR = "forced_war"
    WAR_FORFEITED = "war_forfeited"

    NUKE_USED = "nuke_used"

    # Move refused, state unchanged
    INVALID_ACTION = "invalid_action"
    COOLDOWN_ACTIVE = "cooldown_active"
    STATE_RESET = "state_reset"

    INVARIANT_VIOLATION = "invariant_violation"

    @property
    def is_rejection(self) -> bool:
        return self in _REJECTIONS


_REJECTIONS = frozenset(
    {EventType.INVALID_ACTION, EventType.COOLDOWN_ACTIVE, EventType.STATE_RESET}
)


@dataclass(frozen=True)
class GameEvent:
    """A single occurrence with its payload."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        details = " ".join(f"{key}={value}" for key, value in self.data.items())
        return f"{self.event_type.value} {details}".rstrip()


EventHandler = Callable[[GameEvent], None]


def log_event(event: GameEvent) -> None:
    """Handler that writes events to the module logger."""
    if event.event_type is EventType.INVARIANT_VIOLATION:
        logger.error("%s", event)
    elif event.event_type.is_rejection:
        logger.info("%s", event)
    else:
        logger.debug("%s", event)


class EventEmitter:
    """
    Fan-out of game events to subscribers.

    Handlers subscribe to one event type, or to everything with None. A
    bounded history is kept for inspection; pass ``max_history=None`` to
    keep every event, e.g. for a single move.
    """

    def __init__(self, max_history: int | None = 1000) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=max_history)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Register a handler.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type (None delivers all)
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Record an event and deliver it to typed, then catch-all, handlers."""
        self._event_history.append(event)
        for handler in (*self._handlers.get(event.event_type, ()), *self._handlers.get(None, ())):
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data and emit it."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Events emitted so far, oldest first."""
        return list(self._event_history)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        """History filtered to one event type."""
        return [e for e in self._event_history if e.event_type is event_type]
