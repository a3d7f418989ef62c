"""Simple in-process event bus a UI layer can subscribe to."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("ig.events")

EventHandler = Callable[[dict[str, Any]], None]

PHASE_CHANGED = "phase_changed"
BATCH_STARTED = "batch_started"
ICON_GENERATED = "icon_generated"
RATE_LIMITED = "rate_limited"
BATCH_HALTED = "batch_halted"
BATCH_COMPLETED = "batch_completed"
ICONS_SAVED = "icons_saved"


class EventBus:
    """Dispatches events to subscribers by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        logger.debug("event %s: %s", event_name, sorted(payload))
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)
