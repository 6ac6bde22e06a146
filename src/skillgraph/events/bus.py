"""Async event bus used to notify hosts about awards and level-ups."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from skillgraph.events.types import EventType

logger = logging.getLogger(__name__)

Listener = Callable[[EventType, dict[str, Any]], Coroutine[Any, Any, None]]


class EventBus:
    """Minimal async pub/sub. Listener errors are logged, never propagated."""

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)
        self._wildcard: list[Listener] = []

    def on(self, event_type: EventType, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def on_all(self, listener: Listener) -> None:
        """Register a listener that receives every event."""
        self._wildcard.append(listener)

    def off(self, event_type: EventType, listener: Listener) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    async def emit(self, event_type: EventType, data: dict[str, Any] | None = None) -> int:
        """Deliver an event; returns the number of listeners that handled it cleanly."""
        payload = data or {}
        delivered = 0
        for listener in [*self._listeners.get(event_type, []), *self._wildcard]:
            try:
                await listener(event_type, payload)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Listener failed for %s", event_type)
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        self._listeners.clear()
        self._wildcard.clear()
