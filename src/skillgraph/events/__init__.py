"""skillgraph event system."""

from skillgraph.events.bus import EventBus
from skillgraph.events.types import EventType

__all__ = ["EventBus", "EventType"]
