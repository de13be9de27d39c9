"""
Domain events and best-effort side channels.

Usage:
    from roadsafety.events import InMemoryEventBus, HotspotCreatedEvent

    bus = InMemoryEventBus()
    bus.add_listener(HotspotCreatedEvent, lambda event: print(event.payload()))
"""

from .bus import (
    DomainEvent,
    EventDispatcher,
    HotspotCreatedEvent,
    InMemoryEventBus,
    ProjectApprovedEvent,
    ProjectEvent,
    ProjectImplementedEvent,
    ProjectProposedEvent,
)
from .notifier import LoggingNotifier, Notifier

__all__ = [
    "DomainEvent",
    "EventDispatcher",
    "HotspotCreatedEvent",
    "InMemoryEventBus",
    "LoggingNotifier",
    "Notifier",
    "ProjectApprovedEvent",
    "ProjectEvent",
    "ProjectImplementedEvent",
    "ProjectProposedEvent",
]
