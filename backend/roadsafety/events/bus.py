"""
Event dispatch for domain events.

Dispatch is separate from persistence: services persist first and then
hand the event to an injected dispatcher, if one is configured.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Type

from ..models.hotspot import Hotspot
from ..models.location import format_location
from ..models.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), kw_only=True
    )

    @property
    def name(self) -> str:
        return type(self).__name__

    def payload(self) -> Dict[str, Any]:
        return {"event": self.name, "occurred_at": self.occurred_at.isoformat()}


@dataclass(frozen=True)
class HotspotCreatedEvent(DomainEvent):
    """Emitted after a hotspot has been persisted; carries the full hotspot."""

    hotspot: Hotspot

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data.update(
            hotspot_id=self.hotspot.id,
            location=format_location(self.hotspot.location),
            risk_score=self.hotspot.risk_score,
            status=self.hotspot.status.value,
        )
        return data


@dataclass(frozen=True)
class ProjectEvent(DomainEvent):
    """Base for project lifecycle events; carries the project after the change."""

    project: Project

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data.update(
            project_id=self.project.id,
            hotspot_id=self.project.hotspot_id,
            countermeasure_id=self.project.countermeasure_id,
            status=self.project.status.value,
        )
        return data


@dataclass(frozen=True)
class ProjectProposedEvent(ProjectEvent):
    pass


@dataclass(frozen=True)
class ProjectApprovedEvent(ProjectEvent):
    pass


@dataclass(frozen=True)
class ProjectImplementedEvent(ProjectEvent):
    pass


class EventDispatcher(ABC):
    @abstractmethod
    def dispatch(self, event: DomainEvent) -> None:
        pass


Listener = Callable[[DomainEvent], None]


class InMemoryEventBus(EventDispatcher):
    """
    Synchronous event bus that records every dispatched event.

    Listeners registered for ``DomainEvent`` receive all events.
    """

    def __init__(self):
        self.dispatched_events: List[DomainEvent] = []
        self._listeners: Dict[Type[DomainEvent], List[Listener]] = {}

    def add_listener(self, event_class: Type[DomainEvent], listener: Listener) -> None:
        self._listeners.setdefault(event_class, []).append(listener)

    def dispatch(self, event: DomainEvent) -> None:
        self.dispatched_events.append(event)

        listeners = list(self._listeners.get(type(event), []))
        if type(event) is not DomainEvent:
            listeners += self._listeners.get(DomainEvent, [])

        for listener in listeners:
            listener(event)
