"""
Service layer for the hotspot lifecycle.

Persistence goes through the injected ``HotspotStore``. Logging,
notification and event dispatch are side channels: failures there are
logged and never change the outcome of an operation.
"""

import logging
from typing import Any, Dict, List, Optional

from ..events.bus import DomainEvent, EventDispatcher, HotspotCreatedEvent
from ..events.notifier import Notifier
from ..exceptions import NotFoundError
from ..models.hotspot import Hotspot
from ..repositories.base import HotspotStore
from ..schemas.hotspot import HotspotSearchCriteria

logger = logging.getLogger(__name__)


def _hotspot_context(hotspot: Hotspot) -> Dict[str, Any]:
    return {
        "id": hotspot.id,
        "status": hotspot.status.value,
        "riskScore": hotspot.risk_score,
    }


class HotspotService:
    """
    Create, read, update, delete and search hotspots.

    Args:
        store: Hotspot persistence
        event_dispatcher: Receives ``HotspotCreatedEvent`` after a save
        notifier: Receives the same event payload
    """

    def __init__(
        self,
        store: HotspotStore,
        event_dispatcher: Optional[EventDispatcher] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.event_dispatcher = event_dispatcher
        self.notifier = notifier

    def create(self, hotspot: Hotspot) -> Hotspot:
        """
        Persist a new hotspot and announce it.

        Raises:
            DuplicateIdentifierError: If the ID already exists
        """
        self.store.save(hotspot)

        logger.info("Hotspot created", extra={"context": _hotspot_context(hotspot)})
        self._publish(HotspotCreatedEvent(hotspot=hotspot))
        return hotspot

    def find_by_id(self, hotspot_id: int) -> Optional[Hotspot]:
        hotspot = self.store.find_by_id(hotspot_id)
        if hotspot is not None:
            logger.info(
                "Hotspot retrieved",
                extra={"context": {"id": hotspot.id, "status": hotspot.status.value}},
            )
        return hotspot

    def get(self, hotspot_id: int) -> Hotspot:
        """Like ``find_by_id`` but raises ``NotFoundError`` when missing."""
        hotspot = self.find_by_id(hotspot_id)
        if hotspot is None:
            raise NotFoundError("Hotspot", hotspot_id)
        return hotspot

    def all(self) -> List[Hotspot]:
        return self.store.all()

    def update(self, hotspot: Hotspot) -> Hotspot:
        """
        Raises:
            NotFoundError: If no hotspot with this ID exists; nothing is written
            LocationConflictError: If storage already holds another open
                hotspot at this location
        """
        if self.store.find_by_id(hotspot.id) is None:
            raise NotFoundError("Hotspot", hotspot.id)

        self.store.update(hotspot)
        logger.info("Hotspot updated", extra={"context": _hotspot_context(hotspot)})
        return hotspot

    def delete(self, hotspot_id: int) -> None:
        """
        Raises:
            NotFoundError: If no hotspot with this ID exists
        """
        existing = self.store.find_by_id(hotspot_id)
        if existing is None:
            raise NotFoundError("Hotspot", hotspot_id)

        self.store.delete(hotspot_id)
        logger.info(
            "Hotspot deleted",
            extra={"context": {"id": hotspot_id, "status": existing.status.value}},
        )

    def search(self, criteria: Optional[HotspotSearchCriteria] = None) -> List[Hotspot]:
        """
        Search hotspots; all criteria are optional and combined with AND.

        Results are always sorted by risk score, highest first, whatever
        order the store returns them in.
        """
        criteria = criteria or HotspotSearchCriteria()
        hotspots = sorted(
            self.store.search(criteria), key=lambda h: h.risk_score, reverse=True
        )

        logger.info(
            "Hotspot search performed",
            extra={
                "context": {
                    "criteria": criteria.model_dump(mode="json", exclude_none=True),
                    "resultsCount": len(hotspots),
                }
            },
        )
        return hotspots

    def _publish(self, event: DomainEvent) -> None:
        if self.event_dispatcher is not None:
            try:
                self.event_dispatcher.dispatch(event)
            except Exception as e:
                logger.warning(f"Event dispatch failed for {event.name}: {e}")

        if self.notifier is not None:
            try:
                self.notifier.notify(event.payload())
            except Exception as e:
                logger.warning(f"Notification failed for {event.name}: {e}")
