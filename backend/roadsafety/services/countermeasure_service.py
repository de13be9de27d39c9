"""
Countermeasure management and matching.

Matching ranks the most effective countermeasures first: ascending CMF,
since a CMF below 1 reduces predicted crashes by ``1 - cmf``.
"""

import logging
from typing import Iterable, List, Optional

from ..exceptions import NotFoundError
from ..models.countermeasure import Countermeasure
from ..models.enums import CollisionType, InjurySeverity
from ..models.hotspot import Hotspot
from ..repositories.base import CountermeasureStore
from ..schemas.countermeasure import CountermeasureFilter

logger = logging.getLogger(__name__)


class CountermeasureService:
    def __init__(self, store: CountermeasureStore):
        self.store = store

    def create(self, countermeasure: Countermeasure) -> Countermeasure:
        """
        Raises:
            DuplicateIdentifierError: If the ID already exists
        """
        self.store.save(countermeasure)
        logger.info(
            "Countermeasure created",
            extra={
                "context": {
                    "id": countermeasure.id,
                    "name": countermeasure.name,
                    "targetType": countermeasure.target_type.value,
                    "lifecycleStatus": countermeasure.lifecycle_status.value,
                }
            },
        )
        return countermeasure

    def find_by_id(self, countermeasure_id: int) -> Optional[Countermeasure]:
        countermeasure = self.store.find_by_id(countermeasure_id)
        if countermeasure is not None:
            logger.info(
                "Countermeasure retrieved",
                extra={"context": {"id": countermeasure.id, "name": countermeasure.name}},
            )
        return countermeasure

    def all(self) -> List[Countermeasure]:
        return self.store.all()

    def update(self, countermeasure: Countermeasure) -> Countermeasure:
        if self.store.find_by_id(countermeasure.id) is None:
            raise NotFoundError("Countermeasure", countermeasure.id)

        self.store.update(countermeasure)
        logger.info(
            "Countermeasure updated",
            extra={
                "context": {
                    "id": countermeasure.id,
                    "lifecycleStatus": countermeasure.lifecycle_status.value,
                }
            },
        )
        return countermeasure

    def delete(self, countermeasure_id: int) -> None:
        existing = self.store.find_by_id(countermeasure_id)
        if existing is None:
            raise NotFoundError("Countermeasure", countermeasure_id)

        self.store.delete(countermeasure_id)
        logger.info(
            "Countermeasure deleted",
            extra={"context": {"id": countermeasure_id, "name": existing.name}},
        )

    def find_for_target(self, criteria: CountermeasureFilter) -> List[Countermeasure]:
        """
        Countermeasures applicable to a target, most effective first.

        A countermeasure qualifies when its target type matches, its status
        is allowed, and it affects every requested collision type and every
        requested severity. Empty request lists match everything.
        """
        pool = self.store.find_by_criteria(
            criteria.target_type, criteria.allowed_statuses
        )
        matched = [
            cm
            for cm in pool
            if cm.target_type == criteria.target_type
            and cm.lifecycle_status in criteria.allowed_statuses
            and cm.covers(criteria.affected_collision_types, criteria.affected_severities)
        ]
        matched.sort(key=lambda cm: cm.cmf)

        logger.info(
            "Countermeasures retrieved for hotspot applicability",
            extra={
                "context": {
                    "targetType": criteria.target_type.value,
                    "affectedCollisionTypes": [c.value for c in criteria.affected_collision_types],
                    "affectedSeverities": [s.value for s in criteria.affected_severities],
                    "allowedStatuses": [s.value for s in criteria.allowed_statuses],
                    "count": len(matched),
                }
            },
        )
        return matched

    def find_for_hotspot(
        self,
        hotspot: Hotspot,
        collision_types: Iterable[CollisionType] = (),
        severities: Iterable[InjurySeverity] = (),
    ) -> List[Countermeasure]:
        """Match countermeasures to the kind of location a hotspot sits on."""
        return self.find_for_target(
            CountermeasureFilter(
                target_type=hotspot.location_type,
                affected_collision_types=list(collision_types),
                affected_severities=list(severities),
            )
        )
