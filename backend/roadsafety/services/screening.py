"""
Hotspot screening.

Turns the accident history into a ranked list of candidate locations whose
aggregate estimated cost exceeds a threshold. Screening only proposes;
creating hotspots from candidates is a separate call on the lifecycle
manager.
"""

import logging
from typing import Dict, List, Optional, Set

from ..exceptions import InvalidLocationError
from ..models.accident import Accident
from ..models.enums import AccidentType, LocationType
from ..models.hotspot import Hotspot
from ..models.location import location_key
from ..models.values import TimePeriod
from ..repositories.base import AccidentProvider, HotspotStore
from ..schemas.hotspot import HotspotCandidate, ScreeningRequest
from .cost_model import CostModel

logger = logging.getLogger(__name__)


class ScreeningEngine:
    """
    Groups accidents by location, scores each group and ranks candidates.

    Example:
        engine = ScreeningEngine(accidents, hotspots, SimpleCostModel())
        candidates = engine.screen(LocationType.INTERSECTION, threshold=50000)
    """

    def __init__(
        self,
        accident_provider: AccidentProvider,
        hotspot_store: HotspotStore,
        cost_model: CostModel,
    ):
        self.accident_provider = accident_provider
        self.hotspot_store = hotspot_store
        self.cost_model = cost_model

    def screen(
        self,
        location_type: LocationType,
        threshold: float,
        period: Optional[TimePeriod] = None,
    ) -> List[HotspotCandidate]:
        """
        Screen one location type for hotspot candidates.

        Args:
            location_type: Road segments or intersections
            threshold: Aggregate score a location must strictly exceed
            period: Optional inclusive window on accident occurrence time

        Returns:
            Candidates sorted by score, highest first. Equal scores keep the
            order in which their locations were first seen.
        """
        all_accidents = self.accident_provider.all()
        grouped = self._group_by_location(all_accidents, location_type, period)
        existing = self._existing_locations(self.hotspot_store.all())[location_type]

        candidates = []
        for location_id, accidents in grouped.items():
            # Never re-propose a location that already has a hotspot
            if location_id in existing:
                continue

            score = self.cost_model.total(accidents)
            if score > threshold:
                injury_count = sum(
                    1 for a in accidents if a.accident_type is AccidentType.INJURY
                )
                candidates.append(
                    HotspotCandidate(
                        location_id=location_id,
                        score=score,
                        accident_count=len(accidents),
                        location_type=location_type,
                        pdo_count=len(accidents) - injury_count,
                        injury_count=injury_count,
                    )
                )

        # sorted() is stable, so ties stay in first-seen order
        candidates = sorted(candidates, key=lambda c: c.score, reverse=True)

        logger.info(
            "Hotspot detection performed",
            extra={
                "context": {
                    "threshold": threshold,
                    "type": location_type.value,
                    "period": (
                        {"start": period.start.isoformat(), "end": period.end.isoformat()}
                        if period is not None
                        else None
                    ),
                    "totalAccidentsAnalyzed": sum(len(g) for g in grouped.values()),
                    "locationsAnalyzed": len(grouped),
                    "hotspotsDetected": len(candidates),
                }
            },
        )
        return candidates

    def screen_request(self, request: ScreeningRequest) -> List[HotspotCandidate]:
        return self.screen(request.location_type, request.threshold, request.period)

    @staticmethod
    def _group_by_location(
        accidents: List[Accident],
        location_type: LocationType,
        period: Optional[TimePeriod],
    ) -> Dict[int, List[Accident]]:
        grouped: Dict[int, List[Accident]] = {}
        for accident in accidents:
            try:
                accident_type, location_id = location_key(accident.location)
            except InvalidLocationError:
                # Rows without a usable location are left out of screening
                logger.debug(f"Accident {accident.id} has no usable location; skipped")
                continue

            if accident_type is not location_type or location_id is None:
                continue
            if period is not None and not period.contains(accident.occurred_at):
                continue

            grouped.setdefault(location_id, []).append(accident)
        return grouped

    @staticmethod
    def _existing_locations(hotspots: List[Hotspot]) -> Dict[LocationType, Set[int]]:
        partition: Dict[LocationType, Set[int]] = {
            LocationType.ROAD_SEGMENT: set(),
            LocationType.INTERSECTION: set(),
        }
        for hotspot in hotspots:
            location_type, location_id = location_key(hotspot.location)
            partition[location_type].add(location_id)
        return partition
