"""
Cost estimation strategies for accidents.

Screening sums ``estimate(accident)`` per location and does not depend on
which strategy is injected.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Optional

from ..core.config import Settings
from ..exceptions import ConfigError
from ..models.accident import Accident
from ..models.enums import InjurySeverity, RoadClassification
from ..models.location import RoadSegmentLocation

logger = logging.getLogger(__name__)

SEVERITY_SURCHARGE: Dict[InjurySeverity, float] = {
    InjurySeverity.MINOR: 10_000.0,
    InjurySeverity.SERIOUS: 20_000.0,
    InjurySeverity.SEVERE: 40_000.0,
    InjurySeverity.FATAL: 100_000.0,
}

SEVERITY_FACTOR: Dict[InjurySeverity, float] = {
    InjurySeverity.MINOR: 1.0,
    InjurySeverity.SERIOUS: 1.6,
    InjurySeverity.SEVERE: 2.8,
    InjurySeverity.FATAL: 6.0,
}

ROAD_CLASS_MULTIPLIER: Dict[RoadClassification, float] = {
    RoadClassification.ONE: 0.9,
    RoadClassification.TWO: 1.0,
    RoadClassification.THREE: 1.05,
    RoadClassification.FOUR: 1.1,
    RoadClassification.FIVE: 1.15,
    RoadClassification.SIX: 1.2,
}

RoadClassificationLookup = Callable[[int], Optional[RoadClassification]]


class CostModel(ABC):
    @abstractmethod
    def estimate(self, accident: Accident) -> float:
        """Return the monetary cost estimate for one accident."""
        pass

    def total(self, accidents: Iterable[Accident]) -> float:
        return sum(self.estimate(accident) for accident in accidents)


class SimpleCostModel(CostModel):
    """
    Recorded cost plus a flat surcharge per severity.

    PDO accidents (no severity) are costed at their recorded amount, so the
    estimate is never below the raw cost.
    """

    def estimate(self, accident: Accident) -> float:
        if accident.severity is None:
            return accident.cost
        return accident.cost + SEVERITY_SURCHARGE[accident.severity]


class AdvancedCostModel(CostModel):
    """
    Severity- and road-class-weighted estimate with a fixed overhead.

    ``cost * severity_factor * road_multiplier + fixed_overhead``, floored at 0.
    When severity is absent the factor is the recorded cost itself, so PDO
    accidents scale with the square of their cost.

    Args:
        fixed_overhead: Amount added to every estimate
        road_classification_lookup: Maps a road segment ID to its class;
            accidents at intersections or on unknown segments use 1.0
    """

    def __init__(
        self,
        fixed_overhead: float = 1000.0,
        road_classification_lookup: Optional[RoadClassificationLookup] = None,
    ):
        self.fixed_overhead = fixed_overhead
        self.road_classification_lookup = road_classification_lookup

    def _road_multiplier(self, accident: Accident) -> float:
        if self.road_classification_lookup is None:
            return 1.0
        if not isinstance(accident.location, RoadSegmentLocation):
            return 1.0
        classification = self.road_classification_lookup(accident.location.road_segment_id)
        if classification is None:
            return 1.0
        return ROAD_CLASS_MULTIPLIER[classification]

    def estimate(self, accident: Accident) -> float:
        if accident.severity is None:
            severity_factor = accident.cost
        else:
            severity_factor = SEVERITY_FACTOR[accident.severity]

        estimated = (
            accident.cost * severity_factor * self._road_multiplier(accident)
            + self.fixed_overhead
        )
        return max(0.0, estimated)


def build_cost_model(
    settings: Settings,
    road_classification_lookup: Optional[RoadClassificationLookup] = None,
) -> CostModel:
    """
    Create the cost model named by ``settings.COST_MODEL``.

    Raises:
        ConfigError: If the name is not ``simple`` or ``advanced``
    """
    name = settings.COST_MODEL.strip().lower()
    if name == "simple":
        return SimpleCostModel()
    if name == "advanced":
        return AdvancedCostModel(
            fixed_overhead=settings.ADVANCED_COST_FIXED_OVERHEAD,
            road_classification_lookup=road_classification_lookup,
        )
    raise ConfigError(f"Unknown cost model '{settings.COST_MODEL}'. Use 'simple' or 'advanced'")
