"""
Building hotspots from screening candidates.

IDs come from an injected allocator and expected crashes from an injected
model, so nothing here draws random numbers.
"""

from datetime import datetime, timezone
from itertools import count
from typing import Callable, Iterable, Optional

from ..models.enums import HotspotStatus, LocationType
from ..models.hotspot import Hotspot, ObservedCrashes
from ..models.location import IntersectionLocation, RoadSegmentLocation
from ..models.values import TimePeriod
from ..schemas.hotspot import HotspotCandidate

ExpectedCrashesModel = Callable[[HotspotCandidate], float]


def default_expected_crashes(candidate: HotspotCandidate) -> float:
    """Placeholder baseline until a safety performance function is wired in."""
    return max(1.0, round(candidate.accident_count * 0.8, 2))


class SequentialIdAllocator:
    """Hands out increasing integer IDs starting at ``start``."""

    def __init__(self, start: int = 1):
        self._counter = count(start)

    def __call__(self) -> int:
        return next(self._counter)


def next_id_after(existing_ids: Iterable[int]) -> int:
    return max(existing_ids, default=0) + 1


def build_hotspot_from_candidate(
    candidate: HotspotCandidate,
    hotspot_id: int,
    period: TimePeriod,
    expected_crashes_model: ExpectedCrashesModel = default_expected_crashes,
    threshold: Optional[float] = None,
    generated_at: Optional[datetime] = None,
) -> Hotspot:
    """
    Turn a screening candidate into an open hotspot.

    The risk score is observed over expected crashes, scaled to percent.
    """
    if candidate.location_type is LocationType.ROAD_SEGMENT:
        location = RoadSegmentLocation(candidate.location_id)
    else:
        location = IntersectionLocation(candidate.location_id)

    observed = ObservedCrashes(pdo=candidate.pdo_count, injury=candidate.injury_count)
    expected = float(expected_crashes_model(candidate))
    if expected <= 0:
        raise ValueError("Expected crashes must be positive to compute a risk score")

    generated_at = generated_at or datetime.now(timezone.utc)
    return Hotspot(
        id=hotspot_id,
        location=location,
        period=period,
        observed_crashes=observed,
        expected_crashes=expected,
        risk_score=round(100.0 * observed.total / expected, 2),
        status=HotspotStatus.OPEN,
        screening_parameters={
            "method": "cost_threshold",
            "threshold": threshold,
            "score": candidate.score,
            "accidentCount": candidate.accident_count,
            "locationType": candidate.location_type.value,
            "calculatedAt": generated_at.isoformat(),
        },
    )
