from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .enums import AccidentType, HotspotStatus, LocationType
from .location import Location, location_key
from .values import TimePeriod


@dataclass(frozen=True)
class ObservedCrashes:
    """Observed crash counts split into property-damage-only and injury."""

    pdo: int = 0
    injury: int = 0

    def __post_init__(self):
        if self.pdo < 0 or self.injury < 0:
            raise ValueError("Observed crash counts cannot be negative")

    @property
    def total(self) -> int:
        return self.pdo + self.injury

    def as_dict(self) -> Dict[str, int]:
        return {AccidentType.PDO.value: self.pdo, AccidentType.INJURY.value: self.injury}

    @classmethod
    def from_mapping(cls, counts: Mapping[Any, int]) -> "ObservedCrashes":
        """Build from a mapping keyed by ``AccidentType`` or its string value."""
        values = {AccidentType(key).value: int(count) for key, count in counts.items()}
        return cls(
            pdo=values.get(AccidentType.PDO.value, 0),
            injury=values.get(AccidentType.INJURY.value, 0),
        )


@dataclass
class Hotspot:
    """
    A location flagged as riskier than expected over a time period.

    ``screening_parameters`` is diagnostic only (method, threshold,
    generation time) and never drives logic.
    """

    id: int
    location: Location
    period: TimePeriod
    observed_crashes: ObservedCrashes
    expected_crashes: float
    risk_score: float
    status: HotspotStatus = HotspotStatus.OPEN
    screening_parameters: Optional[Dict[str, Any]] = field(default=None)

    def __post_init__(self):
        if self.expected_crashes < 0:
            raise ValueError("Expected crashes cannot be negative")

    @property
    def location_type(self) -> LocationType:
        return location_key(self.location)[0]
