from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import (
    AccidentType,
    CauseFactor,
    CollisionType,
    InjurySeverity,
    LocationType,
    RoadCondition,
    VisibilityCondition,
    WeatherCondition,
)
from .location import Location, location_key


@dataclass(frozen=True)
class Accident:
    """
    Domain model representing a recorded accident.

    ``severity`` is None for property-damage-only accidents.
    """

    id: int
    occurred_at: datetime
    location: Location
    cost: float
    severity: Optional[InjurySeverity] = None
    collision_type: Optional[CollisionType] = None
    cause_factor: Optional[CauseFactor] = None
    weather_condition: Optional[WeatherCondition] = None
    road_condition: Optional[RoadCondition] = None
    visibility_condition: Optional[VisibilityCondition] = None
    injured_persons_count: int = 0

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError("Accident cost cannot be negative")
        if self.injured_persons_count < 0:
            raise ValueError("Injured persons count cannot be negative")

    @property
    def accident_type(self) -> AccidentType:
        return AccidentType.PDO if self.severity is None else AccidentType.INJURY

    @property
    def location_type(self) -> LocationType:
        return location_key(self.location)[0]

    def requires_immediate_attention(self) -> bool:
        if self.severity in (InjurySeverity.FATAL, InjurySeverity.SEVERE):
            return True
        if self.severity is InjurySeverity.SERIOUS:
            return self.cost > 5000
        return False
