"""Domain models for accidents, hotspots, countermeasures and projects."""

from .enums import (
    AccidentType,
    CauseFactor,
    CollisionType,
    HotspotStatus,
    InjurySeverity,
    IntersectionControlType,
    IntersectionType,
    LifecycleStatus,
    LocationType,
    ProjectStatus,
    RoadClassification,
    RoadCondition,
    TargetType,
    VisibilityCondition,
    WeatherCondition,
)
from .location import (
    IntersectionLocation,
    Location,
    RoadSegmentLocation,
    format_location,
    location_columns,
    location_from_ids,
    location_key,
    parse_location,
)
from .values import MonetaryAmount, TimePeriod
from .accident import Accident
from .hotspot import Hotspot, ObservedCrashes
from .countermeasure import (
    Countermeasure,
    IntersectionApplicabilityRules,
    RoadSegmentApplicabilityRules,
)
from .project import Project

__all__ = [
    "Accident",
    "AccidentType",
    "CauseFactor",
    "CollisionType",
    "Countermeasure",
    "Hotspot",
    "HotspotStatus",
    "InjurySeverity",
    "IntersectionApplicabilityRules",
    "IntersectionControlType",
    "IntersectionLocation",
    "IntersectionType",
    "LifecycleStatus",
    "Location",
    "LocationType",
    "MonetaryAmount",
    "ObservedCrashes",
    "Project",
    "ProjectStatus",
    "RoadClassification",
    "RoadCondition",
    "RoadSegmentApplicabilityRules",
    "RoadSegmentLocation",
    "TargetType",
    "TimePeriod",
    "VisibilityCondition",
    "WeatherCondition",
    "format_location",
    "location_columns",
    "location_from_ids",
    "location_key",
    "parse_location",
]
