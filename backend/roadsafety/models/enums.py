"""
Enumerations shared across the road safety domain.

Values match the strings stored in the database and accepted on the wire.
"""

from enum import Enum


class LocationType(str, Enum):
    ROAD_SEGMENT = "road_segment"
    INTERSECTION = "intersection"


# Countermeasures target the same two kinds of location
TargetType = LocationType


class InjurySeverity(str, Enum):
    """Injury severity; an accident without one is property-damage-only."""

    MINOR = "minor"
    SERIOUS = "serious"
    SEVERE = "severe"
    FATAL = "fatal"


class AccidentType(str, Enum):
    PDO = "pdo"
    INJURY = "injury"


class CollisionType(str, Enum):
    REAR_END = "rear_end"
    SIDE = "side"
    HEAD_ON = "head_on"
    SIDESWIPE = "sideswipe"
    SINGLE_VEHICLE = "single_vehicle"
    ANGLE = "angle"
    OTHER = "other"


class CauseFactor(str, Enum):
    SPEEDING = "speeding"
    DISTRACTED_DRIVING = "distracted_driving"
    ALCOHOL = "alcohol"
    RED_LIGHT_VIOLATION = "red_light_violation"
    STOP_SIGN_VIOLATION = "stop_sign_violation"
    IMPROPER_LANE_CHANGE = "improper_lane_change"
    FOLLOWING_TOO_CLOSE = "following_too_close"
    VEHICLE_FAILURE = "vehicle_failure"
    ROAD_CONDITIONS = "road_conditions"
    WEATHER = "weather"
    OTHER = "other"


class WeatherCondition(str, Enum):
    CLEAR = "clear"
    CLOUDY = "cloudy"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    SNOW = "snow"
    ICE = "ice"
    FOG = "fog"
    WIND = "wind"
    OTHER = "other"


class RoadCondition(str, Enum):
    DRY = "dry"
    WET = "wet"
    SNOW_COVERED = "snow_covered"
    ICE_COVERED = "ice_covered"
    SLUSH = "slush"
    LOOSE_GRAVEL = "loose_gravel"
    POTHOLES = "potholes"
    CONSTRUCTION = "construction"
    OTHER = "other"


class VisibilityCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"
    NIGHT = "night"
    DAWN = "dawn"
    DUSK = "dusk"
    OTHER = "other"


class HotspotStatus(str, Enum):
    OPEN = "open"
    REVIEWED = "reviewed"
    ADDRESSED = "addressed"


class LifecycleStatus(str, Enum):
    PROPOSED = "proposed"
    APPROVED = "approved"
    IMPLEMENTED = "implemented"
    RETIRED = "retired"


class ProjectStatus(str, Enum):
    PROPOSED = "proposed"
    APPROVED = "approved"
    IMPLEMENTED = "implemented"
    CLOSED = "closed"


class IntersectionType(str, Enum):
    TRAFFIC_LIGHT = "traffic_light"
    SIGN = "sign"
    ROUNDABOUT = "roundabout"
    EQUAL_PRIORITY = "equal_priority"


class IntersectionControlType(str, Enum):
    TRAFFIC_LIGHT = "traffic_light"
    PRIORITY = "priority"
    SIGNALLED = "signalled"
    ROUNDABOUT = "roundabout"


class RoadClassification(int, Enum):
    """Functional road class, 1 (local) through 6 (motorway)."""

    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
