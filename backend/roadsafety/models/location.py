"""
Location references for accidents and hotspots.

A location is either a road segment (with an optional distance from the
segment start) or an intersection, never both. Consumers branch on the
concrete type with ``location_key``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..exceptions import InvalidLocationError
from .enums import LocationType


@dataclass(frozen=True)
class RoadSegmentLocation:
    road_segment_id: int
    distance_from_start: Optional[float] = None

    @property
    def location_type(self) -> LocationType:
        return LocationType.ROAD_SEGMENT

    @property
    def location_id(self) -> int:
        return self.road_segment_id


@dataclass(frozen=True)
class IntersectionLocation:
    intersection_id: int

    @property
    def location_type(self) -> LocationType:
        return LocationType.INTERSECTION

    @property
    def location_id(self) -> int:
        return self.intersection_id


Location = Union[RoadSegmentLocation, IntersectionLocation]


def location_key(location: Location) -> Tuple[LocationType, int]:
    """Return ``(location_type, id)`` for a location."""
    if isinstance(location, RoadSegmentLocation):
        return LocationType.ROAD_SEGMENT, location.road_segment_id
    if isinstance(location, IntersectionLocation):
        return LocationType.INTERSECTION, location.intersection_id
    raise InvalidLocationError(f"Unsupported location reference: {location!r}")


def location_from_ids(
    road_segment_id: Optional[int] = None,
    intersection_id: Optional[int] = None,
    distance_from_start: Optional[float] = None,
) -> Location:
    """
    Build a location from the two nullable ID columns used in storage.

    Raises:
        InvalidLocationError: If both or neither ID is set
    """
    if road_segment_id is not None and intersection_id is not None:
        raise InvalidLocationError(
            f"Location cannot reference both road segment {road_segment_id} "
            f"and intersection {intersection_id}"
        )
    if road_segment_id is not None:
        return RoadSegmentLocation(int(road_segment_id), distance_from_start)
    if intersection_id is not None:
        return IntersectionLocation(int(intersection_id))
    raise InvalidLocationError("Location needs a road segment or intersection ID")


def location_columns(location: Location) -> Tuple[Optional[int], Optional[int]]:
    """Return ``(road_segment_id, intersection_id)`` with exactly one set."""
    location_type, location_id = location_key(location)
    if location_type is LocationType.ROAD_SEGMENT:
        return location_id, None
    return None, location_id


def parse_location(value: str) -> Location:
    """
    Parse the wire form ``"<type>:<id>"``, e.g. ``"road_segment:12"``.

    Raises:
        InvalidLocationError: If the string is malformed
    """
    if not isinstance(value, str) or ":" not in value:
        raise InvalidLocationError(f"Invalid location string: {value!r}")

    kind, _, raw_id = value.partition(":")
    try:
        location_type = LocationType(kind.strip())
        location_id = int(raw_id.strip())
    except ValueError:
        raise InvalidLocationError(f"Invalid location string: {value!r}")

    if location_type is LocationType.ROAD_SEGMENT:
        return RoadSegmentLocation(location_id)
    return IntersectionLocation(location_id)


def format_location(location: Location) -> str:
    location_type, location_id = location_key(location)
    return f"{location_type.value}:{location_id}"
