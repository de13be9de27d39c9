"""
Exception classes for the road safety core.
"""

from typing import Any


class RoadSafetyError(Exception):
    """Base exception for all road safety errors."""

    pass


class NotFoundError(RoadSafetyError):
    """
    Raised when a referenced entity does not exist.

    Update and delete on a missing hotspot or countermeasure raise this
    before any persistence call is made.
    """

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class DuplicateIdentifierError(RoadSafetyError):
    """Raised when creating an entity whose ID is already stored."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} already exists")


class InvalidLocationError(RoadSafetyError):
    """
    Raised when a location reference is missing, ambiguous or unparseable.

    A location must carry exactly one of a road segment ID or an
    intersection ID.
    """

    pass


class InvalidTransitionError(RoadSafetyError):
    """Raised when a status change skips or reverses the allowed order."""

    def __init__(self, entity: str, entity_id: Any, current: str, requested: str):
        self.entity = entity
        self.entity_id = entity_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"{entity} {entity_id} cannot move from '{current}' to '{requested}'"
        )


class ConfigError(RoadSafetyError):
    """Raised when settings name an unknown strategy or hold invalid values."""

    pass


class LocationConflictError(DuplicateIdentifierError):
    """
    Raised when a write would leave two open hotspots at one location.

    Subclasses ``DuplicateIdentifierError`` so callers treating creation as
    idempotent-on-conflict handle both cases the same way.
    """

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        RoadSafetyError.__init__(
            self,
            f"{entity} {entity_id} conflicts with an open {entity.lower()} at the same location",
        )
