from pydantic import BaseModel, Field
from typing import List

from ..models.enums import CollisionType, InjurySeverity, LifecycleStatus, TargetType

DEFAULT_ALLOWED_STATUSES = [
    LifecycleStatus.PROPOSED,
    LifecycleStatus.APPROVED,
    LifecycleStatus.IMPLEMENTED,
]


class CountermeasureFilter(BaseModel):
    """
    Criteria for matching countermeasures to a target.

    A countermeasure matches when it affects every requested collision type
    and every requested severity; empty lists do not filter.
    """

    target_type: TargetType = Field(..., examples=["intersection"])
    affected_collision_types: List[CollisionType] = Field(default_factory=list)
    affected_severities: List[InjurySeverity] = Field(default_factory=list)
    allowed_statuses: List[LifecycleStatus] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_STATUSES)
    )
