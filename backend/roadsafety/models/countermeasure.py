"""
Countermeasures and the rules describing where they can be applied.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union

from .enums import (
    CollisionType,
    InjurySeverity,
    IntersectionControlType,
    IntersectionType,
    LifecycleStatus,
    RoadClassification,
    TargetType,
)
from .values import MonetaryAmount


@dataclass(frozen=True)
class IntersectionApplicabilityRules:
    intersection_types: FrozenSet[IntersectionType] = frozenset()
    control_types: FrozenSet[IntersectionControlType] = frozenset()

    def applies_to(
        self,
        intersection_type: Optional[IntersectionType] = None,
        control_type: Optional[IntersectionControlType] = None,
    ) -> bool:
        # An empty allowed set, or an unknown input, does not restrict
        if (
            intersection_type is not None
            and self.intersection_types
            and intersection_type not in self.intersection_types
        ):
            return False
        if (
            control_type is not None
            and self.control_types
            and control_type not in self.control_types
        ):
            return False
        return True


@dataclass(frozen=True)
class RoadSegmentApplicabilityRules:
    road_classifications: FrozenSet[RoadClassification] = frozenset()

    def applies_to(self, classification: Optional[RoadClassification] = None) -> bool:
        if classification is None or not self.road_classifications:
            return True
        return classification in self.road_classifications


ApplicabilityRules = Union[IntersectionApplicabilityRules, RoadSegmentApplicabilityRules]


@dataclass(frozen=True)
class Countermeasure:
    """
    A mitigation with a crash modification factor (CMF).

    A CMF below 1 reduces predicted crashes by ``1 - cmf``; smaller is
    more effective.
    """

    id: int
    name: str
    target_type: TargetType
    applicability_rules: ApplicabilityRules
    affected_collision_types: FrozenSet[CollisionType]
    affected_severities: FrozenSet[InjurySeverity]
    cmf: float
    lifecycle_status: LifecycleStatus
    implementation_cost: MonetaryAmount
    expected_annual_savings: Optional[float] = None
    evidence: Optional[str] = field(default=None)

    def __post_init__(self):
        if self.cmf <= 0:
            raise ValueError("CMF must be greater than zero")

        expected_rules = (
            IntersectionApplicabilityRules
            if self.target_type is TargetType.INTERSECTION
            else RoadSegmentApplicabilityRules
        )
        if not isinstance(self.applicability_rules, expected_rules):
            raise ValueError(
                f"{self.target_type.value} countermeasure needs "
                f"{expected_rules.__name__}"
            )

        # Accept any iterable for the affected sets
        object.__setattr__(
            self, "affected_collision_types", frozenset(self.affected_collision_types)
        )
        object.__setattr__(
            self, "affected_severities", frozenset(self.affected_severities)
        )

    def covers(self, collision_types, severities) -> bool:
        """True if every requested collision type and severity is affected."""
        return set(collision_types) <= self.affected_collision_types and set(
            severities
        ) <= self.affected_severities

    def estimated_crash_reduction(self, predicted_crashes: float) -> float:
        return predicted_crashes * (1.0 - self.cmf)
