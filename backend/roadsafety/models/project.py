from dataclasses import dataclass, replace

from ..exceptions import InvalidTransitionError
from .enums import ProjectStatus
from .values import MonetaryAmount, TimePeriod

# Each status may only advance to the next one
_STATUS_ORDER = [
    ProjectStatus.PROPOSED,
    ProjectStatus.APPROVED,
    ProjectStatus.IMPLEMENTED,
    ProjectStatus.CLOSED,
]


@dataclass(frozen=True)
class Project:
    """
    Remediation project applying a countermeasure to a hotspot.
    """

    id: int
    countermeasure_id: int
    hotspot_id: int
    period: TimePeriod
    expected_cost: MonetaryAmount
    actual_cost: MonetaryAmount
    status: ProjectStatus = ProjectStatus.PROPOSED

    def transition_to(self, status: ProjectStatus) -> "Project":
        """
        Return a copy of the project in ``status``.

        Raises:
            InvalidTransitionError: If ``status`` is not the next step
        """
        if status == self.status:
            return self

        current_index = _STATUS_ORDER.index(self.status)
        if _STATUS_ORDER.index(status) != current_index + 1:
            raise InvalidTransitionError(
                "Project", self.id, self.status.value, status.value
            )
        return replace(self, status=status)

    def cost_overrun(self) -> float:
        """Actual minus expected cost; negative when under budget."""
        if self.actual_cost.currency != self.expected_cost.currency:
            raise ValueError("Expected and actual cost use different currencies")
        return self.actual_cost.amount - self.expected_cost.amount
