from pydantic import BaseModel, Field, model_validator
from typing import Optional

from ..models.enums import HotspotStatus, LocationType
from ..models.hotspot import Hotspot
from ..models.location import location_columns
from ..models.values import TimePeriod


class ScreeningRequest(BaseModel):
    """
    Parameters for one screening run.
    """

    location_type: LocationType = Field(..., examples=["road_segment"])
    threshold: float = Field(
        ...,
        examples=[10000.0],
        description="Aggregate cost a location must strictly exceed",
    )
    period: Optional[TimePeriod] = Field(
        None, description="Only accidents inside this window (inclusive) are scored"
    )


class HotspotCandidate(BaseModel):
    """
    A location whose aggregate accident cost exceeded the screening threshold.

    Candidates are proposals only; nothing is persisted by screening.
    """

    location_id: int = Field(..., examples=[100])
    score: float = Field(..., examples=[31000.0], description="Sum of estimated costs")
    accident_count: int = Field(..., ge=1, examples=[2])
    location_type: LocationType = Field(..., examples=["road_segment"])
    pdo_count: int = Field(default=0, ge=0, description="Accidents without injuries")
    injury_count: int = Field(default=0, ge=0, description="Accidents with injuries")

    model_config = {"frozen": True}


class HotspotSearchCriteria(BaseModel):
    """
    Conjunctive hotspot filters; every field is optional.

    ``period`` matches on overlap with the hotspot period, not containment.
    """

    period: Optional[TimePeriod] = None
    road_segment_id: Optional[int] = None
    intersection_id: Optional[int] = None
    status: Optional[HotspotStatus] = None
    min_risk_score: Optional[float] = None
    max_risk_score: Optional[float] = None
    min_expected_crashes: Optional[float] = Field(None, ge=0)
    max_expected_crashes: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_ranges(self):
        if (
            self.min_risk_score is not None
            and self.max_risk_score is not None
            and self.min_risk_score > self.max_risk_score
        ):
            raise ValueError("min_risk_score must be <= max_risk_score")
        if (
            self.min_expected_crashes is not None
            and self.max_expected_crashes is not None
            and self.min_expected_crashes > self.max_expected_crashes
        ):
            raise ValueError("min_expected_crashes must be <= max_expected_crashes")
        return self

    def matches(self, hotspot: Hotspot) -> bool:
        """Evaluate the criteria against a hotspot held in memory."""
        road_segment_id, intersection_id = location_columns(hotspot.location)

        if self.period is not None and not self.period.overlaps(hotspot.period):
            return False
        if self.road_segment_id is not None and road_segment_id != self.road_segment_id:
            return False
        if self.intersection_id is not None and intersection_id != self.intersection_id:
            return False
        if self.status is not None and hotspot.status != self.status:
            return False
        if self.min_risk_score is not None and hotspot.risk_score < self.min_risk_score:
            return False
        if self.max_risk_score is not None and hotspot.risk_score > self.max_risk_score:
            return False
        if (
            self.min_expected_crashes is not None
            and hotspot.expected_crashes < self.min_expected_crashes
        ):
            return False
        if (
            self.max_expected_crashes is not None
            and hotspot.expected_crashes > self.max_expected_crashes
        ):
            return False
        return True
