"""
SQLAlchemy-backed repositories.

Each repository takes an ``Engine``; when omitted the global engine from
``roadsafety.db.connection`` is used.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..db.connection import get_db_engine
from ..db.tables import (
    accidents_table,
    countermeasures_table,
    hotspots_table,
    projects_table,
)
from ..exceptions import (
    DuplicateIdentifierError,
    InvalidLocationError,
    LocationConflictError,
    RoadSafetyError,
)
from ..models.accident import Accident
from ..models.countermeasure import (
    Countermeasure,
    IntersectionApplicabilityRules,
    RoadSegmentApplicabilityRules,
)
from ..models.enums import (
    CauseFactor,
    CollisionType,
    HotspotStatus,
    InjurySeverity,
    IntersectionControlType,
    IntersectionType,
    LifecycleStatus,
    ProjectStatus,
    RoadClassification,
    RoadCondition,
    TargetType,
    VisibilityCondition,
    WeatherCondition,
)
from ..models.hotspot import Hotspot, ObservedCrashes
from ..models.location import location_columns, location_from_ids
from ..models.project import Project
from ..models.values import MonetaryAmount, TimePeriod
from ..schemas.hotspot import HotspotSearchCriteria
from .base import AccidentProvider, CountermeasureStore, HotspotStore, ProjectStore

logger = logging.getLogger(__name__)

# Unique index names (PostgreSQL) and columns (SQLite) of the open-hotspot guard
_OPEN_LOCATION_MARKERS = (
    "hotspots_open_",
    "hotspots.road_segment_id",
    "hotspots.intersection_id",
)


def _enum_or_none(enum_cls, value):
    return enum_cls(value) if value is not None else None


def _value_or_none(member):
    return member.value if member is not None else None


def translate_integrity_error(error: IntegrityError, entity: str, entity_id: Any) -> RoadSafetyError:
    """
    Map a constraint violation onto the domain error taxonomy.

    The driver message names the violated constraint (PostgreSQL) or the
    offending columns (SQLite).
    """
    message = str(error.orig)
    if "one_location" in message or "CHECK constraint" in message:
        return InvalidLocationError(
            f"{entity} {entity_id} must reference exactly one of road segment or intersection"
        )
    if any(marker in message for marker in _OPEN_LOCATION_MARKERS):
        return LocationConflictError(entity, entity_id)
    return DuplicateIdentifierError(entity, entity_id)


class _SqlRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_db_engine()

    def _insert(self, table, values: Dict[str, Any], entity: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(table).values(**values))
        except IntegrityError as e:
            logger.warning(f"{entity} {values['id']} insert rejected: {e.orig}")
            raise translate_integrity_error(e, entity, values["id"]) from e

    def _update(self, table, entity_id: Any, values: Dict[str, Any], entity: str) -> None:
        values = {key: value for key, value in values.items() if key != "id"}
        try:
            with self.engine.begin() as conn:
                conn.execute(update(table).where(table.c.id == entity_id).values(**values))
        except IntegrityError as e:
            logger.warning(f"{entity} {entity_id} update rejected: {e.orig}")
            raise translate_integrity_error(e, entity, entity_id) from e


class SqlAccidentRepository(_SqlRepository, AccidentProvider):
    """
    Accident reads for screening, plus inserts for ingestion and tests.
    """

    def all(self) -> List[Accident]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(accidents_table).order_by(accidents_table.c.id)
            ).mappings().all()

        accidents = []
        for row in rows:
            try:
                accidents.append(self._row_to_accident(row))
            except InvalidLocationError as e:
                logger.warning(f"Skipping accident {row['id']}: {e}")
        return accidents

    def save(self, accident: Accident) -> None:
        road_segment_id, intersection_id = location_columns(accident.location)
        self._insert(
            accidents_table,
            {
                "id": accident.id,
                "occurred_at": accident.occurred_at,
                "road_segment_id": road_segment_id,
                "intersection_id": intersection_id,
                "distance_from_start": getattr(accident.location, "distance_from_start", None),
                "cost": accident.cost,
                "severity": _value_or_none(accident.severity),
                "collision_type": _value_or_none(accident.collision_type),
                "cause_factor": _value_or_none(accident.cause_factor),
                "weather_condition": _value_or_none(accident.weather_condition),
                "road_condition": _value_or_none(accident.road_condition),
                "visibility_condition": _value_or_none(accident.visibility_condition),
                "injured_persons_count": accident.injured_persons_count,
            },
            "Accident",
        )

    @staticmethod
    def _row_to_accident(row) -> Accident:
        return Accident(
            id=row["id"],
            occurred_at=row["occurred_at"],
            location=location_from_ids(
                row["road_segment_id"], row["intersection_id"], row["distance_from_start"]
            ),
            cost=float(row["cost"]),
            severity=_enum_or_none(InjurySeverity, row["severity"]),
            collision_type=_enum_or_none(CollisionType, row["collision_type"]),
            cause_factor=_enum_or_none(CauseFactor, row["cause_factor"]),
            weather_condition=_enum_or_none(WeatherCondition, row["weather_condition"]),
            road_condition=_enum_or_none(RoadCondition, row["road_condition"]),
            visibility_condition=_enum_or_none(VisibilityCondition, row["visibility_condition"]),
            injured_persons_count=row["injured_persons_count"] or 0,
        )


class SqlHotspotRepository(_SqlRepository, HotspotStore):
    def all(self) -> List[Hotspot]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(hotspots_table)).mappings().all()
        return [self._row_to_hotspot(row) for row in rows]

    def find_by_id(self, hotspot_id: int) -> Optional[Hotspot]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(hotspots_table).where(hotspots_table.c.id == hotspot_id)
            ).mappings().first()
        return self._row_to_hotspot(row) if row is not None else None

    def save(self, hotspot: Hotspot) -> None:
        self._insert(hotspots_table, self._hotspot_values(hotspot), "Hotspot")

    def update(self, hotspot: Hotspot) -> None:
        self._update(hotspots_table, hotspot.id, self._hotspot_values(hotspot), "Hotspot")

    def delete(self, hotspot_id: int) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(hotspots_table).where(hotspots_table.c.id == hotspot_id))

    def search(self, criteria: HotspotSearchCriteria) -> List[Hotspot]:
        t = hotspots_table
        query = select(t)

        if criteria.period is not None:
            # Overlap, not containment
            query = query.where(
                t.c.period_start <= criteria.period.end,
                t.c.period_end >= criteria.period.start,
            )
        if criteria.road_segment_id is not None:
            query = query.where(t.c.road_segment_id == criteria.road_segment_id)
        if criteria.intersection_id is not None:
            query = query.where(t.c.intersection_id == criteria.intersection_id)
        if criteria.status is not None:
            query = query.where(t.c.status == criteria.status.value)
        if criteria.min_risk_score is not None:
            query = query.where(t.c.risk_score >= criteria.min_risk_score)
        if criteria.max_risk_score is not None:
            query = query.where(t.c.risk_score <= criteria.max_risk_score)
        if criteria.min_expected_crashes is not None:
            query = query.where(t.c.expected_crashes >= criteria.min_expected_crashes)
        if criteria.max_expected_crashes is not None:
            query = query.where(t.c.expected_crashes <= criteria.max_expected_crashes)

        with self.engine.connect() as conn:
            rows = conn.execute(query.order_by(t.c.risk_score.desc())).mappings().all()
        return [self._row_to_hotspot(row) for row in rows]

    @staticmethod
    def _hotspot_values(hotspot: Hotspot) -> Dict[str, Any]:
        road_segment_id, intersection_id = location_columns(hotspot.location)
        return {
            "id": hotspot.id,
            "road_segment_id": road_segment_id,
            "intersection_id": intersection_id,
            "period_start": hotspot.period.start,
            "period_end": hotspot.period.end,
            "observed_crashes": hotspot.observed_crashes.as_dict(),
            "expected_crashes": hotspot.expected_crashes,
            "risk_score": hotspot.risk_score,
            "status": hotspot.status.value,
            "screening_parameters": hotspot.screening_parameters,
        }

    @staticmethod
    def _row_to_hotspot(row) -> Hotspot:
        return Hotspot(
            id=row["id"],
            location=location_from_ids(row["road_segment_id"], row["intersection_id"]),
            period=TimePeriod(row["period_start"], row["period_end"]),
            observed_crashes=ObservedCrashes.from_mapping(row["observed_crashes"] or {}),
            expected_crashes=float(row["expected_crashes"]),
            risk_score=float(row["risk_score"]),
            status=HotspotStatus(row["status"]),
            screening_parameters=row["screening_parameters"],
        )


class SqlCountermeasureRepository(_SqlRepository, CountermeasureStore):
    def all(self) -> List[Countermeasure]:
        with self.engine.connect() as conn:
            rows = conn.execute(select(countermeasures_table)).mappings().all()
        return [self._row_to_countermeasure(row) for row in rows]

    def find_by_id(self, countermeasure_id: int) -> Optional[Countermeasure]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(countermeasures_table).where(
                    countermeasures_table.c.id == countermeasure_id
                )
            ).mappings().first()
        return self._row_to_countermeasure(row) if row is not None else None

    def find_by_criteria(
        self, target_type: TargetType, statuses: Iterable[LifecycleStatus]
    ) -> List[Countermeasure]:
        status_values = [status.value for status in statuses]
        if not status_values:
            return []

        t = countermeasures_table
        query = select(t).where(
            t.c.target_type == target_type.value,
            t.c.lifecycle_status.in_(status_values),
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [self._row_to_countermeasure(row) for row in rows]

    def save(self, countermeasure: Countermeasure) -> None:
        self._insert(
            countermeasures_table,
            self._countermeasure_values(countermeasure),
            "Countermeasure",
        )

    def update(self, countermeasure: Countermeasure) -> None:
        self._update(
            countermeasures_table,
            countermeasure.id,
            self._countermeasure_values(countermeasure),
            "Countermeasure",
        )

    def delete(self, countermeasure_id: int) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                delete(countermeasures_table).where(
                    countermeasures_table.c.id == countermeasure_id
                )
            )

    @staticmethod
    def _rules_to_json(countermeasure: Countermeasure) -> Dict[str, List[Any]]:
        rules = countermeasure.applicability_rules
        if isinstance(rules, IntersectionApplicabilityRules):
            return {
                "intersection_types": sorted(t.value for t in rules.intersection_types),
                "control_types": sorted(t.value for t in rules.control_types),
            }
        return {
            "road_classifications": sorted(c.value for c in rules.road_classifications)
        }

    @staticmethod
    def _rules_from_json(target_type: TargetType, data: Dict[str, List[Any]]):
        if target_type is TargetType.INTERSECTION:
            return IntersectionApplicabilityRules(
                intersection_types=frozenset(
                    IntersectionType(v) for v in data.get("intersection_types", [])
                ),
                control_types=frozenset(
                    IntersectionControlType(v) for v in data.get("control_types", [])
                ),
            )
        return RoadSegmentApplicabilityRules(
            road_classifications=frozenset(
                RoadClassification(int(v)) for v in data.get("road_classifications", [])
            )
        )

    def _countermeasure_values(self, countermeasure: Countermeasure) -> Dict[str, Any]:
        return {
            "id": countermeasure.id,
            "name": countermeasure.name,
            "target_type": countermeasure.target_type.value,
            "applicability_rules": self._rules_to_json(countermeasure),
            "affected_collision_types": sorted(
                c.value for c in countermeasure.affected_collision_types
            ),
            "affected_severities": sorted(
                s.value for s in countermeasure.affected_severities
            ),
            "cmf": countermeasure.cmf,
            "lifecycle_status": countermeasure.lifecycle_status.value,
            "implementation_cost_amount": countermeasure.implementation_cost.amount,
            "implementation_cost_currency": countermeasure.implementation_cost.currency,
            "expected_annual_savings": countermeasure.expected_annual_savings,
            "evidence": countermeasure.evidence,
        }

    def _row_to_countermeasure(self, row) -> Countermeasure:
        target_type = TargetType(row["target_type"])
        return Countermeasure(
            id=row["id"],
            name=row["name"],
            target_type=target_type,
            applicability_rules=self._rules_from_json(
                target_type, row["applicability_rules"] or {}
            ),
            affected_collision_types=frozenset(
                CollisionType(v) for v in row["affected_collision_types"] or []
            ),
            affected_severities=frozenset(
                InjurySeverity(v) for v in row["affected_severities"] or []
            ),
            cmf=float(row["cmf"]),
            lifecycle_status=LifecycleStatus(row["lifecycle_status"]),
            implementation_cost=MonetaryAmount(
                float(row["implementation_cost_amount"]),
                row["implementation_cost_currency"],
            ),
            expected_annual_savings=row["expected_annual_savings"],
            evidence=row["evidence"],
        )


class SqlProjectRepository(_SqlRepository, ProjectStore):
    """
    Remediation projects; both cost amounts share the ``currency`` column.
    """

    def all(self) -> List[Project]:
        return self._select()

    def find_by_id(self, project_id: int) -> Optional[Project]:
        projects = self._select(projects_table.c.id == project_id)
        return projects[0] if projects else None

    def find_by_hotspot(self, hotspot_id: int) -> List[Project]:
        return self._select(projects_table.c.hotspot_id == hotspot_id)

    def find_by_countermeasure(self, countermeasure_id: int) -> List[Project]:
        return self._select(projects_table.c.countermeasure_id == countermeasure_id)

    def find_by_status(self, status: ProjectStatus) -> List[Project]:
        return self._select(projects_table.c.status == status.value)

    def save(self, project: Project) -> None:
        self._insert(projects_table, self._project_values(project), "Project")

    def update(self, project: Project) -> None:
        self._update(projects_table, project.id, self._project_values(project), "Project")

    def delete(self, project_id: int) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(projects_table).where(projects_table.c.id == project_id))

    def _select(self, *conditions) -> List[Project]:
        query = select(projects_table).order_by(projects_table.c.id)
        if conditions:
            query = query.where(*conditions)
        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [self._row_to_project(row) for row in rows]

    @staticmethod
    def _project_values(project: Project) -> Dict[str, Any]:
        if project.expected_cost.currency != project.actual_cost.currency:
            raise ValueError("Expected and actual cost use different currencies")
        return {
            "id": project.id,
            "countermeasure_id": project.countermeasure_id,
            "hotspot_id": project.hotspot_id,
            "period_start": project.period.start,
            "period_end": project.period.end,
            "expected_cost_amount": project.expected_cost.amount,
            "actual_cost_amount": project.actual_cost.amount,
            "currency": project.expected_cost.currency,
            "status": project.status.value,
        }

    @staticmethod
    def _row_to_project(row) -> Project:
        return Project(
            id=row["id"],
            countermeasure_id=row["countermeasure_id"],
            hotspot_id=row["hotspot_id"],
            period=TimePeriod(row["period_start"], row["period_end"]),
            expected_cost=MonetaryAmount(float(row["expected_cost_amount"]), row["currency"]),
            actual_cost=MonetaryAmount(float(row["actual_cost_amount"]), row["currency"]),
            status=ProjectStatus(row["status"]),
        )
