"""
Tests for the SQLAlchemy repositories against an in-memory SQLite database.
"""

import pytest
from dataclasses import replace
from datetime import datetime

from sqlalchemy import create_engine, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from mock_data import (
    OCTOBER_2025,
    make_accident,
    make_countermeasure,
    make_hotspot,
    make_project,
)

from roadsafety.db.tables import accidents_table, hotspots_table, metadata
from roadsafety.exceptions import (
    DuplicateIdentifierError,
    InvalidLocationError,
    LocationConflictError,
    RoadSafetyError,
)
from roadsafety.models import (
    CollisionType,
    HotspotStatus,
    InjurySeverity,
    IntersectionApplicabilityRules,
    IntersectionControlType,
    IntersectionLocation,
    IntersectionType,
    LifecycleStatus,
    LocationType,
    MonetaryAmount,
    ProjectStatus,
    RoadClassification,
    RoadSegmentApplicabilityRules,
    RoadSegmentLocation,
    TargetType,
    TimePeriod,
)
from roadsafety.repositories.sql import (
    SqlAccidentRepository,
    SqlCountermeasureRepository,
    SqlHotspotRepository,
    SqlProjectRepository,
    translate_integrity_error,
)
from roadsafety.schemas.hotspot import HotspotSearchCriteria
from roadsafety.services.hotspot_service import HotspotService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


class TestSqlAccidentRepository:
    """Test accident persistence."""

    def test_save_and_read_back(self, engine):
        repo = SqlAccidentRepository(engine)
        repo.save(make_accident(2, 10, cost=500.0, severity=InjurySeverity.SERIOUS,
                                collision_type=CollisionType.REAR_END))
        repo.save(make_accident(1, 20, location_type=LocationType.INTERSECTION))

        accidents = repo.all()

        assert [a.id for a in accidents] == [1, 2]
        assert accidents[0].location == IntersectionLocation(20)
        assert accidents[1].location == RoadSegmentLocation(10, 0.0)
        assert accidents[1].severity is InjurySeverity.SERIOUS
        assert accidents[1].collision_type is CollisionType.REAR_END
        assert accidents[1].occurred_at == datetime(2025, 10, 15, 12, 0)

    def test_rows_without_location_are_skipped(self, engine):
        with engine.begin() as conn:
            conn.execute(insert(accidents_table).values(
                id=1, occurred_at=datetime(2025, 10, 1), cost=100.0, injured_persons_count=0,
            ))
        repo = SqlAccidentRepository(engine)
        repo.save(make_accident(2, 10))

        assert [a.id for a in repo.all()] == [2]

    def test_duplicate_id_raises(self, engine):
        repo = SqlAccidentRepository(engine)
        repo.save(make_accident(1, 10))

        with pytest.raises(DuplicateIdentifierError):
            repo.save(make_accident(1, 11))


class TestSqlHotspotRepository:
    """Test hotspot CRUD and search."""

    def test_round_trip(self, engine):
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1, location_id=7, location_type=LocationType.INTERSECTION))

        hotspot = repo.find_by_id(1)

        assert hotspot.location == IntersectionLocation(7)
        assert hotspot.period == OCTOBER_2025
        assert hotspot.observed_crashes.as_dict() == {"pdo": 2, "injury": 1}
        assert hotspot.screening_parameters["method"] == "cost_threshold"
        assert repo.find_by_id(2) is None

    def test_duplicate_id_raises(self, engine):
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1))

        with pytest.raises(DuplicateIdentifierError):
            repo.save(make_hotspot(1))

    def test_update_and_delete(self, engine):
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1))

        repo.update(replace(make_hotspot(1), status=HotspotStatus.REVIEWED, risk_score=12.5))
        assert repo.find_by_id(1).status is HotspotStatus.REVIEWED
        assert repo.find_by_id(1).risk_score == 12.5

        repo.delete(1)
        assert repo.all() == []

    def test_search_filters_and_orders(self, engine):
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1, location_id=5, risk_score=40.0))
        repo.save(make_hotspot(2, location_id=7, risk_score=90.0))
        repo.save(make_hotspot(3, location_id=6, risk_score=20.0))
        repo.save(make_hotspot(4, location_id=8, risk_score=95.0, status=HotspotStatus.ADDRESSED))
        repo.save(make_hotspot(5, location_id=5, location_type=LocationType.INTERSECTION, risk_score=60.0))

        results = repo.search(HotspotSearchCriteria(status="open", min_risk_score=30))
        by_segment = repo.search(HotspotSearchCriteria(road_segment_id=5))

        assert [h.id for h in results] == [2, 5, 1]
        assert [h.id for h in by_segment] == [1]

    def test_one_open_hotspot_per_location(self, engine):
        """Test a second open hotspot at the same location is rejected as a duplicate."""
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1, location_id=5))
        repo.save(make_hotspot(2, location_id=5, status=HotspotStatus.ADDRESSED))
        repo.save(make_hotspot(3, location_id=5, location_type=LocationType.INTERSECTION))

        with pytest.raises(LocationConflictError):
            repo.save(make_hotspot(4, location_id=5))

        assert sorted(h.id for h in repo.all()) == [1, 2, 3]

    def test_reopening_at_conflicting_location_raises_domain_error(self, engine):
        """Test an update violating the open-hotspot index surfaces a domain error."""
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1, location_id=5))
        repo.save(make_hotspot(2, location_id=5, status=HotspotStatus.ADDRESSED))

        with pytest.raises(LocationConflictError) as exc_info:
            HotspotService(repo).update(replace(make_hotspot(2, location_id=5), status=HotspotStatus.OPEN))

        assert isinstance(exc_info.value, RoadSafetyError)
        assert exc_info.value.entity_id == 2
        assert repo.find_by_id(2).status is HotspotStatus.ADDRESSED

    def test_row_with_two_locations_rejected_as_invalid_location(self, engine):
        repo = SqlHotspotRepository(engine)
        values = SqlHotspotRepository._hotspot_values(make_hotspot(1))
        values["intersection_id"] = 9

        with pytest.raises(InvalidLocationError):
            repo._insert(hotspots_table, values, "Hotspot")

        assert repo.all() == []

    def test_search_period_overlap(self, engine):
        repo = SqlHotspotRepository(engine)
        repo.save(make_hotspot(1, period=TimePeriod(datetime(2025, 1, 1), datetime(2025, 3, 31))))
        repo.save(make_hotspot(2, location_id=101, period=TimePeriod(datetime(2025, 6, 1), datetime(2025, 6, 30))))

        results = repo.search(HotspotSearchCriteria(
            period=TimePeriod(datetime(2025, 3, 1), datetime(2025, 5, 1)),
        ))

        assert [h.id for h in results] == [1]


class TestSqlCountermeasureRepository:
    """Test countermeasure persistence and criteria lookup."""

    def test_round_trip_with_rules(self, engine):
        repo = SqlCountermeasureRepository(engine)
        countermeasure = replace(
            make_countermeasure(1),
            applicability_rules=IntersectionApplicabilityRules(
                intersection_types=frozenset({IntersectionType.TRAFFIC_LIGHT}),
                control_types=frozenset({IntersectionControlType.SIGNALLED}),
            ),
        )
        repo.save(countermeasure)

        assert repo.find_by_id(1) == countermeasure

    def test_road_segment_rules_round_trip(self, engine):
        repo = SqlCountermeasureRepository(engine)
        countermeasure = replace(
            make_countermeasure(2, target_type=TargetType.ROAD_SEGMENT),
            applicability_rules=RoadSegmentApplicabilityRules(
                road_classifications=frozenset({RoadClassification.FIVE, RoadClassification.SIX}),
            ),
        )
        repo.save(countermeasure)

        loaded = repo.find_by_id(2)

        assert loaded.applicability_rules.road_classifications == {
            RoadClassification.FIVE, RoadClassification.SIX,
        }

    def test_find_by_criteria(self, engine):
        repo = SqlCountermeasureRepository(engine)
        repo.save(make_countermeasure(1))
        repo.save(make_countermeasure(2, status=LifecycleStatus.RETIRED))
        repo.save(make_countermeasure(3, target_type=TargetType.ROAD_SEGMENT))

        found = repo.find_by_criteria(
            TargetType.INTERSECTION, [LifecycleStatus.APPROVED, LifecycleStatus.PROPOSED]
        )

        assert [cm.id for cm in found] == [1]
        assert repo.find_by_criteria(TargetType.INTERSECTION, []) == []

    def test_update_delete_and_duplicates(self, engine):
        repo = SqlCountermeasureRepository(engine)
        repo.save(make_countermeasure(1))

        with pytest.raises(DuplicateIdentifierError):
            repo.save(make_countermeasure(1))

        repo.update(replace(make_countermeasure(1), cmf=0.55))
        assert repo.find_by_id(1).cmf == 0.55

        repo.delete(1)
        assert repo.find_by_id(1) is None


class TestSqlProjectRepository:
    """Test project persistence and lookups."""

    def test_round_trip(self, engine):
        repo = SqlProjectRepository(engine)
        project = make_project(1, actual_cost=12500.0, status=ProjectStatus.APPROVED)
        repo.save(project)

        assert repo.find_by_id(1) == project
        assert repo.find_by_id(2) is None

    def test_lookups(self, engine):
        repo = SqlProjectRepository(engine)
        repo.save(make_project(3, hotspot_id=10, countermeasure_id=1))
        repo.save(make_project(1, hotspot_id=10, countermeasure_id=2, status=ProjectStatus.APPROVED))
        repo.save(make_project(2, hotspot_id=11, countermeasure_id=2))

        assert [p.id for p in repo.all()] == [1, 2, 3]
        assert [p.id for p in repo.find_by_hotspot(10)] == [1, 3]
        assert [p.id for p in repo.find_by_countermeasure(2)] == [1, 2]
        assert [p.id for p in repo.find_by_status(ProjectStatus.PROPOSED)] == [2, 3]

    def test_update_delete_and_duplicates(self, engine):
        repo = SqlProjectRepository(engine)
        repo.save(make_project(1))

        with pytest.raises(DuplicateIdentifierError):
            repo.save(make_project(1))

        repo.update(make_project(1, status=ProjectStatus.APPROVED, actual_cost=100.0))
        assert repo.find_by_id(1).status is ProjectStatus.APPROVED
        assert repo.find_by_id(1).actual_cost == MonetaryAmount(100.0)

        repo.delete(1)
        assert repo.all() == []


def _integrity_error(message):
    return IntegrityError("INSERT INTO hotspots ...", {}, Exception(message))


class TestTranslateIntegrityError:
    """Test mapping of driver constraint messages onto domain errors."""

    @pytest.mark.parametrize("message", [
        "CHECK constraint failed: hotspots_one_location",
        'new row for relation "hotspots" violates check constraint "hotspots_one_location"',
    ])
    def test_check_constraint_is_invalid_location(self, message):
        error = translate_integrity_error(_integrity_error(message), "Hotspot", 1)

        assert isinstance(error, InvalidLocationError)

    @pytest.mark.parametrize("message", [
        "UNIQUE constraint failed: hotspots.road_segment_id",
        "UNIQUE constraint failed: hotspots.intersection_id",
        'duplicate key value violates unique constraint "hotspots_open_intersection"',
    ])
    def test_open_location_index_is_location_conflict(self, message):
        error = translate_integrity_error(_integrity_error(message), "Hotspot", 1)

        assert isinstance(error, LocationConflictError)

    @pytest.mark.parametrize("message", [
        "UNIQUE constraint failed: hotspots.id",
        'duplicate key value violates unique constraint "hotspots_pkey"',
    ])
    def test_primary_key_is_duplicate_identifier(self, message):
        error = translate_integrity_error(_integrity_error(message), "Hotspot", 7)

        assert type(error) is DuplicateIdentifierError
        assert str(error) == "Hotspot with ID 7 already exists"
