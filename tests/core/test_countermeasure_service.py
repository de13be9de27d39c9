"""
Unit tests for countermeasure management and matching.
"""

import logging
import pytest
from dataclasses import replace
from unittest.mock import MagicMock

from mock_data import make_countermeasure, make_hotspot

from roadsafety.exceptions import DuplicateIdentifierError, NotFoundError
from roadsafety.models import (
    CollisionType,
    InjurySeverity,
    LifecycleStatus,
    LocationType,
    TargetType,
)
from roadsafety.repositories import InMemoryCountermeasureStore
from roadsafety.repositories.base import CountermeasureStore
from roadsafety.schemas.countermeasure import CountermeasureFilter
from roadsafety.services.countermeasure_service import CountermeasureService


@pytest.fixture
def store():
    return InMemoryCountermeasureStore()


@pytest.fixture
def service(store):
    return CountermeasureService(store)


class TestCountermeasureCrud:
    """Test create, update and delete."""

    def test_create_and_find(self, service):
        service.create(make_countermeasure(1, name="Protected left turn"))

        assert service.find_by_id(1).name == "Protected left turn"
        assert service.find_by_id(2) is None

    def test_create_duplicate_raises(self, service):
        service.create(make_countermeasure(1))

        with pytest.raises(DuplicateIdentifierError):
            service.create(make_countermeasure(1))

    def test_update_missing_raises_before_write(self):
        mock_store = MagicMock(spec=CountermeasureStore)
        mock_store.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            CountermeasureService(mock_store).update(make_countermeasure(7))

        mock_store.update.assert_not_called()

    def test_update_changes_lifecycle(self, service, store):
        service.create(make_countermeasure(3))

        service.update(replace(make_countermeasure(3), lifecycle_status=LifecycleStatus.RETIRED))

        assert store.find_by_id(3).lifecycle_status is LifecycleStatus.RETIRED

    def test_delete(self, service, store):
        service.create(make_countermeasure(4))

        service.delete(4)

        assert store.all() == []
        with pytest.raises(NotFoundError):
            service.delete(4)


class TestCountermeasureMatching:
    """Test find_for_target and find_for_hotspot."""

    def test_sorted_by_ascending_cmf(self, service):
        """Test the most effective countermeasure (lowest CMF) comes first."""
        for cm_id, cmf in [(1, 0.9), (2, 0.6), (3, 0.75)]:
            service.create(make_countermeasure(cm_id, cmf=cmf))

        results = service.find_for_target(CountermeasureFilter(target_type="intersection"))

        assert [cm.id for cm in results] == [2, 3, 1]

    def test_subset_semantics(self, service):
        """Test the countermeasure must affect every requested type and severity."""
        service.create(make_countermeasure(1))
        service.create(make_countermeasure(
            2, collision_types=[CollisionType.REAR_END], severities=[InjurySeverity.FATAL],
        ))

        both = service.find_for_target(CountermeasureFilter(
            target_type=TargetType.INTERSECTION,
            affected_collision_types=[CollisionType.REAR_END, CollisionType.ANGLE],
            affected_severities=[InjurySeverity.FATAL],
        ))
        rear_end_only = service.find_for_target(CountermeasureFilter(
            target_type=TargetType.INTERSECTION,
            affected_collision_types=[CollisionType.REAR_END],
        ))

        assert [cm.id for cm in both] == [1]
        assert {cm.id for cm in rear_end_only} == {1, 2}

    def test_target_type_and_status_filters(self, service):
        service.create(make_countermeasure(1, status=LifecycleStatus.APPROVED))
        service.create(make_countermeasure(2, status=LifecycleStatus.RETIRED))
        service.create(make_countermeasure(3, target_type=TargetType.ROAD_SEGMENT))

        default = service.find_for_target(CountermeasureFilter(target_type=TargetType.INTERSECTION))
        retired = service.find_for_target(CountermeasureFilter(
            target_type=TargetType.INTERSECTION,
            allowed_statuses=[LifecycleStatus.RETIRED],
        ))

        assert [cm.id for cm in default] == [1]
        assert [cm.id for cm in retired] == [2]

    def test_store_results_are_rechecked(self):
        """Test results from a loose store are still filtered and sorted."""
        mock_store = MagicMock(spec=CountermeasureStore)
        mock_store.find_by_criteria.return_value = [
            make_countermeasure(1, cmf=0.9),
            make_countermeasure(2, cmf=0.5, target_type=TargetType.ROAD_SEGMENT),
            make_countermeasure(3, cmf=0.7, status=LifecycleStatus.RETIRED),
            make_countermeasure(4, cmf=0.4),
        ]

        results = CountermeasureService(mock_store).find_for_target(
            CountermeasureFilter(target_type=TargetType.INTERSECTION)
        )

        assert [cm.id for cm in results] == [4, 1]

    def test_no_match_returns_empty_list(self, service):
        service.create(make_countermeasure(1))

        results = service.find_for_target(CountermeasureFilter(
            target_type=TargetType.INTERSECTION,
            affected_collision_types=[CollisionType.HEAD_ON],
        ))

        assert results == []

    def test_find_for_hotspot_uses_location_type(self, service):
        service.create(make_countermeasure(1, target_type=TargetType.INTERSECTION))
        service.create(make_countermeasure(2, target_type=TargetType.ROAD_SEGMENT))

        results = service.find_for_hotspot(
            make_hotspot(9, location_type=LocationType.ROAD_SEGMENT),
            collision_types=[CollisionType.ANGLE],
        )

        assert [cm.id for cm in results] == [2]

    def test_matching_is_logged(self, service, caplog):
        caplog.set_level(logging.INFO, logger="roadsafety.services.countermeasure_service")
        service.create(make_countermeasure(1))

        service.find_for_target(CountermeasureFilter(target_type=TargetType.INTERSECTION))

        record = next(
            r for r in caplog.records
            if r.getMessage() == "Countermeasures retrieved for hotspot applicability"
        )
        assert record.context["targetType"] == "intersection"
        assert record.context["count"] == 1
