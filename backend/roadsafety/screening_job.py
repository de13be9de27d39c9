#!/usr/bin/env python3
"""
Screen the accident history for hotspot candidates and persist the top ones.

For each requested location type this job:
1. Screens accidents in the period against the cost threshold
2. Turns the best N candidates into open hotspots
3. Creates them through the hotspot service (duplicates count as success)

Run with:
    roadsafety-screen --threshold 1000 --start 2025-10-01 --end 2025-10-31
"""

import argparse
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional

from .core.config import Settings, settings
from .exceptions import DuplicateIdentifierError
from .models.enums import LocationType
from .models.hotspot import Hotspot
from .models.location import location_columns
from .models.values import TimePeriod
from .schemas.hotspot import HotspotCandidate, HotspotSearchCriteria
from .services.hotspot_factory import (
    ExpectedCrashesModel,
    SequentialIdAllocator,
    build_hotspot_from_candidate,
    default_expected_crashes,
    next_id_after,
)
from .services.hotspot_service import HotspotService
from .services.screening import ScreeningEngine

logger = logging.getLogger(__name__)

# Fresh IDs tried per candidate before giving up
MAX_ID_ATTEMPTS = 5


def run_screening(
    engine: ScreeningEngine,
    hotspot_service: HotspotService,
    location_types: Iterable[LocationType],
    threshold: float,
    period: TimePeriod,
    accept_top: int = 1,
    allocate_id: Optional[Callable[[], int]] = None,
    expected_crashes_model: ExpectedCrashesModel = default_expected_crashes,
) -> List[Hotspot]:
    """
    Screen each location type and create hotspots for the best candidates.

    A rejected create counts as success only when the store now holds a
    hotspot at the candidate's location; an ID taken by another location
    is retried with a fresh ID.

    Returns:
        Hotspots created during this run
    """
    if allocate_id is None:
        allocate_id = SequentialIdAllocator(
            next_id_after(h.id for h in hotspot_service.all())
        )

    created = []
    for location_type in location_types:
        candidates = engine.screen(location_type, threshold, period)
        logger.info(
            f"Found {len(candidates)} possible {location_type.value} hotspots"
        )

        for candidate in candidates[:accept_top]:
            hotspot = _create_for_candidate(
                hotspot_service,
                candidate,
                allocate_id,
                period=period,
                threshold=threshold,
                expected_crashes_model=expected_crashes_model,
            )
            if hotspot is None:
                continue

            created.append(hotspot)
            logger.info(
                f"✓ Hotspot {hotspot.id} created for {location_type.value} "
                f"{candidate.location_id} (score={candidate.score:.2f})"
            )

    return created


def _location_taken(hotspot_service: HotspotService, hotspot: Hotspot) -> bool:
    road_segment_id, intersection_id = location_columns(hotspot.location)
    criteria = HotspotSearchCriteria(
        road_segment_id=road_segment_id, intersection_id=intersection_id
    )
    return bool(hotspot_service.search(criteria))


def _create_for_candidate(
    hotspot_service: HotspotService,
    candidate: HotspotCandidate,
    allocate_id: Callable[[], int],
    period: TimePeriod,
    threshold: float,
    expected_crashes_model: ExpectedCrashesModel,
) -> Optional[Hotspot]:
    """Create one hotspot, or return None if its location is already stored."""
    for attempt in range(1, MAX_ID_ATTEMPTS + 1):
        hotspot = build_hotspot_from_candidate(
            candidate,
            hotspot_id=allocate_id(),
            period=period,
            expected_crashes_model=expected_crashes_model,
            threshold=threshold,
        )
        try:
            return hotspot_service.create(hotspot)
        except DuplicateIdentifierError as e:
            if _location_taken(hotspot_service, hotspot):
                # A concurrent run got there first
                logger.info(f"Location already has a hotspot, skipping: {e}")
                return None
            if attempt == MAX_ID_ATTEMPTS:
                raise
            logger.warning(f"Hotspot ID {hotspot.id} taken, retrying with a new ID")
    return None


def default_period(config: Settings, today: Optional[date] = None) -> TimePeriod:
    end_day = today or date.today()
    start_day = end_day - timedelta(days=config.SCREENING_LOOKBACK_DAYS - 1)
    return TimePeriod(
        datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Screen accidents for hotspot candidates and persist the top ones"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=settings.SCREENING_THRESHOLD,
        help=f"Aggregate cost threshold (default: {settings.SCREENING_THRESHOLD})",
    )
    parser.add_argument(
        "--start", type=date.fromisoformat, help="Period start date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--end", type=date.fromisoformat, help="Period end date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--location-type",
        choices=[t.value for t in LocationType],
        action="append",
        help="Location type to screen (repeatable; default: all)",
    )
    parser.add_argument(
        "--accept-top",
        type=int,
        default=settings.SCREENING_ACCEPT_TOP,
        help="Candidates per location type to turn into hotspots",
    )
    args = parser.parse_args(argv)

    if args.start and args.start > (args.end or date.today()):
        parser.error("--start must not be later than --end (or today when --end is omitted)")
    return args


def main(argv=None) -> int:
    from .db.connection import close_db, init_db
    from .repositories.caching import CachingAccidentProvider
    from .repositories.sql import SqlAccidentRepository, SqlHotspotRepository
    from .services.cost_model import build_cost_model
    from .events.notifier import LoggingNotifier

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.start or args.end:
        end_day = args.end or date.today()
        start_day = args.start or end_day - timedelta(days=settings.SCREENING_LOOKBACK_DAYS - 1)
        period = TimePeriod(
            datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)
        )
    else:
        period = default_period(settings)

    location_types = (
        [LocationType(v) for v in args.location_type]
        if args.location_type
        else list(LocationType)
    )

    logger.info("=== Hotspot Screening ===")
    db_engine = init_db(settings.DATABASE_URL, settings.DB_POOL_SIZE, settings.DB_MAX_OVERFLOW)
    try:
        accidents = SqlAccidentRepository(db_engine)
        if settings.ACCIDENT_CACHE_TTL_SECONDS > 0:
            accidents = CachingAccidentProvider(accidents, settings.ACCIDENT_CACHE_TTL_SECONDS)

        hotspot_store = SqlHotspotRepository(db_engine)
        engine = ScreeningEngine(accidents, hotspot_store, build_cost_model(settings))
        service = HotspotService(hotspot_store, notifier=LoggingNotifier())

        created = run_screening(
            engine,
            service,
            location_types,
            threshold=args.threshold,
            period=period,
            accept_top=args.accept_top,
        )
        logger.info(f"Done. {len(created)} hotspot(s) created.")
    finally:
        close_db()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
