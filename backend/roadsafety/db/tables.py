"""
SQLAlchemy Core table definitions.

Accidents and hotspots reference a location through two nullable columns;
exactly one of ``road_segment_id`` / ``intersection_id`` is set per row.
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)

metadata = MetaData()

_ONE_LOCATION = "(road_segment_id IS NULL) <> (intersection_id IS NULL)"

accidents_table = Table(
    "accidents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("occurred_at", DateTime, nullable=False, index=True),
    Column("road_segment_id", Integer, nullable=True, index=True),
    Column("intersection_id", Integer, nullable=True, index=True),
    Column("distance_from_start", Float, nullable=True),
    Column("cost", Float, nullable=False),
    Column("severity", String(16), nullable=True),
    Column("collision_type", String(32), nullable=True),
    Column("cause_factor", String(32), nullable=True),
    Column("weather_condition", String(32), nullable=True),
    Column("road_condition", String(32), nullable=True),
    Column("visibility_condition", String(32), nullable=True),
    Column("injured_persons_count", Integer, nullable=False, default=0),
)

hotspots_table = Table(
    "hotspots",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("road_segment_id", Integer, nullable=True, index=True),
    Column("intersection_id", Integer, nullable=True, index=True),
    Column("period_start", DateTime, nullable=False),
    Column("period_end", DateTime, nullable=False),
    Column("observed_crashes", JSON, nullable=False),
    Column("expected_crashes", Float, nullable=False),
    Column("risk_score", Float, nullable=False, index=True),
    Column("status", String(16), nullable=False),
    Column("screening_parameters", JSON, nullable=True),
    CheckConstraint(_ONE_LOCATION, name="hotspots_one_location"),
)

# At most one open hotspot per location
_OPEN = text("status = 'open'")
Index(
    "hotspots_open_road_segment",
    hotspots_table.c.road_segment_id,
    unique=True,
    postgresql_where=_OPEN,
    sqlite_where=_OPEN,
)
Index(
    "hotspots_open_intersection",
    hotspots_table.c.intersection_id,
    unique=True,
    postgresql_where=_OPEN,
    sqlite_where=_OPEN,
)

countermeasures_table = Table(
    "countermeasures",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(255), nullable=False),
    Column("target_type", String(16), nullable=False, index=True),
    Column("applicability_rules", JSON, nullable=False),
    Column("affected_collision_types", JSON, nullable=False),
    Column("affected_severities", JSON, nullable=False),
    Column("cmf", Float, nullable=False),
    Column("lifecycle_status", String(16), nullable=False),
    Column("implementation_cost_amount", Float, nullable=False),
    Column("implementation_cost_currency", String(3), nullable=False),
    Column("expected_annual_savings", Float, nullable=True),
    Column("evidence", Text, nullable=True),
)

projects_table = Table(
    "projects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("countermeasure_id", Integer, nullable=False, index=True),
    Column("hotspot_id", Integer, nullable=False, index=True),
    Column("period_start", DateTime, nullable=False),
    Column("period_end", DateTime, nullable=False),
    Column("expected_cost_amount", Float, nullable=False),
    Column("actual_cost_amount", Float, nullable=False),
    Column("currency", String(3), nullable=False),
    Column("status", String(16), nullable=False, index=True),
)
