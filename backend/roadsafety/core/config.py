from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    """

    # Project metadata
    PROJECT_NAME: str = "Road Safety Core"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level used by the screening job"
    )

    # PostgreSQL database configuration
    DATABASE_URL: str = Field(
        "postgresql+psycopg://roadsafety:roadsafety_dev@db:5432/roadsafety",
        description="SQLAlchemy connection string"
    )
    DB_POOL_SIZE: int = Field(
        5,
        description="Number of database connections to maintain in pool"
    )
    DB_MAX_OVERFLOW: int = Field(
        10,
        description="Maximum overflow connections beyond pool size"
    )

    # Screening settings
    SCREENING_THRESHOLD: float = Field(
        default=1000.0,
        description="Aggregate cost a location must exceed to become a candidate"
    )
    SCREENING_LOOKBACK_DAYS: int = Field(
        default=365, ge=1, description="Default screening window ending today"
    )
    SCREENING_ACCEPT_TOP: int = Field(
        default=1,
        ge=0,
        description="Candidates per location type turned into hotspots by the job",
    )

    # Cost model settings
    COST_MODEL: str = Field(
        default="simple", description="Cost estimation strategy: simple | advanced"
    )
    ADVANCED_COST_FIXED_OVERHEAD: float = Field(
        default=1000.0, ge=0.0, description="Overhead added by the advanced estimator"
    )

    # Accident read cache (0 disables caching)
    ACCIDENT_CACHE_TTL_SECONDS: int = Field(default=60, ge=0)

    DEFAULT_CURRENCY: str = "USD"

    model_config = SettingsConfigDict(
        env_file="backend/.env",
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra fields from .env
    )


# Export a singleton for easy import
settings = Settings()
