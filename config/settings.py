"""Application settings using Pydantic."""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Skill matching
    risk_mismatch_penalty: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Points subtracted when a leg's risk tier is outside the crew's declared risk levels",
    )

    # Proximity scoring
    proximity_decay_km_per_point: float = Field(
        default=50.0,
        gt=0,
        description="Kilometres per proximity point lost (score reaches 0 at 100x this distance)",
    )
    neutral_proximity_score: float = Field(
        default=50.0,
        ge=0,
        le=100,
        description="Proximity score used when a preference or waypoint is missing",
    )

    # Composite ranking weights (used when a location preference exists)
    skill_weight: float = Field(default=0.5, ge=0, le=1)
    departure_weight: float = Field(default=0.25, ge=0, le=1)
    arrival_weight: float = Field(default=0.25, ge=0, le=1)

    # Crew search
    crew_search_default_limit: int = Field(
        default=10,
        ge=1,
        description="Number of crew matches returned when no limit is requested",
    )
    crew_search_max_limit: int = Field(
        default=50,
        ge=1,
        description="Upper bound on requested crew search limits",
    )
    crew_search_radius_km: float = Field(
        default=500.0,
        gt=0,
        description="Default search radius around a skipper's location (km)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional rotating log file path",
    )

    # Paths
    config_dir: Path = Field(
        default=Path(__file__).parent,
        description="Configuration directory",
    )

    @property
    def regions_path(self) -> Path:
        """Path to the cruising regions registry."""
        return self.config_dir / "regions.yaml"

    @property
    def project_root(self) -> Path:
        """Project root directory."""
        return self.config_dir.parent


# Global settings instance
settings = Settings()
