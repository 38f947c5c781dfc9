"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Parking-Aware Trip Planner API"
    api_prefix: str = "/api/v1"
    default_timezone: str = Field(
        default="America/Vancouver",
        description="IANA timezone whose local calendar governs meter rates.",
    )

    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="API key for the Google Maps Distance Matrix and Geocoding APIs.",
    )
    google_maps_base_url: str = Field(default="https://maps.googleapis.com/maps/api")
    parking_data_url: str = Field(
        default="https://opendata.vancouver.ca/api/explore/v2.1/catalog/datasets/parking-meters/records",
        description="Open-data records endpoint for parking meters.",
    )
    http_timeout_seconds: float = Field(default=30.0, gt=0.0)
    collaborator_max_retries: int = Field(default=3, ge=0)
    collaborator_backoff_seconds: float = Field(default=1.0, ge=0.0)

    parking_search_radius_km: float = Field(default=1.0, gt=0.0)
    max_meters_per_stop: int = Field(default=10, ge=1)
    parking_page_limit: int = Field(default=100, ge=1, le=100)
    walking_speed_kmh: float = Field(default=5.0, gt=0.0)

    max_exhaustive_stops: int = Field(
        default=6,
        ge=2,
        description="Largest stop count planned by full permutation; above it a heuristic ordering is used.",
    )
    max_parallel_evaluations: int = Field(default=8, ge=1)
    planning_deadline_seconds: float = Field(default=30.0, gt=0.0)

    default_cost_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    default_time_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    min_weight_sum: float = Field(default=0.9, ge=0.0)
    max_weight_sum: float = Field(default=1.1, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @model_validator(mode="after")
    def _check_weight_bounds(self) -> "Settings":
        if self.min_weight_sum > self.max_weight_sum:
            raise ValueError("min_weight_sum must not exceed max_weight_sum.")
        return self


settings = Settings()
