"""Configuration settings for the SkyTrack backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from skytrack.models.geo import BoundingBox

logger = logging.getLogger("skytrack.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", env_var, value, default)
        return default


def _get_int(env_var: str, default: int) -> int:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", env_var, value, default)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skytrack_env: str = os.getenv("SKYTRACK_ENV", "local")
    log_level: str = os.getenv("SKYTRACK_LOG_LEVEL", "INFO")

    # Hourly balloon history
    balloon_url_template: str = os.getenv(
        "BALLOON_URL_TEMPLATE",
        "https://a.windbornesystems.com/treasure/{hour}.json",
    )
    balloon_source_prefix: str = os.getenv("BALLOON_SOURCE_PREFIX", "WBS")
    balloon_timeout: float = _get_float("BALLOON_TIMEOUT", 25.0)
    balloon_result_cap: int = _get_int("BALLOON_RESULT_CAP", 50)

    # Region of interest (North America unless overridden)
    region_filter_enabled: bool = _get_bool("REGION_FILTER_ENABLED", default=True)
    region_min_lat: float = _get_float("REGION_MIN_LAT", 15.0)
    region_max_lat: float = _get_float("REGION_MAX_LAT", 85.0)
    region_min_lon: float = _get_float("REGION_MIN_LON", -170.0)
    region_max_lon: float = _get_float("REGION_MAX_LON", -50.0)

    # Live aircraft feed
    aircraft_base_url: str = os.getenv(
        "AIRCRAFT_BASE_URL",
        "https://opensky-network.org/api/states/all",
    )
    aircraft_timeout: float = _get_float("AIRCRAFT_TIMEOUT", 20.0)
    aircraft_retries: int = _get_int("AIRCRAFT_RETRIES", 2)
    aircraft_backoff_seconds: float = _get_float("AIRCRAFT_BACKOFF_SECONDS", 1.0)

    # Padding (degrees) applied around the balloon set when querying aircraft
    bounds_padding_deg: float = _get_float("BOUNDS_PADDING_DEG", 5.0)

    @property
    def region_bounds(self) -> BoundingBox:
        """Configured region coordinates, regardless of the filter switch."""

        return BoundingBox(
            min_lat=self.region_min_lat,
            min_lon=self.region_min_lon,
            max_lat=self.region_max_lat,
            max_lon=self.region_max_lon,
        )

    @property
    def region_box(self) -> BoundingBox | None:
        """Region of interest, or None when region filtering is disabled."""

        return self.region_bounds if self.region_filter_enabled else None


settings = Settings()

__all__ = ["settings", "Settings"]
