"""Pure geographic helpers."""

from .geo import EARTH_RADIUS_KM, compute_bounds, haversine_km, is_within_region

__all__ = ["EARTH_RADIUS_KM", "compute_bounds", "haversine_km", "is_within_region"]
