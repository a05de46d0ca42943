"""
Geospatial geometry functions for survey coverage analysis.

Provides great-circle distances using the haversine formula, plus the
bounding-box helpers used to size building queries and local projections.
"""
import math
from typing import Iterable, Optional

import numpy as np

from field_coverage.core.models import BoundingBox, GeoPoint


# Earth's radius in meters (mean radius)
EARTH_RADIUS_M = 6371000.0

# Flat-earth conversion used for padding and local projections
METERS_PER_DEGREE_LAT = 111320.0

# Floor for the longitude scale so polar boxes do not divide by zero
MIN_METERS_PER_DEGREE_LON = 1e-6


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points using Haversine formula.

    Args:
        lat1: Latitude of first point (decimal degrees)
        lon1: Longitude of first point (decimal degrees)
        lat2: Latitude of second point (decimal degrees)
        lon2: Longitude of second point (decimal degrees)

    Returns:
        Distance in meters. NaN input yields NaN.

    Example:
        >>> # Dodoma to Morogoro (Tanzania)
        >>> distance = haversine_distance(-6.1630, 35.7516, -6.8278, 37.6591)
        >>> print(f"{distance/1000:.0f} km")
        223 km

    References:
        https://en.wikipedia.org/wiki/Haversine_formula
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2)) ** 2 + \
        math.cos(lat1_rad) * math.cos(lat2_rad) * (math.sin(dlon / 2)) ** 2

    # Rounding can push a just past 1 for antipodal points; NaN passes through
    if a > 1.0:
        a = 1.0
    elif a < 0.0:
        a = 0.0

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def point_distance(p1, p2) -> float:
    """Haversine distance in meters between two objects with lat/lon attributes."""
    return haversine_distance(p1.lat, p1.lon, p2.lat, p2.lon)


def haversine_distances(lat: float, lon: float, lats, lons) -> np.ndarray:
    """
    Vectorised haversine distance from one origin to many points.

    Args:
        lat: Origin latitude (decimal degrees)
        lon: Origin longitude (decimal degrees)
        lats: Array-like of latitudes
        lons: Array-like of longitudes

    Returns:
        numpy array of distances in meters
    """
    lat_rad = np.radians(lat)
    lats_rad = np.radians(np.asarray(lats, dtype=float))
    dlat = lats_rad - lat_rad
    dlon = np.radians(np.asarray(lons, dtype=float) - lon)

    a = np.sin(dlat / 2) ** 2 + np.cos(lat_rad) * np.cos(lats_rad) * np.sin(dlon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def meters_per_degree_lon(latitude: float) -> float:
    """Meters spanned by one degree of longitude at the given latitude."""
    return max(MIN_METERS_PER_DEGREE_LON, METERS_PER_DEGREE_LAT * math.cos(math.radians(latitude)))


def calculate_bounding_box(points: Iterable) -> Optional[BoundingBox]:
    """
    Bounding box of objects with lat/lon attributes.

    Returns:
        BoundingBox, or None for empty input or any non-finite coordinate
    """
    lats = []
    lons = []
    for point in points:
        lats.append(point.lat)
        lons.append(point.lon)

    if not lats:
        return None

    south, north = min(lats), max(lats)
    west, east = min(lons), max(lons)

    # min/max skip NaN depending on position, so check every value
    if not all(math.isfinite(v) for v in lats) or not all(math.isfinite(v) for v in lons):
        return None

    return BoundingBox(south=south, west=west, north=north, east=east)


def expand_bounding_box(bbox: BoundingBox, padding_meters: float) -> BoundingBox:
    """
    Grow a bounding box by a distance in meters on every side.

    Args:
        bbox: Box to expand
        padding_meters: Padding applied to each edge

    Returns:
        Expanded box clamped to [-90, 90] latitude and [-180, 180] longitude

    Example:
        >>> box = BoundingBox(south=-6.80, west=37.60, north=-6.79, east=37.61)
        >>> padded = expand_bounding_box(box, 800)
        >>> round(box.south - padded.south, 5)
        0.00719
    """
    lat_center = (bbox.north + bbox.south) / 2
    lat_padding = padding_meters / METERS_PER_DEGREE_LAT
    lon_padding = padding_meters / meters_per_degree_lon(lat_center)

    return BoundingBox(
        south=max(-90.0, bbox.south - lat_padding),
        west=max(-180.0, bbox.west - lon_padding),
        north=min(90.0, bbox.north + lat_padding),
        east=min(180.0, bbox.east + lon_padding),
    )


def format_bounding_box(bbox: BoundingBox) -> str:
    """
    Format a box as ``south,west,north,east`` with six decimals.

    This is the key building-footprint callers cache their responses under.
    """
    return ','.join(f"{value:.6f}" for value in (bbox.south, bbox.west, bbox.north, bbox.east))


def arithmetic_centroid(points) -> GeoPoint:
    """
    Plain mean of latitudes and longitudes.

    Only meaningful at village scale (a few km); it ignores curvature and
    breaks across the antimeridian.
    """
    count = len(points)
    return GeoPoint(
        sum(p.lat for p in points) / count,
        sum(p.lon for p in points) / count,
    )
