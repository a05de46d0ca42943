"""
Core spatial modules for survey coverage analysis.

Contains the geometry, robust statistics and hex binning building blocks
used by the outlier filter and gap classifier.
"""
from field_coverage.core.models import (
    GeoPoint,
    BoundingBox,
    GapRecord,
    SpotType,
)
from field_coverage.core.geometry import (
    haversine_distance,
    haversine_distances,
    point_distance,
    calculate_bounding_box,
    expand_bounding_box,
    format_bounding_box,
    EARTH_RADIUS_M,
    METERS_PER_DEGREE_LAT,
)
from field_coverage.core.statistics import median, mad, round_half_up
from field_coverage.core.hexgrid import (
    HexCell,
    HexGrid,
    HexGridBinner,
    LocalProjection,
    cube_round,
)

__all__ = [
    'GeoPoint',
    'BoundingBox',
    'GapRecord',
    'SpotType',
    'haversine_distance',
    'haversine_distances',
    'point_distance',
    'calculate_bounding_box',
    'expand_bounding_box',
    'format_bounding_box',
    'EARTH_RADIUS_M',
    'METERS_PER_DEGREE_LAT',
    'median',
    'mad',
    'round_half_up',
    'HexCell',
    'HexGrid',
    'HexGridBinner',
    'LocalProjection',
    'cube_round',
]
