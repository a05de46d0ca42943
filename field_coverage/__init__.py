"""
Field Coverage: spatial analysis for household survey tracking.

Removes stray GPS fixes from household submissions and finds parts of a
village the survey has missed by comparing households to building density
on a hexagonal grid.
"""
from field_coverage.core.models import GeoPoint, BoundingBox, GapRecord, SpotType
from field_coverage.analysis.outliers import OutlierFilter, OutlierFilterParams, remove_outliers
from field_coverage.analysis.coverage_gaps import (
    CoverageGapDetector,
    GapClassifier,
    GapDetectionParams,
    detect_hex_gaps,
)

__version__ = "0.1.0"

__all__ = [
    'GeoPoint',
    'BoundingBox',
    'GapRecord',
    'SpotType',
    'OutlierFilter',
    'OutlierFilterParams',
    'remove_outliers',
    'CoverageGapDetector',
    'GapClassifier',
    'GapDetectionParams',
    'detect_hex_gaps',
]
