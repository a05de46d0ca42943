"""
Analysis modules for survey coverage.

    - Outliers: drop household GPS fixes far from the village cluster
    - Coverage gaps: hex cells with too few households for their buildings
"""
from field_coverage.analysis.outliers import (
    OutlierFilter,
    OutlierFilterParams,
    remove_outliers,
    remove_outliers_df,
)
from field_coverage.analysis.coverage_gaps import (
    CoverageGapDetector,
    GapClassifier,
    GapDetectionParams,
    detect_hex_gaps,
)

__all__ = [
    # Outliers
    'OutlierFilter',
    'OutlierFilterParams',
    'remove_outliers',
    'remove_outliers_df',
    # Coverage gaps
    'CoverageGapDetector',
    'GapClassifier',
    'GapDetectionParams',
    'detect_hex_gaps',
]
