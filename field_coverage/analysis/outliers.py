"""
Spatial outlier removal for household GPS fixes.

Enumerators occasionally submit from the office, from a neighbouring village,
or with a stale fix. Such points sit far from the village cluster and would
stretch the building query and hex grid, so they are dropped before analysis.

Method:
1. Arithmetic-mean centroid of all points
2. Haversine distance of each point to the centroid
3. Robust threshold: median distance + 3 * scaled MAD
   (fallback when MAD is zero: median + max(50 m, 15% of median))
4. Safety floor: always keep at least 60% of points (minimum 3), taking
   the nearest ones if the threshold was too aggressive
"""
import math
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

import numpy as np
import pandas as pd

from field_coverage.core.geometry import arithmetic_centroid, haversine_distances
from field_coverage.core.statistics import median
from field_coverage.utils.error_handling import require_columns
from field_coverage.utils.logging_config import get_logger

logger = get_logger(__name__)

# Makes MAD comparable to the standard deviation of a normal distribution
MAD_NORMAL_SCALE = 1.4826

PointT = TypeVar('PointT')


@dataclass
class OutlierFilterParams:
    """
    Configuration parameters for outlier removal.

    Attributes:
        min_points: Smaller sets are returned unchanged
        mad_multiplier: Number of scaled MADs above the median distance to keep
        fallback_min_m: Minimum fallback margin (meters) when MAD is zero
        fallback_fraction: Fallback margin as a fraction of the median distance
        min_keep_fraction: Fraction of points always kept
        min_keep_points: Absolute minimum of points always kept

    Example:
        >>> params = OutlierFilterParams(mad_multiplier=2.5)
        >>> OutlierFilter(params).remove_outliers(households)
    """
    min_points: int = 4
    mad_multiplier: float = 3.0
    fallback_min_m: float = 50.0
    fallback_fraction: float = 0.15
    min_keep_fraction: float = 0.6
    min_keep_points: int = 3


class OutlierFilter:
    """
    Removes points that are spatially disconnected from the main cluster.

    Works on any objects exposing ``lat`` and ``lon`` attributes and returns
    the same objects, in input order.

    Example:
        >>> kept = OutlierFilter().remove_outliers(village.households)
        >>> print(f"Dropped {len(village.households) - len(kept)} stray fixes")
    """

    def __init__(self, params: OutlierFilterParams = None):
        self.params = params or OutlierFilterParams()

    def remove_outliers(self, points: Sequence[PointT]) -> List[PointT]:
        """
        Drop spatial outliers from a point set.

        Args:
            points: Objects with lat/lon attributes

        Returns:
            Kept points in their original order. Inputs smaller than
            ``min_points`` come back unchanged; non-empty input never
            yields an empty result.
        """
        if len(points) < self.params.min_points:
            return list(points)

        center = arithmetic_centroid(points)
        distances = haversine_distances(
            center.lat,
            center.lon,
            [p.lat for p in points],
            [p.lon for p in points],
        )

        keep = np.sort(self.select_inliers(distances))
        kept = [points[i] for i in keep]

        logger.debug(
            "outliers_removed",
            total=len(points),
            kept=len(kept),
            dropped=len(points) - len(kept),
        )
        return kept

    def select_inliers(self, distances) -> np.ndarray:
        """
        Decide which distances survive the robust threshold.

        Args:
            distances: Distance of each point to the cluster centroid (meters)

        Returns:
            Indices of kept points, ordered by increasing distance
        """
        distances = np.asarray(distances, dtype=float)
        count = len(distances)
        order = np.argsort(distances, kind='stable')
        sorted_distances = distances[order]

        median_distance = median(sorted_distances)
        scaled_mad = median(np.abs(sorted_distances - median_distance)) * MAD_NORMAL_SCALE

        if scaled_mad > 0:
            threshold = median_distance + self.params.mad_multiplier * scaled_mad
        else:
            # Every point equidistant from the centroid
            threshold = median_distance + max(
                self.params.fallback_min_m,
                median_distance * self.params.fallback_fraction,
            )

        within = order[sorted_distances <= threshold]

        minimum_keep = min(
            count,
            max(self.params.min_keep_points, math.ceil(count * self.params.min_keep_fraction)),
        )
        if len(within) >= minimum_keep:
            return within

        logger.debug(
            "outlier_threshold_too_tight",
            threshold_m=float(threshold),
            within=len(within),
            minimum_keep=minimum_keep,
        )
        return order[:minimum_keep]


def remove_outliers(points: Sequence[PointT], params: OutlierFilterParams = None) -> List[PointT]:
    """Convenience wrapper around ``OutlierFilter.remove_outliers``."""
    return OutlierFilter(params).remove_outliers(points)


@require_columns(['lat', 'lon'], df_param='df')
def remove_outliers_df(df: pd.DataFrame, params: OutlierFilterParams = None) -> pd.DataFrame:
    """
    Apply the outlier filter to a DataFrame of points.

    Args:
        df: DataFrame with ``lat`` and ``lon`` columns
        params: Filter parameters (defaults if not provided)

    Returns:
        Copy of the kept rows, original index and order preserved
    """
    params = params or OutlierFilterParams()
    if len(df) < params.min_points:
        return df.copy()

    lats = df['lat'].to_numpy(dtype=float)
    lons = df['lon'].to_numpy(dtype=float)
    distances = haversine_distances(lats.mean(), lons.mean(), lats, lons)

    keep = np.sort(OutlierFilter(params).select_inliers(distances))
    return df.iloc[keep].copy()
