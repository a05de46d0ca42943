"""
In-memory output layers for detected coverage gaps.

Converts GapRecords into a flat DataFrame, a GeoDataFrame of hexagon
polygons (EPSG:4326) or a GeoJSON string for map layers. Nothing is
written to disk here.
"""
from typing import List, Sequence

import geopandas as gpd
import pandas as pd
from shapely.geometry import Polygon

from field_coverage.core.models import GapRecord

GAP_COLUMNS = [
    'q',
    'r',
    'centroid_lat',
    'centroid_lon',
    'building_count',
    'household_count',
    'expected_samples',
    'achieved_ratio',
    'coverage_ratio',
    'shortfall',
    'spot_type',
    'completion_percent',
]

GAP_CRS = "EPSG:4326"


def gap_polygon(gap: GapRecord) -> Polygon:
    """Shapely polygon (lon, lat order) of a gap hexagon."""
    return Polygon([(vertex.lon, vertex.lat) for vertex in gap.polygon])


def gaps_to_dataframe(gaps: Sequence[GapRecord]) -> pd.DataFrame:
    """One row per gap with its metrics; geometry excluded."""
    return pd.DataFrame([gap.to_dict() for gap in gaps], columns=GAP_COLUMNS)


def gaps_to_geodataframe(gaps: Sequence[GapRecord]) -> gpd.GeoDataFrame:
    """
    GeoDataFrame of gap hexagons with their metrics.

    Example:
        >>> gdf = gaps_to_geodataframe(gaps)
        >>> gdf[gdf['spot_type'] == 'hotspot'].plot()
    """
    df = gaps_to_dataframe(gaps)
    polygons: List[Polygon] = [gap_polygon(gap) for gap in gaps]
    return gpd.GeoDataFrame(
        df,
        geometry=gpd.GeoSeries(polygons, index=df.index, crs=GAP_CRS),
        crs=GAP_CRS,
    )


def gaps_to_geojson(gaps: Sequence[GapRecord]) -> str:
    """GeoJSON FeatureCollection string of gap hexagons."""
    return gaps_to_geodataframe(gaps).to_json(na='null')
