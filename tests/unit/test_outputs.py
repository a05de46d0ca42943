"""
Tests for gap output layers.
"""
import json

import geopandas as gpd
import pytest
from shapely.geometry import Point

from field_coverage.analysis.coverage_gaps import GapDetectionParams, detect_hex_gaps
from field_coverage.outputs.gap_layers import (
    GAP_COLUMNS,
    gap_polygon,
    gaps_to_dataframe,
    gaps_to_geodataframe,
    gaps_to_geojson,
)


@pytest.fixture
def gaps(ring):
    """One hotspot (south) and one coldspot (north)."""
    buildings = ring(-6.81, 37.6, 10, 0.00002) + ring(-6.80, 37.6, 10, 0.00002)
    households = ring(-6.80, 37.6, 1, 0.00001)
    return detect_hex_gaps(households, buildings, GapDetectionParams(hex_radius_m=100))


class TestGapPolygon:
    """Tests for gap_polygon."""

    def test_valid_hexagon(self, gaps):
        polygon = gap_polygon(gaps[0])

        assert polygon.is_valid
        assert len(polygon.exterior.coords) == 7  # closed ring
        assert polygon.contains(Point(gaps[0].centroid.lon, gaps[0].centroid.lat))


class TestGapsToDataFrame:
    """Tests for gaps_to_dataframe."""

    def test_columns_and_rows(self, gaps):
        df = gaps_to_dataframe(gaps)

        assert list(df.columns) == GAP_COLUMNS
        assert len(df) == 2
        assert sorted(df['spot_type']) == ['coldspot', 'hotspot']

    def test_empty(self):
        df = gaps_to_dataframe([])

        assert list(df.columns) == GAP_COLUMNS
        assert df.empty


class TestGapsToGeoDataFrame:
    """Tests for gaps_to_geodataframe."""

    def test_geometry_and_crs(self, gaps):
        gdf = gaps_to_geodataframe(gaps)

        assert isinstance(gdf, gpd.GeoDataFrame)
        assert gdf.crs.to_epsg() == 4326
        assert (gdf.geometry.geom_type == 'Polygon').all()
        assert gdf['building_count'].tolist() == [g.building_count for g in gaps]


class TestGapsToGeoJson:
    """Tests for gaps_to_geojson."""

    def test_feature_collection(self, gaps):
        collection = json.loads(gaps_to_geojson(gaps))

        assert collection['type'] == 'FeatureCollection'
        assert len(collection['features']) == 2
        hotspot = next(f for f in collection['features'] if f['properties']['spot_type'] == 'hotspot')
        assert hotspot['properties']['household_count'] == 0
        assert hotspot['properties']['expected_samples'] is None
        assert hotspot['geometry']['type'] == 'Polygon'
