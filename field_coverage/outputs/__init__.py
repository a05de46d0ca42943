"""
Output layers for Field Coverage.

Converts detected gaps to DataFrames, GeoDataFrames and GeoJSON in memory.
"""

from field_coverage.outputs.gap_layers import (
    gaps_to_dataframe,
    gaps_to_geodataframe,
    gaps_to_geojson,
)

__all__ = ['gaps_to_dataframe', 'gaps_to_geodataframe', 'gaps_to_geojson']
