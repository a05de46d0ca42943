"""
Survey data schemas and adapters.

Provides Pydantic schemas for households, buildings and village targets,
and adapters that normalise point DataFrames from different sources.
"""
from field_coverage.data.schemas import Household, BuildingCentroid, VillageTarget
from field_coverage.data.adapters import (
    get_adapter,
    frame_to_points,
    normalize_coordinate_columns,
    KoboExportAdapter,
    FootprintAdapter,
)

__all__ = [
    'Household',
    'BuildingCentroid',
    'VillageTarget',
    'get_adapter',
    'frame_to_points',
    'normalize_coordinate_columns',
    'KoboExportAdapter',
    'FootprintAdapter',
]
