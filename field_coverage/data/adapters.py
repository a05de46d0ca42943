"""
Data adapters for different point sources.

Provides column mapping adapters that convert source-specific DataFrames
(form exports, footprint extracts) to the standard ``lat``/``lon`` layout
the spatial core expects.
"""
from typing import Dict, List

import pandas as pd

from field_coverage.core.models import GeoPoint
from field_coverage.utils.error_handling import require_columns


class PointAdapter:
    """Base class for point source adapters."""

    # Column mappings: {standard_column: source_column}
    COLUMN_MAP: Dict[str, str] = {}

    @classmethod
    def adapt(cls, df: pd.DataFrame) -> pd.DataFrame:
        """
        Adapt a source DataFrame to the standard column names.

        Args:
            df: DataFrame with source-specific column names

        Returns:
            Copy with standardized column names and float coordinates
        """
        rename_map = {v: k for k, v in cls.COLUMN_MAP.items() if v in df.columns and v != k}
        df_adapted = df.rename(columns=rename_map)

        for column in ('lat', 'lon'):
            if column in df_adapted.columns:
                df_adapted[column] = pd.to_numeric(df_adapted[column], errors='coerce')

        return cls._transform(df_adapted)

    @classmethod
    def _transform(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Override to add source-specific transformations."""
        return df


class KoboExportAdapter(PointAdapter):
    """Adapter for flattened KoBoToolbox submission exports."""

    COLUMN_MAP = {
        'lat': '_gps_latitude',
        'lon': '_gps_longitude',
        'enumerator_id': '_submitted_by',
        'district': 'District',
        'village': 'Village',
    }

    @classmethod
    def _transform(cls, df: pd.DataFrame) -> pd.DataFrame:
        if 'enumerator_id' in df.columns:
            df['enumerator_id'] = df['enumerator_id'].astype('string').str.strip()
        return df


class FootprintAdapter(PointAdapter):
    """Adapter for building footprint centroid extracts."""

    COLUMN_MAP = {
        'id': 'osm_id',
        'lat': 'latitude',
        'lon': 'longitude',
    }


def get_adapter(source: str) -> type[PointAdapter]:
    """
    Get the adapter for a point source.

    Args:
        source: Source name ('kobo', 'footprints'); unknown names get the base adapter

    Example:
        >>> adapter = get_adapter('kobo')
        >>> households_df = adapter.adapt(raw_df)
    """
    adapters = {
        'kobo': KoboExportAdapter,
        'footprints': FootprintAdapter,
    }

    return adapters.get(source, PointAdapter)


# Common spellings of the coordinate columns, first match wins
COORDINATE_ALIASES: Dict[str, tuple] = {
    'lat': ('latitude', '_gps_latitude', 'Latitude'),
    'lon': ('longitude', '_gps_longitude', 'lng', 'Longitude'),
}


def normalize_coordinate_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename common coordinate spellings to ``lat``/``lon``.

    Columns already named ``lat`` or ``lon`` win over any alias. The input
    frame is not modified.
    """
    rename_map = {}
    for column, aliases in COORDINATE_ALIASES.items():
        if column in df.columns:
            continue
        alias = next((name for name in aliases if name in df.columns), None)
        if alias is not None:
            rename_map[alias] = column

    if not rename_map:
        return df
    return df.rename(columns=rename_map)


def frame_to_points(df: pd.DataFrame) -> List[GeoPoint]:
    """
    Convert a point DataFrame to GeoPoints.

    Coordinate columns are normalised first, so ``latitude``/``longitude``
    and KoBo ``_gps_latitude``/``_gps_longitude`` frames convert directly.
    Rows are taken as-is; run ``CoordinateValidator`` first to drop
    unusable coordinates.

    Raises:
        DataValidationError: If no latitude or longitude column is found
    """
    if isinstance(df, pd.DataFrame):
        df = normalize_coordinate_columns(df)
    return _standard_frame_to_points(df)


@require_columns(['lat', 'lon'], df_param='df')
def _standard_frame_to_points(df: pd.DataFrame) -> List[GeoPoint]:
    return [
        GeoPoint(float(lat), float(lon))
        for lat, lon in zip(df['lat'].to_numpy(), df['lon'].to_numpy())
    ]
