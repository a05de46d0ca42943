"""
Value types shared by the spatial core.

These are plain frozen dataclasses: the core trusts its inputs and does not
re-validate coordinates. Use the pydantic schemas in ``field_coverage.data``
when checking data from upstream sources.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from field_coverage.core.statistics import round_half_up


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""
    lat: float
    lon: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lon box. Derived on demand, never stored."""
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint((self.south + self.north) / 2, (self.west + self.east) / 2)


class SpotType(str, Enum):
    """Priority class of a coverage gap."""
    HOTSPOT = "hotspot"    # Dense cell with no households at all
    COLDSPOT = "coldspot"  # Any other under-sampled cell


@dataclass(frozen=True)
class GapRecord:
    """
    One hex cell flagged as a coverage gap.

    Attributes:
        polygon: Six hexagon vertices (pointy-top, starting at 30 degrees)
        centroid: Cell center
        building_count: Buildings binned into the cell
        household_count: Households binned into the cell
        expected_samples: Expected samples for the cell, if a village target is known
        achieved_ratio: household_count / expected_samples, if known and positive
        coverage_ratio: household_count / building_count
        shortfall: Missing samples, rounded and never negative
        spot_type: Hotspot or coldspot
        q: Axial column of the cell
        r: Axial row of the cell
    """
    polygon: Tuple[GeoPoint, ...]
    centroid: GeoPoint
    building_count: int
    household_count: int
    expected_samples: Optional[float]
    achieved_ratio: Optional[float]
    coverage_ratio: Optional[float]
    shortfall: int
    spot_type: SpotType
    q: int = 0
    r: int = 0

    @property
    def completion_percent(self) -> Optional[int]:
        """Achieved ratio (falling back to coverage ratio) as a 0-100 percentage."""
        ratio = self.achieved_ratio if self.achieved_ratio is not None else self.coverage_ratio
        if ratio is None:
            return None
        return max(0, min(100, round_half_up(ratio * 100)))

    @property
    def expected_samples_display(self) -> Optional[int]:
        """Expected samples rounded for display, never below one."""
        if self.expected_samples is None:
            return None
        return max(1, round_half_up(self.expected_samples))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'q': self.q,
            'r': self.r,
            'centroid_lat': self.centroid.lat,
            'centroid_lon': self.centroid.lon,
            'building_count': self.building_count,
            'household_count': self.household_count,
            'expected_samples': self.expected_samples,
            'achieved_ratio': self.achieved_ratio,
            'coverage_ratio': self.coverage_ratio,
            'shortfall': self.shortfall,
            'spot_type': self.spot_type.value,
            'completion_percent': self.completion_percent,
        }
