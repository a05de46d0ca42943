"""
Hexagonal binning of building and household points.

Points are projected onto a local tangent plane (meters) around the center of
the combined point set, then assigned to pointy-top hexagons addressed by
integer axial coordinates (q, r).

Hex math follows the usual axial/cube conventions:
https://www.redblobgames.com/grids/hexagons/
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from field_coverage.core.geometry import (
    METERS_PER_DEGREE_LAT,
    calculate_bounding_box,
    meters_per_degree_lon,
)
from field_coverage.core.models import GeoPoint
from field_coverage.core.statistics import round_half_up
from field_coverage.utils.exceptions import GeometryError
from field_coverage.utils.logging_config import get_logger

logger = get_logger(__name__)

SQRT3 = math.sqrt(3)

AxialKey = Tuple[int, int]


@dataclass(frozen=True)
class LocalProjection:
    """
    Equirectangular projection to meters around a fixed center.

    Attributes:
        center_lat: Latitude of the plane origin
        center_lon: Longitude of the plane origin
        meters_per_deg_lat: Meters per degree of latitude
        meters_per_deg_lon: Meters per degree of longitude at center_lat
    """
    center_lat: float
    center_lon: float
    meters_per_deg_lat: float
    meters_per_deg_lon: float

    @classmethod
    def from_points(cls, points: Sequence) -> Optional['LocalProjection']:
        """Projection centered on the bounding box of the points, or None if there is none."""
        bbox = calculate_bounding_box(points)
        if bbox is None:
            return None
        center = bbox.center
        return cls(
            center_lat=center.lat,
            center_lon=center.lon,
            meters_per_deg_lat=METERS_PER_DEGREE_LAT,
            meters_per_deg_lon=meters_per_degree_lon(center.lat),
        )

    def project(self, lat: float, lon: float) -> Tuple[float, float]:
        return (
            (lon - self.center_lon) * self.meters_per_deg_lon,
            (lat - self.center_lat) * self.meters_per_deg_lat,
        )

    def unproject(self, x: float, y: float) -> GeoPoint:
        return GeoPoint(
            y / self.meters_per_deg_lat + self.center_lat,
            x / self.meters_per_deg_lon + self.center_lon,
        )


def pixel_to_axial(x: float, y: float, size: float) -> Tuple[float, float]:
    """Fractional axial coordinates of a planar point for pointy-top hexes of radius ``size``."""
    q = (SQRT3 / 3 * x - (1 / 3) * y) / size
    r = (2 / 3) * y / size
    return q, r


def axial_to_pixel(q: int, r: int, size: float) -> Tuple[float, float]:
    """Planar center of the hex at axial (q, r)."""
    return size * SQRT3 * (q + r / 2), size * 1.5 * r


def cube_round(q: float, r: float) -> AxialKey:
    """
    Round fractional axial coordinates to the containing hex.

    Rounding q and r independently puts points near three-cell corners in the
    wrong hex. Instead round all three cube components and rebuild the one
    that moved furthest from the other two, keeping x + y + z == 0.
    """
    x = q
    z = r
    y = -x - z

    rx = round_half_up(x)
    ry = round_half_up(y)
    rz = round_half_up(z)

    x_diff = abs(rx - x)
    y_diff = abs(ry - y)
    z_diff = abs(rz - z)

    if x_diff > y_diff and x_diff > z_diff:
        rx = -ry - rz
    elif y_diff > z_diff:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return rx, rz


def hex_corners(x: float, y: float, size: float) -> List[Tuple[float, float]]:
    """Six planar corners of a pointy-top hex, at 30, 90, ..., 330 degrees."""
    corners = []
    for i in range(6):
        angle = 2 * math.pi * (i + 0.5) / 6
        corners.append((x + size * math.cos(angle), y + size * math.sin(angle)))
    return corners


@dataclass
class HexCell:
    """
    Per-cell accumulator for one binning pass.

    Attributes:
        q: Axial column
        r: Axial row
        x: Planar center easting (meters from projection origin)
        y: Planar center northing (meters from projection origin)
        center: Center converted back to lat/lon
        building_count: Buildings in the cell
        household_count: Households in the cell
    """
    q: int
    r: int
    x: float
    y: float
    center: GeoPoint
    building_count: int = 0
    household_count: int = 0

    @property
    def key(self) -> AxialKey:
        return self.q, self.r


class HexGrid(Mapping):
    """
    Result of one binning pass: a read-only mapping of (q, r) to HexCell.

    Also carries the projection and radius so cell polygons can be rebuilt.
    An empty grid (no buildings) has no projection.
    """

    def __init__(
        self,
        cells: Dict[AxialKey, HexCell],
        hex_radius_m: float,
        projection: Optional[LocalProjection] = None,
    ):
        self._cells = cells
        self.hex_radius_m = hex_radius_m
        self.projection = projection

    def __getitem__(self, key: AxialKey) -> HexCell:
        return self._cells[key]

    def __iter__(self) -> Iterator[AxialKey]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"HexGrid(cells={len(self._cells)}, hex_radius_m={self.hex_radius_m})"

    @property
    def total_buildings(self) -> int:
        return sum(cell.building_count for cell in self._cells.values())

    @property
    def total_households(self) -> int:
        return sum(cell.household_count for cell in self._cells.values())

    def polygon(self, cell: HexCell) -> Tuple[GeoPoint, ...]:
        """Six lat/lon vertices of a cell, pointy-top, first vertex at 30 degrees."""
        if self.projection is None:
            raise GeometryError("Grid has no projection: no points were binned")
        return tuple(
            self.projection.unproject(cx, cy)
            for cx, cy in hex_corners(cell.x, cell.y, self.hex_radius_m)
        )


class HexGridBinner:
    """
    Bins building and household points into a shared hexagonal lattice.

    Example:
        >>> binner = HexGridBinner(hex_radius_m=90)
        >>> grid = binner.bin(buildings, households)
        >>> for (q, r), cell in grid.items():
        ...     print(q, r, cell.building_count, cell.household_count)
    """

    def __init__(self, hex_radius_m: float = 300.0):
        self.hex_radius_m = hex_radius_m

    def bin(self, building_points: Sequence, household_points: Sequence) -> HexGrid:
        """
        Count buildings and households per hex cell.

        Args:
            building_points: Objects with lat/lon attributes (building centroids)
            household_points: Objects with lat/lon attributes (survey submissions)

        Returns:
            HexGrid; empty when there are no buildings, since gaps are only
            defined relative to a building layer. Also empty for a radius that
            is not a positive finite number.
        """
        if len(building_points) == 0:
            return HexGrid({}, self.hex_radius_m)

        if not (math.isfinite(self.hex_radius_m) and self.hex_radius_m > 0):
            logger.warning(
                "hex_binning_skipped_invalid_radius",
                hex_radius_m=self.hex_radius_m,
                buildings=len(building_points),
            )
            return HexGrid({}, self.hex_radius_m)

        projection = LocalProjection.from_points(list(building_points) + list(household_points))
        if projection is None:
            logger.warning("hex_binning_skipped_invalid_bounds", buildings=len(building_points))
            return HexGrid({}, self.hex_radius_m)

        cells: Dict[AxialKey, HexCell] = {}
        for point in building_points:
            self._add_point(cells, projection, point).building_count += 1
        for point in household_points:
            self._add_point(cells, projection, point).household_count += 1

        logger.debug(
            "hex_cells_binned",
            cells=len(cells),
            buildings=len(building_points),
            households=len(household_points),
            hex_radius_m=self.hex_radius_m,
        )
        return HexGrid(cells, self.hex_radius_m, projection)

    def _add_point(
        self,
        cells: Dict[AxialKey, HexCell],
        projection: LocalProjection,
        point,
    ) -> HexCell:
        x, y = projection.project(point.lat, point.lon)
        key = cube_round(*pixel_to_axial(x, y, self.hex_radius_m))

        cell = cells.get(key)
        if cell is None:
            cx, cy = axial_to_pixel(key[0], key[1], self.hex_radius_m)
            cell = HexCell(
                q=key[0],
                r=key[1],
                x=cx,
                y=cy,
                center=projection.unproject(cx, cy),
            )
            cells[key] = cell
        return cell
