"""
Coverage gap detection on a hexagonal grid.

This module identifies parts of a village the survey has missed by:
1. Binning building centroids and household submissions into shared hex cells
2. Estimating the samples each cell should hold, either from the village
   target spread evenly over buildings or, without a target, from the
   building count itself
3. Flagging cells whose household count falls short of that estimate
4. Dropping cells that already hold enough households to be worked
5. Classifying survivors as hotspots (dense, nothing recorded) or coldspots

Cells with too few buildings are never flagged: there is not enough signal
to say anything was missed.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence

from field_coverage.core.hexgrid import HexCell, HexGrid, HexGridBinner
from field_coverage.core.models import GapRecord, SpotType
from field_coverage.core.statistics import round_half_up
from field_coverage.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class GapDetectionParams:
    """
    Configuration parameters for hex gap detection.

    Defaults are the general-purpose ones; ``HexGapSettings`` in
    ``field_coverage.utils.config`` carries the tuned village values.
    No validation happens here: odd values produce empty or all-flagged
    output rather than errors.

    Attributes:
        hex_radius_m: Hex circumradius in meters
        min_buildings: Cells with fewer buildings are never flagged
        coverage_ratio_threshold: Ratio (achieved or households per building) below which coverage is low
        expected_samples: Village sample target, or None when unknown
        min_expected_per_cell: Cells expecting fewer samples fall back to building-based rules
        expected_shortfall_tolerance: Missing expected samples that flag a cell on their own
        hotspot_building_threshold: Buildings needed for a hotspot (None = max(2 * min_buildings, 8))
        max_samples_in_gap: Cells with more households are never flagged (None = max(1, round(min_buildings / 2)))

    Example:
        >>> params = GapDetectionParams(hex_radius_m=90, expected_samples=120)
        >>> gaps = CoverageGapDetector(params).detect(households, buildings)
    """
    hex_radius_m: float = 300.0
    min_buildings: int = 4
    coverage_ratio_threshold: float = 0.65
    expected_samples: Optional[float] = None
    min_expected_per_cell: float = 1.0
    expected_shortfall_tolerance: float = 1.0
    hotspot_building_threshold: Optional[int] = None
    max_samples_in_gap: Optional[int] = None

    @property
    def hotspot_threshold(self) -> int:
        if self.hotspot_building_threshold is not None:
            return self.hotspot_building_threshold
        return max(self.min_buildings * 2, 8)

    @property
    def max_households_allowed(self) -> int:
        if self.max_samples_in_gap is not None:
            return max(0, self.max_samples_in_gap)
        return self.min_shortfall

    @property
    def min_shortfall(self) -> int:
        """Building-based shortfall that flags a cell when no target applies."""
        return max(1, round_half_up(self.min_buildings / 2))


class GapClassifier:
    """
    Decides, per hex cell, whether household coverage is deficient.

    Example:
        >>> grid = HexGridBinner(90).bin(buildings, households)
        >>> gaps = GapClassifier(params).classify(grid)
    """

    def __init__(self, params: Optional[GapDetectionParams] = None):
        self.params = params or GapDetectionParams()

    def classify(self, grid: HexGrid, total_buildings: Optional[int] = None) -> List[GapRecord]:
        """
        Produce a gap record for every flagged cell.

        Args:
            grid: Binned building and household counts
            total_buildings: Buildings in the village (defaults to the grid total)

        Returns:
            Gap records sorted by axial coordinates
        """
        if total_buildings is None:
            total_buildings = grid.total_buildings

        expected_per_building = self._expected_per_building(total_buildings)

        records = []
        for key in sorted(grid):
            record = self._classify_cell(grid, grid[key], expected_per_building)
            if record is not None:
                records.append(record)

        return records

    def _expected_per_building(self, total_buildings: int) -> Optional[float]:
        expected = self.params.expected_samples
        if expected is None or expected <= 0 or total_buildings <= 0:
            return None
        return expected / total_buildings

    def _classify_cell(
        self,
        grid: HexGrid,
        cell: HexCell,
        expected_per_building: Optional[float],
    ) -> Optional[GapRecord]:
        params = self.params
        buildings = cell.building_count
        households = cell.household_count

        if buildings < params.min_buildings:
            return None
        # A non-positive min_buildings lets empty cells through; there is no ratio to compute
        if buildings == 0:
            return None

        expected_in_cell = (
            expected_per_building * buildings if expected_per_building is not None else None
        )
        coverage_ratio = households / buildings
        achieved_ratio = (
            households / expected_in_cell
            if expected_in_cell is not None and expected_in_cell > 0
            else None
        )

        if expected_in_cell is not None:
            observed_shortfall = expected_in_cell - households
        else:
            observed_shortfall = buildings - households
        shortfall = max(0, round_half_up(observed_shortfall))

        if expected_in_cell is not None and expected_in_cell >= params.min_expected_per_cell:
            is_gap = (
                (achieved_ratio is not None and achieved_ratio < params.coverage_ratio_threshold)
                or observed_shortfall >= params.expected_shortfall_tolerance
                or (households == 0 and expected_in_cell > 0)
            )
        else:
            # No usable target for this cell: judge against the buildings
            is_gap = (
                (households == 0 and buildings >= params.min_buildings)
                or coverage_ratio < params.coverage_ratio_threshold
                or shortfall >= params.min_shortfall
            )

        if not is_gap or households > params.max_households_allowed:
            return None

        if households == 0 and buildings >= params.hotspot_threshold:
            spot_type = SpotType.HOTSPOT
        else:
            spot_type = SpotType.COLDSPOT

        return GapRecord(
            polygon=grid.polygon(cell),
            centroid=cell.center,
            building_count=buildings,
            household_count=households,
            expected_samples=expected_in_cell,
            achieved_ratio=achieved_ratio,
            coverage_ratio=coverage_ratio,
            shortfall=shortfall,
            spot_type=spot_type,
            q=cell.q,
            r=cell.r,
        )


class CoverageGapDetector:
    """
    Finds under-sampled hex cells for one village.

    Bins buildings and households with ``HexGridBinner`` and hands the grid to
    ``GapClassifier``. Holds no state between calls.

    Example:
        >>> detector = CoverageGapDetector(GapDetectionParams(hex_radius_m=90))
        >>> gaps = detector.detect(households, buildings)
        >>> hotspots = [g for g in gaps if g.spot_type is SpotType.HOTSPOT]
    """

    def __init__(self, params: Optional[GapDetectionParams] = None):
        self.params = params or GapDetectionParams()
        self.binner = HexGridBinner(self.params.hex_radius_m)
        self.classifier = GapClassifier(self.params)

    def detect(self, household_points: Sequence, building_points: Sequence) -> List[GapRecord]:
        """
        Detect coverage gaps.

        Args:
            household_points: Cleaned household locations (objects with lat/lon)
            building_points: Building centroids (objects with lat/lon)

        Returns:
            Gap records sorted by axial coordinates; empty without buildings
        """
        if len(building_points) == 0:
            logger.info("hex_gap_detection_skipped", reason="no_buildings")
            return []

        grid = self.binner.bin(building_points, household_points)
        gaps = self.classifier.classify(grid, total_buildings=len(building_points))

        hotspots = sum(1 for gap in gaps if gap.spot_type is SpotType.HOTSPOT)
        logger.info(
            "hex_gap_detection_complete",
            cells=len(grid),
            gaps=len(gaps),
            hotspots=hotspots,
            coldspots=len(gaps) - hotspots,
        )
        return gaps


def detect_hex_gaps(
    household_points: Sequence,
    building_points: Sequence,
    params: Optional[GapDetectionParams] = None,
) -> List[GapRecord]:
    """Convenience wrapper around ``CoverageGapDetector.detect``."""
    return CoverageGapDetector(params).detect(household_points, building_points)
