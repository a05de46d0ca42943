"""
Village coverage analysis runner.

Runs the full spatial pipeline for one village:
1. Remove stray household GPS fixes (outlier filter)
2. Size the building-footprint query around the cleaned households
3. Bin households and buildings into hex cells and classify coverage gaps
4. Summarise completion and gap counts

Fetching buildings is left to the caller: use ``building_query_bounds`` to get
the padded box and its cache key, fetch, then call ``analyze_village``.

Usage:
    >>> config = load_config(Path("config/default.yaml"))
    >>> bounds = building_query_bounds(village.households, config.buildings.padding_m)
    >>> buildings = fetch_buildings(bounds.key)  # caller-provided
    >>> report = analyze_village(village, buildings, config)
    >>> print(report.hotspot_count, report.coldspot_count)
"""
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from field_coverage.analysis.coverage_gaps import CoverageGapDetector
from field_coverage.analysis.outliers import OutlierFilter
from field_coverage.core.geometry import (
    calculate_bounding_box,
    expand_bounding_box,
    format_bounding_box,
)
from field_coverage.core.models import BoundingBox, GapRecord, SpotType
from field_coverage.data.schemas import VillageTarget
from field_coverage.utils.config import SurveyConfig, get_default_config
from field_coverage.utils.logging_config import get_logger, village_log_context

logger = get_logger(__name__)


class BuildingQuery(NamedTuple):
    """Padded box to fetch building footprints for, and its cache key."""
    bounds: BoundingBox
    key: str


@dataclass
class VillageCoverageReport:
    """Outcome of analysing one village."""
    district: str
    village: str
    expected: int
    actual: int
    completion_percentage: int
    remaining_samples: int
    households_total: int
    households_used: int
    building_count: int
    building_query: Optional[BuildingQuery] = None
    gaps: List[GapRecord] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def outliers_removed(self) -> int:
        return self.households_total - self.households_used

    @property
    def hotspot_count(self) -> int:
        return sum(1 for gap in self.gaps if gap.spot_type is SpotType.HOTSPOT)

    @property
    def coldspot_count(self) -> int:
        return sum(1 for gap in self.gaps if gap.spot_type is SpotType.COLDSPOT)


def building_query_bounds(points: Sequence, padding_m: float = 800.0) -> Optional[BuildingQuery]:
    """
    Padded bounding box for a building-footprint query.

    Args:
        points: Household points (objects with lat/lon)
        padding_m: Padding on each side (meters)

    Returns:
        BuildingQuery, or None when the points have no valid bounding box
    """
    bbox = calculate_bounding_box(points)
    if bbox is None:
        return None
    expanded = expand_bounding_box(bbox, padding_m)
    return BuildingQuery(bounds=expanded, key=format_bounding_box(expanded))


def clean_households(households: Sequence, config: Optional[SurveyConfig] = None) -> List:
    """Households with outliers removed, or unchanged when filtering is disabled."""
    config = config or get_default_config()
    if not config.outliers.enabled:
        return list(households)

    filtered = OutlierFilter(config.outliers.to_params()).remove_outliers(households)
    return filtered if filtered else list(households)


def analyze_village(
    village: VillageTarget,
    buildings: Sequence,
    config: Optional[SurveyConfig] = None,
) -> VillageCoverageReport:
    """
    Run outlier filtering and gap detection for one village.

    Args:
        village: Village target with its household submissions
        buildings: Building centroids around the village (objects with lat/lon)
        config: Analysis configuration (defaults if not provided)

    Returns:
        VillageCoverageReport; ``skipped_reason`` explains an empty gap list
    """
    config = config or get_default_config()

    with village_log_context(village.district, village.village):
        return _analyze(village, buildings, config)


def _analyze(village: VillageTarget, buildings: Sequence, config: SurveyConfig) -> VillageCoverageReport:
    households = clean_households(village.households, config)

    report = VillageCoverageReport(
        district=village.district,
        village=village.village,
        expected=village.expected,
        actual=village.actual,
        completion_percentage=village.completion_percentage,
        remaining_samples=village.remaining_samples,
        households_total=len(village.households),
        households_used=len(households),
        building_count=len(buildings),
        building_query=building_query_bounds(households, config.buildings.padding_m),
    )

    if not households:
        report.skipped_reason = "no_households"
    elif report.building_query is None:
        report.skipped_reason = "invalid_bounds"
    elif len(buildings) == 0:
        report.skipped_reason = "no_buildings"
    elif village.expected <= 0:
        report.skipped_reason = "no_target"

    if report.skipped_reason is not None:
        logger.info("village_gap_detection_skipped", reason=report.skipped_reason)
        return report

    params = config.hex_gaps.to_params(expected_samples=village.expected)
    report.gaps = CoverageGapDetector(params).detect(households, buildings)

    logger.info(
        "village_analysis_complete",
        completion=report.completion_percentage,
        households=report.households_used,
        outliers_removed=report.outliers_removed,
        buildings=report.building_count,
        hotspots=report.hotspot_count,
        coldspots=report.coldspot_count,
    )
    return report
