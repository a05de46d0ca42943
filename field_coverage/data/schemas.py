"""
Pydantic schemas for survey data validation.

Defines the household, building and village target records supplied by the
surrounding application, with coordinate range checks. Instances expose
``lat``/``lon`` attributes so they can be passed straight to the outlier
filter and gap detector.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from field_coverage.core.statistics import round_half_up
from field_coverage.utils.error_handling import safe_division


class Household(BaseModel):
    """
    A survey submission with a GPS fix.

    Example:
        >>> household = Household(
        ...     lat=-6.8235,
        ...     lon=37.6612,
        ...     enumerator_id='enum-07',
        ...     enumerator_name='Asha M.'
        ... )
    """
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    enumerator_id: Optional[str] = Field(None, description="Enumerator identifier")
    enumerator_name: Optional[str] = Field(None, description="Enumerator display name")
    data: Dict = Field(default_factory=dict, description="Remaining submission fields")

    model_config = {
        "str_strip_whitespace": True,
    }


class BuildingCentroid(BaseModel):
    """
    Centroid of a building footprint from the external footprint source.

    Example:
        >>> building = BuildingCentroid(id=4120331, lat=-6.8237, lon=37.6609, tags={'building': 'house'})
    """
    id: int = Field(..., description="Footprint identifier in the source dataset")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    tags: Optional[Dict[str, str]] = Field(None, description="Source tags")


class VillageTarget(BaseModel):
    """
    Expected and achieved sample counts for one village.

    Example:
        >>> village = VillageTarget(district='Kilosa', village='Ulaya', expected=120, actual=90)
        >>> village.completion_percentage
        75
    """
    district: str = Field(..., min_length=1, description="District name")
    village: str = Field(..., min_length=1, description="Village name")
    expected: int = Field(..., ge=0, description="Optimal sample size (households)")
    actual: int = Field(0, ge=0, description="Submissions received so far")
    optimal_days: Optional[float] = Field(None, ge=0, description="Planned fieldwork days")
    households: List[Household] = Field(default_factory=list)

    model_config = {
        "str_strip_whitespace": True,
    }

    @property
    def key(self) -> str:
        return f"{self.district}-{self.village}"

    @property
    def completion_percentage(self) -> int:
        """Share of the target achieved, rounded and capped at 100."""
        return min(100, round_half_up(safe_division(self.actual, self.expected) * 100))

    @property
    def remaining_samples(self) -> int:
        return max(self.expected - self.actual, 0)
