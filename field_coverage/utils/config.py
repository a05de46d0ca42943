"""
Configuration management using Pydantic for validation.

This module provides type-safe configuration loading and validation for
village coverage analysis. Validated settings convert to the plain
dataclasses used by the spatial core, which does no validation itself.
"""
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from field_coverage.analysis.coverage_gaps import GapDetectionParams
from field_coverage.analysis.outliers import OutlierFilterParams
from field_coverage.utils.exceptions import ConfigurationError


class OutlierSettings(BaseModel):
    """Parameters for household outlier removal."""
    enabled: bool = True
    min_points: int = Field(4, ge=1, description="Smaller point sets are not filtered")
    mad_multiplier: float = Field(3.0, gt=0.0, description="Scaled MADs above the median distance to keep")
    fallback_min_m: float = Field(50.0, ge=0.0, description="Minimum fallback margin when MAD is zero (meters)")
    fallback_fraction: float = Field(0.15, ge=0.0, description="Fallback margin as a fraction of the median distance")
    min_keep_fraction: float = Field(0.6, ge=0.0, le=1.0, description="Fraction of points always kept")
    min_keep_points: int = Field(3, ge=1, description="Absolute minimum of points always kept")

    def to_params(self) -> OutlierFilterParams:
        return OutlierFilterParams(
            min_points=self.min_points,
            mad_multiplier=self.mad_multiplier,
            fallback_min_m=self.fallback_min_m,
            fallback_fraction=self.fallback_fraction,
            min_keep_fraction=self.min_keep_fraction,
            min_keep_points=self.min_keep_points,
        )


class HexGapSettings(BaseModel):
    """Parameters for hex gap detection, tuned for village-scale surveys."""
    hex_radius_m: float = Field(90.0, gt=0.0, description="Hex circumradius (meters)")
    min_buildings: int = Field(4, ge=1, description="Minimum buildings for a cell to be judged")
    coverage_ratio_threshold: float = Field(0.7, ge=0.0, description="Ratio below which coverage is low")
    min_expected_per_cell: float = Field(0.9, ge=0.0, description="Expected samples needed to use the village target")
    expected_shortfall_tolerance: float = Field(1.0, ge=0.0, description="Missing expected samples that flag a cell")
    hotspot_building_threshold: Optional[int] = Field(10, ge=1, description="Buildings needed for a hotspot")
    max_samples_in_gap: Optional[int] = Field(2, ge=0, description="Cells with more households are never gaps")

    def to_params(self, expected_samples: Optional[float] = None) -> GapDetectionParams:
        return GapDetectionParams(
            hex_radius_m=self.hex_radius_m,
            min_buildings=self.min_buildings,
            coverage_ratio_threshold=self.coverage_ratio_threshold,
            expected_samples=expected_samples,
            min_expected_per_cell=self.min_expected_per_cell,
            expected_shortfall_tolerance=self.expected_shortfall_tolerance,
            hotspot_building_threshold=self.hotspot_building_threshold,
            max_samples_in_gap=self.max_samples_in_gap,
        )


class BuildingQuerySettings(BaseModel):
    """Sizing of the building-footprint query around a village."""
    padding_m: float = Field(800.0, ge=0.0, description="Padding around the household bounding box (meters)")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False
    log_file: Optional[Path] = None

    @field_validator('level', mode='before')
    @classmethod
    def upper_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class SurveyConfig(BaseModel):
    """Complete configuration for a coverage analysis run."""
    outliers: OutlierSettings = Field(default_factory=OutlierSettings)
    hex_gaps: HexGapSettings = Field(default_factory=HexGapSettings)
    buildings: BuildingQuerySettings = Field(default_factory=BuildingQuerySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {
        "extra": "forbid",
    }


def load_config(config_path: Path) -> SurveyConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Validated SurveyConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If YAML is malformed or fails validation

    Example:
        >>> config = load_config(Path("config/default.yaml"))
        >>> print(config.hex_gaps.hex_radius_m)
        90.0
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in {config_path}: {e}") from e

    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Config root must be a mapping: {config_path}")

    try:
        return SurveyConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


def get_default_config() -> SurveyConfig:
    """
    Get default configuration.

    Returns:
        SurveyConfig with the village-scale defaults
    """
    return SurveyConfig()
