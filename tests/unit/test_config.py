"""
Tests for configuration management.
"""
import pytest
from pathlib import Path
from pydantic import ValidationError
from field_coverage.analysis.coverage_gaps import GapDetectionParams
from field_coverage.analysis.outliers import OutlierFilterParams
from field_coverage.utils.config import (
    load_config,
    SurveyConfig,
    HexGapSettings,
    OutlierSettings,
    LoggingSettings,
    get_default_config
)
from field_coverage.utils.exceptions import ConfigurationError

DEFAULT_CONFIG = Path(__file__).parents[2] / "config" / "default.yaml"


def test_load_default_config():
    """Test loading the shipped village defaults."""
    config = load_config(DEFAULT_CONFIG)

    assert isinstance(config, SurveyConfig)
    assert config.outliers.enabled is True
    assert config.hex_gaps.hex_radius_m == 90.0
    assert config.hex_gaps.min_buildings == 4
    assert config.hex_gaps.coverage_ratio_threshold == 0.7
    assert config.hex_gaps.min_expected_per_cell == 0.9
    assert config.hex_gaps.hotspot_building_threshold == 10
    assert config.hex_gaps.max_samples_in_gap == 2
    assert config.buildings.padding_m == 800.0
    assert config.logging.level == "INFO"


def test_default_file_matches_code_defaults():
    """Shipped YAML and in-code defaults agree."""
    assert load_config(DEFAULT_CONFIG).model_dump() == get_default_config().model_dump()


def test_config_file_not_found(tmp_path):
    """Test error handling when config file doesn't exist."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nonexistent.yaml")


def test_empty_config_uses_defaults(tmp_path):
    """An empty file is a valid, all-defaults config."""
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert load_config(config_file).model_dump() == get_default_config().model_dump()


def test_partial_override(tmp_path):
    """Sections not given keep their defaults."""
    config_file = tmp_path / "village.yaml"
    config_file.write_text("hex_gaps:\n  hex_radius_m: 150\n  max_samples_in_gap: 5\n")

    config = load_config(config_file)

    assert config.hex_gaps.hex_radius_m == 150.0
    assert config.hex_gaps.max_samples_in_gap == 5
    assert config.hex_gaps.min_buildings == 4
    assert config.outliers.mad_multiplier == 3.0


def test_malformed_yaml(tmp_path):
    """Unparseable YAML raises ConfigurationError."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("hex_gaps: [unclosed\n")

    with pytest.raises(ConfigurationError):
        load_config(config_file)


def test_non_mapping_root(tmp_path):
    """The document root must be a mapping."""
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- hex_gaps\n- outliers\n")

    with pytest.raises(ConfigurationError):
        load_config(config_file)


def test_invalid_values(tmp_path):
    """Out-of-range values raise ConfigurationError."""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("hex_gaps:\n  hex_radius_m: 0\n")

    with pytest.raises(ConfigurationError, match="hex_radius_m"):
        load_config(config_file)


def test_unknown_section(tmp_path):
    """Typos in section names are rejected."""
    config_file = tmp_path / "typo.yaml"
    config_file.write_text("hex_gap:\n  hex_radius_m: 90\n")

    with pytest.raises(ConfigurationError):
        load_config(config_file)


def test_hex_gap_settings_validation():
    """Test validation of hex gap parameters."""
    settings = HexGapSettings(hex_radius_m=120, coverage_ratio_threshold=0.5)
    assert settings.hex_radius_m == 120.0

    # Invalid: radius must be positive
    with pytest.raises(ValidationError):
        HexGapSettings(hex_radius_m=-90)

    # Invalid: at least one building per cell
    with pytest.raises(ValidationError):
        HexGapSettings(min_buildings=0)


def test_outlier_settings_validation():
    """Test validation of outlier parameters."""
    with pytest.raises(ValidationError):
        OutlierSettings(min_keep_fraction=1.5)

    with pytest.raises(ValidationError):
        OutlierSettings(mad_multiplier=0)


def test_logging_level_normalised():
    """Log levels are case-insensitive."""
    assert LoggingSettings(level="debug").level == "DEBUG"

    with pytest.raises(ValidationError):
        LoggingSettings(level="verbose")


def test_hex_gap_settings_to_params():
    """Settings convert to detector params with the village target."""
    params = get_default_config().hex_gaps.to_params(expected_samples=120)

    assert isinstance(params, GapDetectionParams)
    assert params.hex_radius_m == 90.0
    assert params.expected_samples == 120
    assert params.hotspot_threshold == 10
    assert params.max_households_allowed == 2


def test_outlier_settings_to_params():
    params = OutlierSettings(mad_multiplier=2.5).to_params()

    assert isinstance(params, OutlierFilterParams)
    assert params.mad_multiplier == 2.5
    assert params.min_keep_points == 3
