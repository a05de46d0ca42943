"""
Validation framework for upstream point data.

The spatial core trusts its inputs, so coordinates are checked here before
they reach it: unusable rows are flagged and filtered out.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple

import numpy as np
import pandas as pd

from field_coverage.utils.error_handling import validate_columns_exist
from field_coverage.utils.exceptions import DataValidationError
from field_coverage.utils.logging_config import get_logger

logger = get_logger(__name__)


class IssueSeverity(Enum):
    """Severity levels for validation issues."""
    CRITICAL = "CRITICAL"  # Unusable row, always filtered
    WARNING = "WARNING"    # Suspicious row, filtered when configured
    INFO = "INFO"          # Informational flag


@dataclass
class ValidationIssue:
    """A single validation issue found in a row."""
    row: Any
    severity: IssueSeverity
    rule: str
    message: str
    actual_value: Any = None
    expected_range: str = None


@dataclass
class ValidationResult:
    """Result of validating a set of points."""
    total_rows: int
    valid_rows: int
    filtered_rows: int
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def critical_count(self) -> int:
        """Number of critical issues."""
        return sum(1 for i in self.issues if i.severity == IssueSeverity.CRITICAL)

    @property
    def warning_count(self) -> int:
        """Number of warnings."""
        return sum(1 for i in self.issues if i.severity == IssueSeverity.WARNING)

    def log_summary(self):
        """Log a summary of validation results."""
        logger.info(
            "coordinate_validation_complete",
            total=self.total_rows,
            valid=self.valid_rows,
            filtered=self.filtered_rows,
            critical=self.critical_count,
            warnings=self.warning_count,
        )


class CoordinateValidator:
    """
    Validator for latitude/longitude columns.

    Rules:
    - missing_coordinate: value absent or not numeric (CRITICAL)
    - non_finite_coordinate: infinite value (CRITICAL)
    - latitude_out_of_range / longitude_out_of_range (CRITICAL)
    - zero_coordinate: latitude or longitude exactly 0, the usual signature of
      a device that never got a fix (WARNING, filtered when reject_zero is set)

    Example:
        >>> clean_df, result = CoordinateValidator().validate(households_df)
        >>> result.log_summary()
    """

    def __init__(
        self,
        lat_col: str = 'lat',
        lon_col: str = 'lon',
        reject_zero: bool = True,
        strict: bool = False,
    ):
        """
        Initialize validator.

        Parameters
        ----------
        lat_col : str
            Latitude column name
        lon_col : str
            Longitude column name
        reject_zero : bool
            Filter rows with a coordinate of exactly 0
        strict : bool
            Raise DataValidationError instead of filtering
        """
        self.lat_col = lat_col
        self.lon_col = lon_col
        self.reject_zero = reject_zero
        self.strict = strict

    def validate(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, ValidationResult]:
        """
        Validate coordinates and filter unusable rows.

        Returns
        -------
        Tuple[pd.DataFrame, ValidationResult]
            Filtered copy of the DataFrame and the validation result

        Raises
        ------
        DataValidationError
            If columns are missing, or in strict mode when any row is filtered
        """
        validate_columns_exist(df, {self.lat_col, self.lon_col}, "points")

        lat = pd.to_numeric(df[self.lat_col], errors='coerce')
        lon = pd.to_numeric(df[self.lon_col], errors='coerce')
        issues: List[ValidationIssue] = []

        missing = lat.isna() | lon.isna()
        non_finite = ~missing & ~(np.isfinite(lat) & np.isfinite(lon))
        usable = ~missing & ~non_finite
        lat_out = usable & ((lat < -90) | (lat > 90))
        lon_out = usable & ((lon < -180) | (lon > 180))
        zero = usable & ((lat == 0) | (lon == 0))

        self._collect(issues, df, missing, IssueSeverity.CRITICAL, 'missing_coordinate',
                      "Coordinate missing or not numeric")
        self._collect(issues, df, non_finite, IssueSeverity.CRITICAL, 'non_finite_coordinate',
                      "Coordinate is infinite")
        self._collect(issues, df, lat_out, IssueSeverity.CRITICAL, 'latitude_out_of_range',
                      "Latitude outside [-90, 90]", values=lat, expected_range="[-90, 90]")
        self._collect(issues, df, lon_out, IssueSeverity.CRITICAL, 'longitude_out_of_range',
                      "Longitude outside [-180, 180]", values=lon, expected_range="[-180, 180]")
        self._collect(issues, df, zero, IssueSeverity.WARNING, 'zero_coordinate',
                      "Coordinate is exactly 0 (no GPS fix)")

        invalid = missing | non_finite | lat_out | lon_out
        if self.reject_zero:
            invalid = invalid | zero

        result = ValidationResult(
            total_rows=len(df),
            valid_rows=int((~invalid).sum()),
            filtered_rows=int(invalid.sum()),
            issues=issues,
        )

        if self.strict and result.filtered_rows > 0:
            raise DataValidationError(
                "Invalid coordinates found",
                invalid_rows=result.filtered_rows,
                details={issue.rule: issue.message for issue in issues},
            )

        clean = df.loc[~invalid].copy()
        clean[self.lat_col] = lat[~invalid]
        clean[self.lon_col] = lon[~invalid]
        return clean, result

    @staticmethod
    def _collect(
        issues: List[ValidationIssue],
        df: pd.DataFrame,
        mask: pd.Series,
        severity: IssueSeverity,
        rule: str,
        message: str,
        values: pd.Series = None,
        expected_range: str = None,
    ) -> None:
        for row in df.index[mask.to_numpy()]:
            issues.append(ValidationIssue(
                row=row,
                severity=severity,
                rule=rule,
                message=message,
                actual_value=None if values is None else values.loc[row],
                expected_range=expected_range,
            ))
