"""
Custom exception hierarchy for Field Coverage.

All custom exceptions inherit from FieldCoverageError for easy catching.
The spatial core itself never raises; these cover configuration loading
and validation of upstream data.
"""


class FieldCoverageError(Exception):
    """Base exception for all Field Coverage errors."""
    pass


class ConfigurationError(FieldCoverageError):
    """Configuration-related errors.

    Raised when configuration loading or validation fails.

    Example:
        >>> raise ConfigurationError("Invalid config: hex_radius_m must be > 0")
    """
    pass


class DataValidationError(FieldCoverageError):
    """Data validation errors.

    Raised when input data fails validation checks.

    Attributes:
        invalid_rows: Number of rows that failed validation
        details: Dictionary with validation error details
    """

    def __init__(self, message: str, invalid_rows: int = 0, details: dict = None):
        super().__init__(message)
        self.invalid_rows = invalid_rows
        self.details = details or {}

    def __str__(self):
        base = super().__str__()
        if self.invalid_rows > 0:
            return f"{base} (invalid_rows={self.invalid_rows})"
        return base


class GeometryError(FieldCoverageError):
    """Geometric calculation errors.

    Raised when a caller asks for geometry that cannot exist, e.g. the
    polygon of a cell from a grid that was never projected.

    Example:
        >>> raise GeometryError("Grid has no projection: no buildings were binned")
    """
    pass
