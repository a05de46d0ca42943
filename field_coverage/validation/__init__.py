"""
Validation framework for upstream point data.

Flags and filters coordinates the spatial core cannot use.
"""
from .validators import (
    CoordinateValidator,
    ValidationResult,
    ValidationIssue,
    IssueSeverity,
)

__all__ = [
    'CoordinateValidator',
    'ValidationResult',
    'ValidationIssue',
    'IssueSeverity',
]
