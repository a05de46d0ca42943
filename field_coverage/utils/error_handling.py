"""
Error handling utilities for Field Coverage.

Provides decorators and helpers for validating DataFrame inputs and
guarding numeric operations.
"""
import inspect
from functools import wraps
from typing import Set, List, Callable
import pandas as pd
import numpy as np
from field_coverage.utils.exceptions import DataValidationError


def require_columns(required_cols: List[str], df_param: str = "df"):
    """
    Decorator to validate required columns exist in DataFrame.

    Parameters
    ----------
    required_cols : List[str]
        List of required column names
    df_param : str
        Name of the DataFrame parameter to check

    Raises
    ------
    DataValidationError
        If the parameter is missing, not a DataFrame, or lacks columns
    """
    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)
        param_names = list(sig.parameters.keys())

        @wraps(func)
        def wrapper(*args, **kwargs):
            df = kwargs.get(df_param)
            if df is None and df_param in param_names:
                param_idx = param_names.index(df_param)
                if param_idx < len(args):
                    df = args[param_idx]

            if df is None:
                raise DataValidationError(f"DataFrame parameter '{df_param}' not found")

            if not isinstance(df, pd.DataFrame):
                raise DataValidationError(
                    f"Parameter '{df_param}' must be a pandas DataFrame, got {type(df)}"
                )

            validate_columns_exist(df, set(required_cols), df_param)

            return func(*args, **kwargs)
        return wrapper
    return decorator


def validate_columns_exist(
    df: pd.DataFrame,
    required_columns: Set[str],
    df_name: str = "DataFrame"
) -> None:
    """
    Validate that all required columns exist in DataFrame.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame to validate
    required_columns : Set[str]
        Set of required column names
    df_name : str
        Name of DataFrame for error message

    Raises
    ------
    DataValidationError
        If required columns are missing
    """
    missing_cols = required_columns - set(df.columns)
    if missing_cols:
        raise DataValidationError(
            f"{df_name} missing required columns: {sorted(missing_cols)}. "
            f"Available columns: {sorted(map(str, df.columns))}"
        )


def safe_division(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default on error.

    Parameters
    ----------
    numerator : float
        Numerator
    denominator : float
        Denominator
    default : float
        Value to return on division by zero, NaN input or non-finite result

    Returns
    -------
    float
        Result of division or default value
    """
    if denominator == 0 or pd.isna(denominator) or pd.isna(numerator):
        return default

    result = numerator / denominator
    if not np.isfinite(result):
        return default
    return result
