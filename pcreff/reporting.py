"""Format efficiency estimates and fit diagnostics for display and export.

This module is used after the numerical estimate is complete; it never feeds
values back into the computation.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from .schema import COLUMNS, EfficiencyEstimate
from .stats.regression import RegressionResult
from .stats.uncertainty import round_uncertainty

REPORT_TITLE = "PCR Efficiency"
REPORT_WIDTH = 96


def uncertainty_decimal_places(uncertainty: float) -> int:
    """Return decimal places implied by significant-figure uncertainty rounding.

    Args:
        uncertainty (float): Absolute uncertainty for a reported value
            (same unit as the value being reported).

    Returns:
        int: Number of decimal places that the paired value should use.
    """
    u = float(uncertainty)
    if not np.isfinite(u) or u <= 0:
        raise ValueError(f"Uncertainty must be finite and > 0, got {uncertainty!r}")
    return max(0, round_uncertainty(u)[1])


def format_value_to_uncertainty_decimals(value: float, uncertainty: float) -> str:
    """Format a value using decimal places implied by its uncertainty.

    Note:
        Intended for reporting/export only; original numeric values should be
        kept for downstream calculations.
    """
    dp = uncertainty_decimal_places(uncertainty)
    return f"{float(value):.{dp}f}"


def validate_uncertainty_columns(
    df: pd.DataFrame,
    value_uncertainty_pairs: Iterable[tuple[str, str]],
) -> None:
    """Validate value/uncertainty column pairs for reporting safety.

    Raises:
        KeyError: If any required value or uncertainty column is missing.
        ValueError: If a finite value exists in a row where uncertainty is
            missing, non-finite, or non-positive.
    """
    for value_col, unc_col in value_uncertainty_pairs:
        if value_col not in df.columns:
            raise KeyError(f"Missing value column '{value_col}' for reporting format.")
        if unc_col not in df.columns:
            raise KeyError(
                f"Missing uncertainty column '{unc_col}' required for '{value_col}'."
            )

        values = pd.to_numeric(df[value_col], errors="coerce")
        uncs = pd.to_numeric(df[unc_col], errors="coerce")
        missing_mask = values.notna() & (~np.isfinite(uncs) | (uncs <= 0))

        if bool(missing_mask.any()):
            bad_rows = list(df.index[missing_mask][:5])
            raise ValueError(
                "Uncertainty metadata missing/invalid for measured values in "
                f"'{value_col}' (uncertainty '{unc_col}'). "
                f"Example row indices: {bad_rows}."
            )


def add_formatted_reporting_columns(
    df: pd.DataFrame,
    value_uncertainty_pairs: Iterable[tuple[str, str]],
    suffix: str = " (reported)",
) -> pd.DataFrame:
    """Add reporting-ready string columns for values and uncertainties.

    Args:
        df (pandas.DataFrame): Input numeric table.
        value_uncertainty_pairs (Iterable[tuple[str, str]]): Sequence of
            ``(value_column, uncertainty_column)`` pairs to format.
        suffix (str, optional): Suffix appended to generated reporting columns.
            Defaults to ``" (reported)"``.

    Returns:
        pandas.DataFrame: Copy of ``df`` with formatted string columns added.

    Raises:
        KeyError: If required value/uncertainty columns are absent.
        ValueError: If uncertainty metadata is invalid for finite values.
    """
    pairs = list(value_uncertainty_pairs)
    out = df.copy()
    validate_uncertainty_columns(out, pairs)

    for value_col, unc_col in pairs:
        values = pd.to_numeric(out[value_col], errors="coerce")
        uncs = pd.to_numeric(out[unc_col], errors="coerce")

        out[f"{value_col}{suffix}"] = [
            (
                format_value_to_uncertainty_decimals(v, u)
                if (np.isfinite(v) and np.isfinite(u) and u > 0)
                else ""
            )
            for v, u in zip(values, uncs)
        ]
        out[f"{unc_col}{suffix}"] = [
            (
                f"{round_uncertainty(u)[0]:.{uncertainty_decimal_places(u)}f}"
                if (np.isfinite(u) and u > 0)
                else ""
            )
            for u in uncs
        ]

    return out


def summary_table(estimate: EfficiencyEstimate) -> pd.DataFrame:
    """Build the one-row efficiency summary.

    Efficiency is in percent; SE and the interval bounds stay fractional.
    """
    lower, upper = estimate.confidence_interval
    return pd.DataFrame(
        [
            {
                COLUMNS.efficiency: estimate.percent,
                COLUMNS.se: estimate.standard_error,
                COLUMNS.ci_lower: lower,
                COLUMNS.ci_upper: upper,
                COLUMNS.quality: estimate.quality_index,
                COLUMNS.comment: estimate.comment,
            }
        ]
    )


def regression_summary_table(result: RegressionResult) -> pd.DataFrame:
    """Build a two-row coefficient table plus fit diagnostics."""
    rows = [
        {
            "Parameter": "Slope",
            "Value": result.slope.value,
            "SE": result.slope.standard_error,
            "95% half-width": result.slope_ci95,
            "p-value": result.slope_pvalue,
        },
        {
            "Parameter": "Intercept",
            "Value": result.intercept.value,
            "SE": result.intercept.standard_error,
            "95% half-width": np.nan,
            "p-value": np.nan,
        },
    ]
    return pd.DataFrame(rows)


def format_regression_summary(result: RegressionResult) -> str:
    """Render the regression coefficients and diagnostics as text."""
    lines = [
        "Calibration curve regression (Ct vs log10 input)".center(REPORT_WIDTH),
        "-" * REPORT_WIDTH,
        regression_summary_table(result).to_string(index=False, float_format="{:.4f}".format),
        "",
        f"R^2 = {result.r2:.4f} | RSE = {result.residual_standard_error:.4f} | "
        f"CV = {result.coefficient_of_variation:.3f}% | "
        f"SSE = {result.sum_of_squared_errors:.4g} | n = {result.n_points} (dof={result.dof})",
    ]
    return "\n".join(lines)


def format_report(estimate: EfficiencyEstimate) -> str:
    """Render the fixed-format efficiency report."""
    title = " " * 41 + REPORT_TITLE
    table = summary_table(estimate).to_string(index=False, float_format="{:.4f}".format)
    return "\n".join([title, "-" * REPORT_WIDTH, table])


def print_report(estimate: EfficiencyEstimate) -> None:
    print(format_report(estimate))


def print_regression_summary(result: RegressionResult) -> None:
    print(format_regression_summary(result))
