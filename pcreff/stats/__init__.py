"""
Statistical utilities for calibration-curve analysis.

This subpackage provides numerical routines for regression analysis and
uncertainty propagation. All functions operate on arrays and primitive types;
no reporting or plotting logic is included.

Modules:
    regression:
        Ordinary least-squares fit with standard errors, residual
        diagnostics, and the ``Regressor`` contract.

    uncertainty:
        Slope-to-efficiency transform, delta-method standard error,
        Student-t confidence intervals, and value/uncertainty rounding.

Design Principle:
    This subpackage has no dependencies on reporting or plotting modules.
    It provides pure numerical utilities that can be independently tested.
"""

from .regression import (
    ParameterEstimate,
    RegressionResult,
    Regressor,
    linear_regression,
    regression_result_from_fit,
)
from .uncertainty import (
    confidence_interval,
    efficiency_from_slope,
    efficiency_standard_error,
    format_value_with_uncertainty,
    round_uncertainty,
    t_critical,
)

__all__ = [
    "ParameterEstimate",
    "RegressionResult",
    "Regressor",
    "linear_regression",
    "regression_result_from_fit",
    "confidence_interval",
    "efficiency_from_slope",
    "efficiency_standard_error",
    "format_value_with_uncertainty",
    "round_uncertainty",
    "t_critical",
]
