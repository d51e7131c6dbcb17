"""Provide the least-squares routine and the regression contract.

This module supports:
- an ordinary least-squares straight-line fit with full inferential
  statistics, and
- the ``Regressor`` protocol and result types consumed by the efficiency
  estimator, so any OLS engine meeting the contract can be injected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Protocol, runtime_checkable

import numpy as np
from scipy.stats import t as student_t

from ..exceptions import RegressionError


@dataclass(frozen=True)
class ParameterEstimate:
    """A fitted coefficient and its standard error."""

    value: float
    standard_error: float


@dataclass(frozen=True, eq=False)
class RegressionResult:
    """Outputs of a calibration-curve fit.

    Attributes:
        slope: Fitted slope (Ct per decade of input) and its standard error.
        intercept: Fitted intercept (Ct at one unit of input).
        coefficient_of_variation: Residual standard error relative to the
            mean response, in percent.
        residual_standard_error: ``sqrt(SSE / (n - 2))`` in Ct units.
        sum_of_squared_errors: Sum of squared residuals of the fit.
        r2: Coefficient of determination.
        n_points: Number of fitted points (calibration levels).
        dof: Residual degrees of freedom, ``n_points - 2``.
        slope_ci95: 95% half-width of the slope.
        slope_pvalue: Two-sided p-value for a zero slope.
        x: Independent variable used for the fit (log10 quantities).
        y: Response used for the fit (replicate means).
    """

    slope: ParameterEstimate
    intercept: ParameterEstimate
    coefficient_of_variation: float
    residual_standard_error: float
    sum_of_squared_errors: float
    r2: float
    n_points: int
    dof: int
    slope_ci95: float
    slope_pvalue: float
    x: np.ndarray
    y: np.ndarray

    def predict(self, x: np.ndarray) -> np.ndarray:
        return self.slope.value * np.asarray(x, dtype=float) + self.intercept.value


@runtime_checkable
class Regressor(Protocol):
    """Anything that can fit Ct replicates against log10 input amounts.

    ``x`` has length N and ``y`` has N columns with one replicate per row.
    How replicate rows are reduced is the implementation's own policy.
    ``verbose`` may trigger a report or figure but must not change the
    returned result.
    """

    def fit(self, x: np.ndarray, y: np.ndarray, verbose: bool = False) -> RegressionResult:
        ...


def linear_regression(
    x: np.ndarray, y: np.ndarray, min_points: int = 3
) -> Dict[str, float]:
    """Fit an ordinary least-squares straight line to finite data pairs.

    Args:
        x (numpy.ndarray): Independent variable array (log10 input amount).
        y (numpy.ndarray): Dependent variable array (Ct).
        min_points (int, optional): Minimum number of finite paired
            observations required. Defaults to ``3``; smaller values are raised
            to 3 so the residual variance has at least one degree of freedom.

    Returns:
        dict[str, float]: Regression diagnostics with keys ``m`` (slope),
        ``b`` (intercept), ``r2``, ``se_m``, ``se_b``, ``ci95_m``,
        ``ci95_b`` (95% half-widths), ``p_m`` (p-value for slope), ``sse``,
        ``rse``, ``cv_pct``, ``n``, ``dof``, ``mse``, ``ssxx``, ``xbar`` and
        ``ybar``.

    Raises:
        RegressionError: If there are insufficient valid points or
            insufficient x/y variance.

    Note:
        ``cv_pct`` is the residual standard error as a percentage of the mean
        response. It describes scatter about the line, not replicate scatter.

    References:
        Ordinary least squares linear regression.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise RegressionError(
            f"x and y must have the same shape, got {x_arr.shape} and {y_arr.shape}."
        )
    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    x_arr = x_arr[mask]
    y_arr = y_arr[mask]
    n = int(len(x_arr))
    min_points = max(int(min_points), 3)
    if n < min_points:
        raise RegressionError(
            f"Insufficient valid data for regression: {n} points, minimum {min_points}."
        )

    xbar = float(np.mean(x_arr))
    ybar = float(np.mean(y_arr))
    ssxx = float(np.sum((x_arr - xbar) ** 2))
    if ssxx <= 0:
        raise RegressionError("Insufficient variance in x for regression.")
    sst = float(np.sum((y_arr - ybar) ** 2))
    if sst <= 0:
        raise RegressionError("Insufficient variance in y for regression.")

    m, b = np.polyfit(x_arr, y_arr, 1)
    yhat = m * x_arr + b
    resid = y_arr - yhat

    sse = float(np.sum(resid**2))
    r2 = 1.0 - sse / sst

    dof = n - 2
    mse = sse / dof
    rse = math.sqrt(mse)
    cv_pct = 100.0 * rse / ybar if ybar != 0 else math.nan

    se_m = float(np.sqrt(mse / ssxx))
    se_b = float(np.sqrt(mse * (1.0 / n + (xbar**2) / ssxx)))

    t_stat = m / se_m if se_m > 0 else np.inf
    p_m = float(2 * student_t.sf(abs(t_stat), dof))
    t_crit = float(student_t.ppf(0.975, dof))

    return {
        "m": float(m),
        "b": float(b),
        "r2": float(r2),
        "se_m": se_m,
        "se_b": se_b,
        "ci95_m": t_crit * se_m,
        "ci95_b": t_crit * se_b,
        "p_m": p_m,
        "sse": sse,
        "rse": rse,
        "cv_pct": cv_pct,
        "n": n,
        "dof": dof,
        "mse": mse,
        "ssxx": ssxx,
        "xbar": xbar,
        "ybar": ybar,
    }


def regression_result_from_fit(
    fit: Dict[str, float], x: np.ndarray, y: np.ndarray
) -> RegressionResult:
    """Package a :func:`linear_regression` dictionary as a result object."""
    return RegressionResult(
        slope=ParameterEstimate(fit["m"], fit["se_m"]),
        intercept=ParameterEstimate(fit["b"], fit["se_b"]),
        coefficient_of_variation=float(fit["cv_pct"]),
        residual_standard_error=float(fit["rse"]),
        sum_of_squared_errors=float(fit["sse"]),
        r2=float(fit["r2"]),
        n_points=int(fit["n"]),
        dof=int(fit["dof"]),
        slope_ci95=float(fit["ci95_m"]),
        slope_pvalue=float(fit["p_m"]),
        x=np.asarray(x, dtype=float),
        y=np.asarray(y, dtype=float),
    )
