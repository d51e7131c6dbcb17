"""Default ordinary least-squares regressor for calibration curves.

Replicate Ct rows are reduced to their column means before fitting, so the
fit has one point per calibration level and ``n - 2`` residual degrees of
freedom.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .exceptions import RegressionError
from .plotting import plot_calibration_curve
from .reporting import print_regression_summary
from .stats.regression import (
    RegressionResult,
    linear_regression,
    regression_result_from_fit,
)

logger = logging.getLogger(__name__)


class OLSRegressor:
    """Fit mean Ct against log10 input amount with ``numpy.polyfit``.

    Args:
        plot_dir: When set and ``fit`` is called with ``verbose=True``, a
            calibration-curve figure is written to this directory.
        min_points: Minimum number of calibration levels.
    """

    def __init__(self, plot_dir: Optional[str] = None, min_points: int = 3):
        self.plot_dir = plot_dir
        self.min_points = min_points

    def fit(self, x: np.ndarray, y: np.ndarray, verbose: bool = False) -> RegressionResult:
        x_arr = np.asarray(x, dtype=float).ravel()
        y_arr = np.asarray(y, dtype=float)
        if y_arr.ndim == 1:
            y_arr = y_arr.reshape(1, -1)
        if y_arr.ndim != 2 or y_arr.shape[1] != x_arr.size:
            raise RegressionError(
                f"y must have one column per x value ({x_arr.size}), got shape {y_arr.shape}."
            )
        if not (np.isfinite(x_arr).all() and np.isfinite(y_arr).all()):
            raise RegressionError("Regression inputs must be finite.")

        y_mean = y_arr.mean(axis=0)
        fit = linear_regression(x_arr, y_mean, min_points=self.min_points)
        result = regression_result_from_fit(fit, x_arr, y_mean)
        logger.debug(
            "OLS fit: slope=%.4f se=%.4f r2=%.4f n=%d",
            result.slope.value,
            result.slope.standard_error,
            result.r2,
            result.n_points,
        )

        if verbose:
            print_regression_summary(result)
            if self.plot_dir is not None:
                path = plot_calibration_curve(
                    result, output_dir=self.plot_dir, replicates=y_arr
                )
                logger.info("Calibration curve figure: %s", path)

        return result
