"""Shared calibration data and stub regressors for the test suite."""

import numpy as np

from pcreff.stats.regression import ParameterEstimate, RegressionResult

QUANTITIES = [0.12, 0.5, 3, 15, 30]

# Dilution series with tight replicates; slope about -3.41.
GOOD_CT = [
    [33.10, 31.04, 28.42, 26.01, 24.95],
    [33.22, 30.95, 28.31, 26.12, 25.03],
    [33.15, 31.12, 28.36, 25.96, 24.90],
]

# Same series with column means pushed about one cycle off the line.
NOISY_CT = [
    [34.65, 29.54, 28.88, 26.50, 24.47],
    [34.15, 30.04, 28.38, 27.00, 23.97],
    [33.65, 30.54, 27.88, 27.50, 23.47],
]


def make_result(slope=-3.4, slope_se=0.05, cv=0.5, rse=0.1, sse=0.03, n=5):
    return RegressionResult(
        slope=ParameterEstimate(slope, slope_se),
        intercept=ParameterEstimate(35.0, 0.1),
        coefficient_of_variation=cv,
        residual_standard_error=rse,
        sum_of_squared_errors=sse,
        r2=0.99,
        n_points=n,
        dof=n - 2,
        slope_ci95=np.nan,
        slope_pvalue=np.nan,
        x=np.zeros(n),
        y=np.zeros(n),
    )


class FixedRegressor:
    """Return a prepared result and record every call."""

    def __init__(self, result=None):
        self.result = result if result is not None else make_result()
        self.calls = []

    def fit(self, x, y, verbose=False):
        self.calls.append((np.array(x), np.array(y), verbose))
        return self.result


class FailingRegressor:
    def __init__(self, exc):
        self.exc = exc

    def fit(self, x, y, verbose=False):
        raise self.exc
