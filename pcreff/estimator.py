"""Estimate qPCR amplification efficiency from a calibration curve.

The estimate follows the standard calibration-curve method:

1. regress Ct on log10(input amount),
2. convert the slope to efficiency, ``E = 10^(-1/slope) - 1``,
3. propagate the slope standard error to ``E`` (delta method),
4. build a Student-t interval with ``N - 2`` degrees of freedom, and
5. score the fit with a quality index,
   ``((CV * RSE / slope)^2) / SSE``, where values >= 0.1 mark a poor
   calibrator.

The regression itself is delegated to a :class:`~pcreff.stats.regression.Regressor`;
:class:`~pcreff.regressor.OLSRegressor` is used when none is supplied.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Optional

from .config import CONFIDENCE_LEVEL, QUALITY_THRESHOLD, EstimatorConfig
from .exceptions import PCREffError, RegressionError, ValidationError
from .regressor import OLSRegressor
from .reporting import print_report
from .schema import CalibrationInput, Classification, EfficiencyEstimate
from .stats.regression import RegressionResult, Regressor
from .stats.uncertainty import (
    confidence_interval,
    efficiency_from_slope,
    efficiency_standard_error,
    format_value_with_uncertainty,
)
from .validation import validate_calibration

logger = logging.getLogger(__name__)

_RESULT_FIELDS = (
    "slope",
    "coefficient_of_variation",
    "residual_standard_error",
    "sum_of_squared_errors",
)


def quality_index(result: RegressionResult) -> float:
    """Compute ``((CV * RSE / slope)^2) / SSE`` from fit diagnostics.

    A perfect fit (``SSE == 0``) has no relative noise and scores 0.

    Raises:
        ValidationError: If the diagnostics are non-finite, the slope is zero,
            or SSE is negative.
    """
    cv = float(result.coefficient_of_variation)
    rse = float(result.residual_standard_error)
    sse = float(result.sum_of_squared_errors)
    slope = float(result.slope.value)

    if not all(math.isfinite(v) for v in (cv, rse, sse, slope)):
        raise ValidationError(
            f"Regression diagnostics must be finite (cv={cv}, rse={rse}, sse={sse}, slope={slope})."
        )
    if slope == 0:
        raise ValidationError("Quality index is undefined for a zero slope.")
    if sse < 0:
        raise ValidationError(f"Sum of squared errors cannot be negative, got {sse}.")
    if sse == 0:
        return 0.0
    return float(((cv * rse / slope) ** 2) / sse)


def classify(quality: float, threshold: float = QUALITY_THRESHOLD) -> Classification:
    """Poor at or above ``threshold``, good below it."""
    if quality >= threshold:
        return Classification.POOR_CALIBRATOR
    return Classification.GOOD_CALIBRATOR


class EfficiencyEstimator:
    """Turn calibration data into an :class:`EfficiencyEstimate`.

    Args:
        regressor: Object implementing ``fit(x, y, verbose)``. Defaults to
            :class:`OLSRegressor`.
        config: Verbosity, confidence level and quality threshold.

    Raises:
        RegressionError: If ``regressor`` does not provide a ``fit`` method.
    """

    def __init__(
        self,
        regressor: Optional[Regressor] = None,
        config: Optional[EstimatorConfig] = None,
    ):
        if regressor is None:
            regressor = OLSRegressor()
        if not callable(getattr(regressor, "fit", None)):
            raise RegressionError(
                f"Regressor {regressor!r} is unavailable: it has no callable 'fit' method."
            )
        self.regressor = regressor
        self.config = config if config is not None else EstimatorConfig()

    def estimate(
        self, quantities, measurements, verbose: Optional[bool] = None
    ) -> EfficiencyEstimate:
        """Estimate efficiency, its standard error, interval, and quality.

        Args:
            quantities: N positive input amounts (row or column vector).
            measurements: M x N Ct matrix, one column per quantity.
            verbose: Overrides ``config.verbose`` for this call. When true,
                the regressor reports on its fit and the efficiency summary
                is printed. The returned value is unaffected.

        Returns:
            EfficiencyEstimate: The assembled estimate.

        Raises:
            ValidationError: If the inputs are malformed or the fitted slope
                cannot be turned into a finite efficiency.
            RegressionError: If the regressor fails to produce a fit.
        """
        verbose = self.config.verbose if verbose is None else bool(verbose)
        calibration = validate_calibration(quantities, measurements)
        regression = self._fit(calibration, verbose)

        slope = float(regression.slope.value)
        value = efficiency_from_slope(slope)
        se = efficiency_standard_error(slope, regression.slope.standard_error, value)

        if not 0.0 <= value <= 1.0:
            warnings.warn(
                f"Efficiency {value:.3f} (slope {slope:.3f}) lies outside [0, 1]; "
                "check the dilution series and Ct values.",
                UserWarning,
                stacklevel=2,
            )

        dof = calibration.n_points - 2
        ci = confidence_interval(value, se, dof, self.config.confidence_level)
        quality = quality_index(regression)
        verdict = classify(quality, self.config.quality_threshold)

        result = EfficiencyEstimate(
            value=value,
            standard_error=se,
            confidence_interval=ci,
            quality_index=quality,
            classification=verdict,
            confidence_level=self.config.confidence_level,
            degrees_of_freedom=dof,
            regression=regression,
        )
        logger.info(
            "Efficiency %s (CI %.4f-%.4f), quality %.4g: %s",
            format_value_with_uncertainty(result.percent, se * 100.0, "%"),
            ci[0],
            ci[1],
            quality,
            verdict.value,
        )

        if verbose:
            print_report(result)
        return result

    def _fit(self, calibration: CalibrationInput, verbose: bool) -> RegressionResult:
        try:
            result = self.regressor.fit(
                calibration.log_quantities, calibration.measurements, verbose
            )
        except PCREffError:
            raise
        except Exception as exc:
            raise RegressionError(f"Regression failed: {exc}") from exc

        missing = [name for name in _RESULT_FIELDS if not hasattr(result, name)]
        if missing or not hasattr(getattr(result, "slope", None), "standard_error"):
            raise RegressionError(
                f"Regressor returned an incomplete result (missing: {missing or ['slope.standard_error']})."
            )
        return result


def estimate(
    quantities,
    measurements,
    verbose: bool = True,
    regressor: Optional[Regressor] = None,
    confidence_level: float = CONFIDENCE_LEVEL,
    quality_threshold: float = QUALITY_THRESHOLD,
) -> EfficiencyEstimate:
    """Estimate PCR efficiency from calibration data.

    Convenience wrapper around :class:`EfficiencyEstimator`; see
    :meth:`EfficiencyEstimator.estimate` for arguments and errors.

    Example:
        >>> ng = [0.12, 0.5, 3, 15, 30]
        >>> ct = [[33.1, 31.0, 28.4, 26.0, 25.0],
        ...       [33.2, 31.1, 28.3, 26.1, 24.9]]
        >>> E = estimate(ng, ct, verbose=False)
        >>> E.is_good
        True
    """
    config = EstimatorConfig(
        verbose=verbose,
        confidence_level=confidence_level,
        quality_threshold=quality_threshold,
    )
    return EfficiencyEstimator(regressor=regressor, config=config).estimate(
        quantities, measurements
    )
