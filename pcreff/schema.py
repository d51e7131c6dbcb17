"""Value objects and standardized column names shared across the package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Tuple

import numpy as np

from .config import GOOD_CALIBRATOR_COMMENT, POOR_CALIBRATOR_COMMENT

if TYPE_CHECKING:
    from .stats.regression import RegressionResult


class Classification(str, Enum):
    """Go/no-go verdict on a calibration curve."""

    GOOD_CALIBRATOR = "GoodCalibrator"
    POOR_CALIBRATOR = "PoorCalibrator"

    @property
    def comment(self) -> str:
        if self is Classification.GOOD_CALIBRATOR:
            return GOOD_CALIBRATOR_COMMENT
        return POOR_CALIBRATOR_COMMENT


@dataclass(frozen=True, eq=False)
class CalibrationInput:
    """Validated calibration data.

    Attributes:
        quantities: 1-D array of N positive input amounts (e.g. ng of cDNA).
        measurements: M x N array of Ct values; column ``j`` holds the
            replicates measured for ``quantities[j]``.
    """

    quantities: np.ndarray
    measurements: np.ndarray

    @property
    def n_points(self) -> int:
        return int(self.quantities.size)

    @property
    def n_replicates(self) -> int:
        return int(self.measurements.shape[0])

    @property
    def log_quantities(self) -> np.ndarray:
        return np.log10(self.quantities)


@dataclass(frozen=True)
class EfficiencyEstimate:
    """Efficiency derived from a calibration curve.

    ``value`` is fractional (1.0 means exact doubling per cycle) and is not
    clamped: values outside ``[0, 1]`` signal a questionable calibration.
    """

    value: float
    standard_error: float
    confidence_interval: Tuple[float, float]
    quality_index: float
    classification: Classification
    confidence_level: float
    degrees_of_freedom: int
    regression: "RegressionResult"

    @property
    def percent(self) -> float:
        return self.value * 100.0

    @property
    def is_good(self) -> bool:
        return self.classification is Classification.GOOD_CALIBRATOR

    @property
    def comment(self) -> str:
        return self.classification.comment

    def to_dict(self) -> Dict[str, object]:
        lower, upper = self.confidence_interval
        return {
            "value": self.value,
            "standard_error": self.standard_error,
            "ci_lower": lower,
            "ci_upper": upper,
            "quality_index": self.quality_index,
            "classification": self.classification.value,
            "confidence_level": self.confidence_level,
            "degrees_of_freedom": self.degrees_of_freedom,
        }


@dataclass(frozen=True)
class ReportColumns:
    """Container for standardized report column labels.

    Attributes:
        efficiency: Efficiency in percent (``value * 100``).
        se: Standard error of the fractional efficiency, propagated from the
            slope standard error.
        ci_lower: Lower bound of the Student-t interval (fractional).
        ci_upper: Upper bound of the Student-t interval (fractional).
        quality: Dimensionless quality index; values at or above the
            threshold mark a poor calibrator.
        comment: Human-readable calibrator verdict.
    """

    efficiency: str = "Efficiency (%)"
    se: str = "SE"
    ci_lower: str = "CI lower"
    ci_upper: str = "CI upper"
    quality: str = "Quality"
    comment: str = "Comment"


COLUMNS = ReportColumns()
