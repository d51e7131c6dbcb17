"""Centralized configuration constants for efficiency estimation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ValidationError

QUALITY_THRESHOLD: float = 0.1
CONFIDENCE_LEVEL: float = 0.95
MIN_CALIBRATION_POINTS: int = 3
DEFAULT_OUTPUT_DIR = Path("output")

GOOD_CALIBRATOR_COMMENT = "This is a good calibrator"
POOR_CALIBRATOR_COMMENT = "This is not a good calibrator"


@dataclass(frozen=True)
class EstimatorConfig:
    """Settings bound into an :class:`~pcreff.estimator.EfficiencyEstimator`.

    Attributes:
        verbose: Ask the regressor for its own summary and print the
            efficiency report. Has no effect on the returned estimate.
        confidence_level: Two-sided coverage of the efficiency interval.
            The Student-t critical value uses ``N - 2`` degrees of freedom.
        quality_threshold: Quality index at or above which the calibration is
            classified as poor. ``0.1`` is the conventional value.
    """

    verbose: bool = True
    confidence_level: float = CONFIDENCE_LEVEL
    quality_threshold: float = QUALITY_THRESHOLD

    def __post_init__(self) -> None:
        level = float(self.confidence_level)
        if not math.isfinite(level) or not 0.0 < level < 1.0:
            raise ValidationError(
                f"confidence_level must lie strictly between 0 and 1, got {self.confidence_level!r}"
            )
        threshold = float(self.quality_threshold)
        if not math.isfinite(threshold) or threshold < 0:
            raise ValidationError(
                f"quality_threshold must be finite and >= 0, got {self.quality_threshold!r}"
            )
