"""
A Python package for estimating real-time PCR amplification efficiency.

Fits a calibration curve of Ct against log10 input amount and turns its slope
into an efficiency with a propagated standard error, a Student-t confidence
interval, and a quality verdict.

Modules:
    - validation: Checks calibration quantities and Ct matrices.
    - regressor: Default least-squares regressor (replicate means).
    - estimator: Efficiency, standard error, interval, quality index.
    - reporting: Summary tables and the fixed-format text report.
    - output: CSV export of estimates and diagnostics.
    - data_processing: Loads calibration tables from CSV files.
    - plotting: Calibration-curve figure.
    - stats: Pure regression and uncertainty utilities.
"""

__version__ = "2.0.0"

from .config import EstimatorConfig
from .data_processing import load_calibration
from .estimator import EfficiencyEstimator, classify, estimate, quality_index
from .exceptions import PCREffError, RegressionError, ValidationError
from .output import save_results_to_csv
from .regressor import OLSRegressor
from .reporting import format_report, print_report, summary_table
from .schema import CalibrationInput, Classification, EfficiencyEstimate
from .stats.regression import RegressionResult, Regressor
from .validation import validate_calibration

__all__ = [
    # Estimation
    "estimate",
    "EfficiencyEstimator",
    "EstimatorConfig",
    "quality_index",
    "classify",
    # Regression
    "OLSRegressor",
    "Regressor",
    "RegressionResult",
    # Data
    "CalibrationInput",
    "EfficiencyEstimate",
    "Classification",
    "load_calibration",
    "validate_calibration",
    # Reporting
    "format_report",
    "print_report",
    "summary_table",
    "save_results_to_csv",
    # Errors
    "PCREffError",
    "ValidationError",
    "RegressionError",
]
