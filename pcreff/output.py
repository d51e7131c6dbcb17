"""Write efficiency estimates and fit diagnostics to reproducible CSV files.

This module is the output boundary between in-memory estimates and
tabular artifacts.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

import pandas as pd

from .data_processing import calibration_to_long_form
from .reporting import add_formatted_reporting_columns, regression_summary_table, summary_table
from .schema import COLUMNS, CalibrationInput, EfficiencyEstimate

logger = logging.getLogger(__name__)

SE_PERCENT_COLUMN = "SE (%)"


def _efficiency_report_frame(estimate: EfficiencyEstimate) -> pd.DataFrame:
    """Summary row plus precision-matched reporting columns."""
    table = summary_table(estimate)
    table[SE_PERCENT_COLUMN] = estimate.standard_error * 100.0
    table["Classification"] = estimate.classification.value
    table["Confidence level"] = estimate.confidence_level
    table["Degrees of freedom"] = estimate.degrees_of_freedom
    if estimate.standard_error > 0:
        table = add_formatted_reporting_columns(
            table, [(COLUMNS.efficiency, SE_PERCENT_COLUMN)]
        )
    return table


def _regression_report_frame(estimate: EfficiencyEstimate) -> pd.DataFrame:
    result = estimate.regression
    table = regression_summary_table(result)
    diagnostics = pd.DataFrame(
        [
            {"Parameter": "R^2", "Value": result.r2},
            {"Parameter": "RSE", "Value": result.residual_standard_error},
            {"Parameter": "CV (%)", "Value": result.coefficient_of_variation},
            {"Parameter": "SSE", "Value": result.sum_of_squared_errors},
            {"Parameter": "n", "Value": result.n_points},
        ]
    )
    return pd.concat([table, diagnostics], ignore_index=True)


def save_results_to_csv(
    estimate: EfficiencyEstimate,
    output_dir: str = "output",
    calibration: Optional[CalibrationInput] = None,
) -> Tuple[str, str]:
    """Save the efficiency summary and regression diagnostics to CSV files.

    Args:
        estimate (EfficiencyEstimate): Result of an efficiency estimate.
        output_dir (str): Directory where CSV outputs are written.
        calibration (CalibrationInput, optional): Input data; when given it
            is also written as ``calibration_data.csv`` in long form.

    Returns:
        tuple[str, str]: Paths to ``efficiency_summary.csv`` and
        ``regression_summary.csv``.

    Note:
        The reported efficiency column is rounded to the precision implied by
        its standard error; it is omitted for a zero standard error.
    """
    os.makedirs(output_dir, exist_ok=True)

    summary_path = os.path.join(output_dir, "efficiency_summary.csv")
    regression_path = os.path.join(output_dir, "regression_summary.csv")

    _efficiency_report_frame(estimate).to_csv(summary_path, index=False)
    _regression_report_frame(estimate).to_csv(regression_path, index=False)
    logger.info("Saved efficiency summary to %s", summary_path)
    logger.info("Saved regression summary to %s", regression_path)

    if calibration is not None:
        data_path = os.path.join(output_dir, "calibration_data.csv")
        calibration_to_long_form(calibration).to_csv(data_path, index=False)
        logger.info("Saved calibration data to %s", data_path)

    return summary_path, regression_path
