"""
Load calibration tables from CSV files.

Two layouts are supported:

- long form: one row per well, with a quantity column and a Ct column.
  Rows sharing a quantity are replicates of that calibration level.
- wide form: the header row holds the quantities and each following row is
  one replicate, matching the ``M x N`` measurement matrix directly.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .exceptions import ValidationError
from .schema import CalibrationInput
from .validation import validate_calibration

logger = logging.getLogger(__name__)

QUANTITY_CANDIDATES: tuple[str, ...] = (
    "quantity",
    "ng",
    "input",
    "amount",
    "concentration",
    "input amount",
)
CT_CANDIDATES: tuple[str, ...] = ("ct", "cp", "cq", "crossing point", "ct value")


def load_calibration_table(filepath, header: bool = True) -> pd.DataFrame:
    """
    Load a calibration table from a CSV file.

    Args:
        filepath (str): Path to the CSV file.
        header (bool, optional): Whether the first row holds column names.
            With ``False`` every row, the first included, is read as data
            so that repeated names are not renamed by pandas.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    if not header:
        return pd.read_csv(filepath, header=None, dtype=str)
    return pd.read_csv(filepath)


def _promote_header_row(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Use the first data row as column labels, keeping duplicates as read."""
    body = raw_df.iloc[1:].reset_index(drop=True)
    body.columns = [str(v) for v in raw_df.iloc[0]]
    return body


def _resolve_column(
    frame: pd.DataFrame,
    explicit: str | None,
    candidates: tuple[str, ...],
    label: str,
) -> str | None:
    """Resolve one input column using explicit name or canonical candidates."""
    if explicit is not None:
        if explicit not in frame.columns:
            raise ValidationError(
                f"Column '{explicit}' not found for {label}. "
                f"Available columns: {list(frame.columns)}"
            )
        return explicit

    lookup = {str(col).strip().lower(): str(col) for col in frame.columns}
    for name in candidates:
        found = lookup.get(name.lower())
        if found is not None:
            return found
    return None


def calibration_from_long_form(
    raw_df: pd.DataFrame,
    quantity_col: str | None = None,
    ct_col: str | None = None,
) -> CalibrationInput:
    """Build calibration data from a one-row-per-well table.

    Quantities are sorted ascending and replicates keep their file order
    within each level. Every level must carry the same number of replicates
    so the Ct values form a rectangular matrix.

    Raises:
        ValidationError: If the columns cannot be resolved, a quantity is
            missing, or replicate counts differ between levels.
    """
    q_name = _resolve_column(raw_df, quantity_col, QUANTITY_CANDIDATES, label="quantity")
    ct_name = _resolve_column(raw_df, ct_col, CT_CANDIDATES, label="Ct")
    if q_name is None:
        raise ValidationError("Could not detect quantity column. Provide --quantity-col.")
    if ct_name is None:
        raise ValidationError("Could not detect Ct column. Provide --ct-col.")

    long_df = pd.DataFrame(
        {
            "quantity": pd.to_numeric(raw_df[q_name], errors="coerce").astype(float),
            "ct": pd.to_numeric(raw_df[ct_name], errors="coerce").astype(float),
        }
    )
    if long_df["quantity"].isna().any():
        bad_rows = list(long_df.index[long_df["quantity"].isna()][:5])
        raise ValidationError(
            f"Found missing/non-numeric quantities in column '{q_name}'. "
            f"Example row indices: {bad_rows}."
        )

    long_df["replicate"] = long_df.groupby("quantity", sort=False).cumcount()
    counts = long_df.groupby("quantity")["ct"].size()
    if counts.nunique() > 1:
        detail = ", ".join(f"{q:g}: {int(n)}" for q, n in counts.items())
        raise ValidationError(
            f"Every quantity needs the same number of replicates; got {detail}."
        )

    matrix = long_df.pivot(index="replicate", columns="quantity", values="ct")
    matrix = matrix.sort_index(axis=1)
    logger.debug(
        "Long-form calibration: %d levels x %d replicates", matrix.shape[1], matrix.shape[0]
    )
    return validate_calibration(
        matrix.columns.to_numpy(dtype=float), matrix.to_numpy(dtype=float)
    )


def calibration_from_wide_form(raw_df: pd.DataFrame) -> CalibrationInput:
    """Build calibration data from a table whose header row holds quantities.

    Rows that are entirely empty are dropped; any remaining gap is reported
    by validation as a non-finite Ct.
    """
    quantities = pd.to_numeric(pd.Series(raw_df.columns, dtype=str).str.strip(), errors="coerce")
    if quantities.isna().any():
        bad = [str(c) for c, q in zip(raw_df.columns, quantities) if pd.isna(q)]
        raise ValidationError(f"Wide-form header must hold numeric quantities; got {bad}.")

    # Positional access; repeated quantities give repeated column labels.
    values = pd.DataFrame(
        {i: pd.to_numeric(raw_df.iloc[:, i], errors="coerce") for i in range(raw_df.shape[1])}
    ).dropna(how="all")
    return validate_calibration(quantities.to_numpy(dtype=float), values.to_numpy(dtype=float))


def load_calibration(
    filepath,
    layout: str = "long",
    quantity_col: str | None = None,
    ct_col: str | None = None,
) -> CalibrationInput:
    """Load and validate a calibration CSV in ``long`` or ``wide`` layout."""
    if layout == "long":
        raw = load_calibration_table(filepath)
        return calibration_from_long_form(raw, quantity_col=quantity_col, ct_col=ct_col)
    if layout == "wide":
        raw = load_calibration_table(filepath, header=False)
        return calibration_from_wide_form(_promote_header_row(raw))
    raise ValueError("layout must be 'long' or 'wide'")


def calibration_to_long_form(calibration: CalibrationInput) -> pd.DataFrame:
    """Flatten validated calibration data back to one row per well."""
    reps, levels = calibration.measurements.shape
    return pd.DataFrame(
        {
            "quantity": np.tile(calibration.quantities, reps),
            "replicate": np.repeat(np.arange(1, reps + 1), levels),
            "ct": calibration.measurements.ravel(),
        }
    )
