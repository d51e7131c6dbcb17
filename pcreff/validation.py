"""Validate caller-supplied calibration data before any numeric work."""

from __future__ import annotations

import numpy as np

from .config import MIN_CALIBRATION_POINTS
from .exceptions import ValidationError
from .schema import CalibrationInput

_NUMERIC_KINDS = "iuf"


def _as_real_array(data, name: str) -> np.ndarray:
    """Convert ``data`` to a float array, rejecting non-real input."""
    try:
        arr = np.asarray(data)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be numeric: {exc}") from exc

    if arr.dtype.kind == "c":
        raise ValidationError(f"{name} must be real, got complex values.")
    if arr.dtype.kind not in _NUMERIC_KINDS:
        raise ValidationError(
            f"{name} must be a numeric array, got dtype '{arr.dtype}'."
        )
    return arr.astype(float)


def validate_quantities(quantities) -> np.ndarray:
    """Validate input amounts and normalize them to a flat array.

    Args:
        quantities: Sequence of N input amounts. Row (``1 x N``) and column
            (``N x 1``) vectors are accepted and flattened.

    Returns:
        numpy.ndarray: 1-D float array of length N.

    Raises:
        ValidationError: If the input is empty, not a vector, non-numeric,
            non-finite, or contains a value <= 0.
    """
    arr = _as_real_array(quantities, "quantities")
    if arr.size == 0:
        raise ValidationError("quantities must be non-empty.")
    if arr.ndim > 2 or (arr.ndim == 2 and min(arr.shape) != 1):
        raise ValidationError(
            f"quantities must be a vector, got an array of shape {arr.shape}."
        )
    arr = arr.ravel()

    bad = ~np.isfinite(arr)
    if bad.any():
        raise ValidationError(
            f"quantities must be finite, got {float(arr[bad][0])!r} at index {int(np.flatnonzero(bad)[0])}."
        )
    nonpositive = arr <= 0
    if nonpositive.any():
        idx = int(np.flatnonzero(nonpositive)[0])
        raise ValidationError(
            f"quantities must be strictly positive (log10 transform), got {float(arr[idx])!r} at index {idx}."
        )
    return arr


def validate_measurements(measurements) -> np.ndarray:
    """Validate the Ct matrix.

    A 1-D input is read as a single replicate row.

    Raises:
        ValidationError: If the input is empty, has more than two dimensions,
            is non-numeric, or contains NaN/inf.
    """
    arr = _as_real_array(measurements, "measurements")
    if arr.size == 0:
        raise ValidationError("measurements must be non-empty.")
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    elif arr.ndim != 2:
        raise ValidationError(
            f"measurements must be two-dimensional, got {arr.ndim} dimensions."
        )

    bad = ~np.isfinite(arr)
    if bad.any():
        row, col = (int(i) for i in np.argwhere(bad)[0])
        raise ValidationError(
            f"measurements must be finite, got {float(arr[row, col])!r} at row {row}, column {col}."
        )
    return arr


def validate_calibration(
    quantities, measurements, min_points: int = MIN_CALIBRATION_POINTS
) -> CalibrationInput:
    """Validate both inputs and their agreement.

    Args:
        quantities: Input amounts, one per calibration point.
        measurements: Ct matrix with one column per calibration point.
        min_points (int, optional): Minimum number of calibration points.
            Defaults to ``3`` so the confidence interval has at least one
            degree of freedom.

    Returns:
        CalibrationInput: Immutable, validated calibration data.

    Raises:
        ValidationError: If either input is invalid, the column count of
            ``measurements`` differs from the number of quantities, or there
            are fewer than ``min_points`` calibration points.
    """
    q = validate_quantities(quantities)
    ct = validate_measurements(measurements)

    n = q.size
    if ct.shape[1] != n:
        raise ValidationError(
            f"Number of columns in measurements ({ct.shape[1]}) must match "
            f"the number of quantities ({n})."
        )
    if n < min_points:
        raise ValidationError(
            f"At least {min_points} calibration points are required, got {n} "
            f"({n - 2} degrees of freedom for the confidence interval)."
        )

    q.setflags(write=False)
    ct.setflags(write=False)
    return CalibrationInput(quantities=q, measurements=ct)
