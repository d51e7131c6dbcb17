"""Exception taxonomy for efficiency estimation.

Every failure aborts the estimate in progress; nothing here is recovered
internally.
"""

from __future__ import annotations


class PCREffError(Exception):
    """Base class for all errors raised by the package."""


class ValidationError(PCREffError, ValueError):
    """Malformed or out-of-domain calibration input.

    Raised for shape mismatches, non-positive or non-finite quantities,
    non-finite Ct values, too few calibration points, and fits whose slope
    cannot be turned into an efficiency (zero, positive, or so close to zero
    that the transform overflows).
    """


class RegressionError(PCREffError, RuntimeError):
    """The regression step could not produce a fit."""
