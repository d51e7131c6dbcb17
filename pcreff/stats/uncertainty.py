"""
Efficiency transform, first-order error propagation, and t-based intervals.
"""

from __future__ import annotations

import math
from typing import Tuple

from scipy.stats import t as student_t

from ..exceptions import ValidationError

LN10 = math.log(10.0)


def efficiency_from_slope(slope: float) -> float:
    """
    Convert a calibration slope (Ct per decade) to fractional efficiency.

        E = 10^(-1/slope) - 1

    A slope of -1/log10(2) (about -3.32) gives E = 1, exact doubling.
    """
    s = float(slope)
    if not math.isfinite(s):
        raise ValidationError(f"Slope must be finite, got {slope!r}")
    if s >= 0:
        raise ValidationError(
            f"Slope must be negative to define an efficiency, got {s:.6g}; "
            "Ct should decrease as input amount increases."
        )
    try:
        value = 10.0 ** (-1.0 / s) - 1.0
    except OverflowError as exc:
        raise ValidationError(
            f"Slope {s:.6g} is too close to zero; the efficiency transform overflows."
        ) from exc
    if not math.isfinite(value):
        raise ValidationError(
            f"Slope {s:.6g} is too close to zero; the efficiency transform overflows."
        )
    return float(value)


def efficiency_standard_error(
    slope: float, slope_se: float, efficiency: float | None = None
) -> float:
    """
    Propagate the slope standard error through the efficiency transform.

    First-order (delta method):

        SE(E) = |dE/dslope| * SE(slope) = SE(slope) * (1 + E) * ln(10) / slope^2
    """
    s = float(slope)
    u = float(slope_se)
    if not math.isfinite(u) or u < 0:
        raise ValidationError(f"Slope standard error must be finite and >= 0, got {slope_se!r}")
    if efficiency is None:
        efficiency = efficiency_from_slope(s)
    se = u * (1.0 + float(efficiency)) * LN10 / (s**2)
    if not math.isfinite(se):
        raise ValidationError(
            f"Efficiency standard error is not finite for slope {s:.6g}."
        )
    return float(abs(se))


def t_critical(dof: int, confidence_level: float = 0.95) -> float:
    """Two-sided Student-t critical value for ``dof`` degrees of freedom."""
    if int(dof) < 1:
        raise ValidationError(
            f"At least one degree of freedom is required for a confidence interval, got {dof}."
        )
    level = float(confidence_level)
    if not 0.0 < level < 1.0:
        raise ValidationError(f"confidence_level must lie in (0, 1), got {confidence_level!r}")
    return float(student_t.ppf(0.5 * (1.0 + level), int(dof)))


def confidence_interval(
    value: float, standard_error: float, dof: int, confidence_level: float = 0.95
) -> Tuple[float, float]:
    """Return ``value -/+ t * standard_error`` as ``(lower, upper)``."""
    half_width = t_critical(dof, confidence_level) * abs(float(standard_error))
    return float(value) - half_width, float(value) + half_width


def round_uncertainty(u: float) -> Tuple[float, int]:
    """Round to 1 s.f., or 2 when the leading digit is 1.

    Returns the rounded uncertainty and the ``ndigits`` passed to ``round``;
    ``ndigits`` is negative for uncertainties of 10 or more. Non-positive or
    non-finite input is returned unchanged with ``ndigits`` 0.
    """
    if u <= 0 or not math.isfinite(u):
        return u, 0

    u = abs(float(u))
    exponent = math.floor(math.log10(u))
    leading = u / (10**exponent)

    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent

    ru = round(u, ndigits)

    if ru == 0:
        ndigits = sig_figs - exponent
        ru = round(u, ndigits)

    return float(ru), int(ndigits)


def _format_number_with_rounding(x: float, ndigits: int) -> str:
    xr = round(float(x), ndigits)
    if ndigits > 0:
        return f"{xr:.{ndigits}f}"
    return f"{xr:.0f}"


def format_value_with_uncertainty(
    value: float, uncertainty: float, unit: str = ""
) -> str:
    ru, ndigits = round_uncertainty(abs(float(uncertainty)))
    if ru == 0 or not math.isfinite(ru):
        v = f"{value:.6g}"
        u = f"{uncertainty:.6g}"
        return f"{v} ± {u} {unit}".strip()

    v_str = _format_number_with_rounding(value, ndigits)
    u_str = _format_number_with_rounding(ru, ndigits)
    return f"{v_str} ± {u_str} {unit}".strip()
