"""Calibration-curve figure for regression diagnostics.

Plotting functions accept precomputed regression results and perform no
efficiency calculations of their own.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.ticker import MaxNLocator
from scipy.stats import t as student_t

from .stats.regression import RegressionResult
from .stats.uncertainty import format_value_with_uncertainty

FIGURE_DPI = 300
CALIBRATION_FIGURE_NAME = "calibration_curve.png"

LABEL_LOG_QUANTITY = r"$\log_{10}(\mathrm{input\ amount})$"
LABEL_CT = r"$C_t$ / cycles"


@dataclass(frozen=True)
class StyleConfig:
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LEGEND_FONTSIZE: float = 10.0
    ANNOTATION_FONTSIZE: float = 10.0
    LINEWIDTH: float = 1.8
    LINEWIDTH_THIN: float = 1.0
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    DATA_COLOR: str = "#004371"
    LINE_COLOR: str = "#a50f15"
    CI_COLOR: str = "#f1c4c1"


STYLE = StyleConfig()


def setup_plot_style() -> None:
    """Apply the project plotting style to matplotlib ``rcParams``."""
    plt.rcParams.update(
        {
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.labelsize": STYLE.LABEL_FONTSIZE,
            "xtick.labelsize": STYLE.TICK_FONTSIZE,
            "ytick.labelsize": STYLE.TICK_FONTSIZE,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE,
            "legend.frameon": False,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
        }
    )


def clean_axis(ax: Axes, nbins: int = 6) -> None:
    """Apply consistent ticks and a light y grid to one axis."""
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins, min_n_ticks=4))
    ax.grid(True, axis="y", alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def plot_calibration_curve(
    result: RegressionResult,
    output_dir: str = "output",
    replicates: Optional[np.ndarray] = None,
    filename: str = CALIBRATION_FIGURE_NAME,
) -> str:
    """Render Ct against log10 input amount with the fitted line.

    Args:
        result (RegressionResult): Fit to render.
        output_dir (str, optional): Directory for the PNG. Defaults to
            ``"output"``.
        replicates (numpy.ndarray, optional): Raw ``M x N`` Ct matrix. When
            given, individual replicates are drawn behind the means.
        filename (str, optional): Output file name.

    Returns:
        str: Path to the saved PNG file.

    Note:
        The shaded band is the 95% confidence interval for the mean
        response, using ``n - 2`` degrees of freedom.
    """
    setup_plot_style()
    os.makedirs(output_dir, exist_ok=True)

    x = np.asarray(result.x, dtype=float)
    y = np.asarray(result.y, dtype=float)

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)

    pad = 0.05 * (x.max() - x.min())
    xgrid = np.linspace(x.min() - pad, x.max() + pad, 200)
    yhat = result.predict(xgrid)

    dof = result.dof
    if dof > 0:
        xbar = float(np.mean(x))
        ssxx = float(np.sum((x - xbar) ** 2))
        mse = result.residual_standard_error**2
        t_crit = float(student_t.ppf(0.975, dof))
        ci_half = t_crit * np.sqrt(mse * (1.0 / x.size + (xgrid - xbar) ** 2 / ssxx))
        ax.fill_between(
            xgrid,
            yhat - ci_half,
            yhat + ci_half,
            facecolor=STYLE.CI_COLOR,
            alpha=0.45,
            linewidth=0,
            label="95% CI (mean)",
            zorder=1,
        )

    ax.plot(xgrid, yhat, color=STYLE.LINE_COLOR, label="Linear fit", zorder=3)

    if replicates is not None:
        reps = np.atleast_2d(np.asarray(replicates, dtype=float))
        if reps.shape[0] > 1:
            ax.scatter(
                np.broadcast_to(x, reps.shape).ravel(),
                reps.ravel(),
                s=14,
                color="0.55",
                alpha=0.7,
                label="Replicates",
                zorder=2,
            )

    ax.scatter(
        x,
        y,
        s=38,
        color=STYLE.DATA_COLOR,
        edgecolors="black",
        linewidth=0.6,
        label="Mean Ct",
        zorder=5,
    )

    ax.set_xlabel(LABEL_LOG_QUANTITY)
    ax.set_ylabel(LABEL_CT)
    clean_axis(ax)

    stats_text = "\n".join(
        [
            "slope = " + format_value_with_uncertainty(
                result.slope.value, result.slope.standard_error
            ),
            f"intercept = {result.intercept.value:.3f}",
            f"$R^2$ = {result.r2:.4f}",
            f"n = {result.n_points}",
        ]
    )
    ax.text(
        0.98,
        0.98,
        stats_text,
        transform=ax.transAxes,
        ha="right",
        va="top",
        fontsize=STYLE.ANNOTATION_FONTSIZE,
        bbox=dict(boxstyle="round,pad=0.3", fc="white", ec="0.6", lw=0.8),
    )
    ax.legend(loc="lower left")

    path = os.path.join(output_dir, filename)
    fig.savefig(path)
    plt.close(fig)
    return path
