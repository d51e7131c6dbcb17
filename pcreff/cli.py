"""Command-line interface for PCR efficiency estimation."""

from __future__ import annotations

import argparse
import logging
import sys
import time

from .config import CONFIDENCE_LEVEL, DEFAULT_OUTPUT_DIR, EstimatorConfig
from .data_processing import load_calibration
from .estimator import EfficiencyEstimator
from .exceptions import PCREffError
from .output import save_results_to_csv
from .plotting import plot_calibration_curve
from .reporting import print_report
from .schema import EfficiencyEstimate

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure root logging for command-line runs."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w"))
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT, handlers=handlers)


def run_pipeline(
    input_path: str,
    layout: str = "long",
    quantity_col: str | None = None,
    ct_col: str | None = None,
    verbose: bool = True,
    confidence_level: float = CONFIDENCE_LEVEL,
    outdir: str | None = None,
    plot: bool = False,
) -> EfficiencyEstimate:
    """Load a calibration CSV, estimate efficiency, and write optional outputs."""
    start_time = time.time()
    calibration = load_calibration(
        input_path, layout=layout, quantity_col=quantity_col, ct_col=ct_col
    )
    logging.info(
        "Loaded %d calibration levels x %d replicates from %s",
        calibration.n_points,
        calibration.n_replicates,
        input_path,
    )

    estimator = EfficiencyEstimator(
        config=EstimatorConfig(verbose=verbose, confidence_level=confidence_level)
    )
    result = estimator.estimate(calibration.quantities, calibration.measurements)
    if not verbose:
        print_report(result)

    if outdir is not None:
        save_results_to_csv(result, output_dir=outdir, calibration=calibration)
        if plot:
            path = plot_calibration_curve(
                result.regression, output_dir=outdir, replicates=calibration.measurements
            )
            logging.info("Calibration curve figure: %s", path)

    logging.info("Efficiency estimation completed in %.2f seconds", time.time() - start_time)
    return result


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for module execution."""
    parser = argparse.ArgumentParser(
        description="Estimate qPCR amplification efficiency from a calibration curve."
    )
    parser.add_argument("--input", required=True, help="Path to calibration CSV file.")
    parser.add_argument(
        "--format",
        dest="layout",
        choices=("long", "wide"),
        default="long",
        help="Table layout: one row per well (long) or quantities in the header (wide).",
    )
    parser.add_argument(
        "--quantity-col",
        default=None,
        help="Optional explicit quantity column name (long format).",
    )
    parser.add_argument(
        "--ct-col",
        default=None,
        help="Optional explicit Ct column name (long format).",
    )
    parser.add_argument(
        "--confidence",
        type=float,
        default=CONFIDENCE_LEVEL,
        help=f"Two-sided confidence level for the efficiency interval (default: {CONFIDENCE_LEVEL}).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print only the efficiency summary, not the regression details.",
    )
    parser.add_argument(
        "--outdir",
        default=None,
        help=f"Write CSV outputs to this directory (e.g. {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Also save the calibration-curve figure to --outdir.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO).",
    )
    parser.add_argument("--log-file", default=None, help="Optional log file path.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for efficiency estimation."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    if args.plot and args.outdir is None:
        parser.error("--plot requires --outdir")

    configure_logging(args.log_level, args.log_file)
    try:
        run_pipeline(
            input_path=args.input,
            layout=args.layout,
            quantity_col=args.quantity_col,
            ct_col=args.ct_col,
            verbose=not args.quiet,
            confidence_level=args.confidence,
            outdir=args.outdir,
            plot=args.plot,
        )
    except PCREffError as exc:
        logging.error("Efficiency estimation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
