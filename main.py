#!/usr/bin/env python3
"""
Main script for running PCR efficiency estimation.
"""

# Pipeline overview:
# 1) Load a calibration CSV (dilution series quantities and replicate Ct values).
# 2) Validate quantities and the Ct matrix; require at least three levels.
# 3) Regress mean Ct on log10(quantity) and convert the slope to efficiency,
#    propagating the slope standard error with the delta method.
# 4) Build a Student-t confidence interval and score the fit with the quality
#    index; a value >= 0.1 flags a poor calibrator.
# 5) Print the summary table and optionally export CSVs and the curve figure.

import sys

from pcreff.cli import main

if __name__ == "__main__":
    sys.exit(main())
