import os

import numpy as np

from pcreff import estimate
from pcreff.plotting import plot_calibration_curve


def test_plot_calibration_curve(tmp_path, quantities, good_ct):
    result = estimate(quantities, good_ct, verbose=False)
    out = plot_calibration_curve(result.regression, output_dir=str(tmp_path))
    assert out.endswith("calibration_curve.png")
    assert os.path.exists(out)


def test_plot_with_replicates_and_custom_name(tmp_path, quantities, noisy_ct):
    result = estimate(quantities, noisy_ct, verbose=False)
    out = plot_calibration_curve(
        result.regression,
        output_dir=str(tmp_path / "figures"),
        replicates=np.asarray(noisy_ct),
        filename="noisy.png",
    )
    assert os.path.exists(out)
    assert os.path.basename(out) == "noisy.png"
