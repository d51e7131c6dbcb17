"""Test efficiency estimation end to end and through stub regressors."""

import math
import warnings

import numpy as np
import pytest
from helpers import FailingRegressor, FixedRegressor, make_result

from pcreff import EfficiencyEstimator, EstimatorConfig, estimate
from pcreff.estimator import classify, quality_index
from pcreff.exceptions import RegressionError, ValidationError
from pcreff.schema import Classification


def test_good_calibration(quantities, good_ct):
    result = estimate(quantities, good_ct, verbose=False)

    assert -3.5 < result.regression.slope.value < -3.32
    assert 0.7 < result.value < 1.0
    assert result.quality_index < 0.01
    assert result.classification is Classification.GOOD_CALIBRATOR
    assert result.comment == "This is a good calibrator"
    assert result.is_good
    assert result.degrees_of_freedom == 3


def test_noisy_calibration_is_poor(quantities, good_ct, noisy_ct):
    good = estimate(quantities, good_ct, verbose=False)
    noisy = estimate(quantities, noisy_ct, verbose=False)

    assert noisy.quality_index > good.quality_index
    assert noisy.quality_index >= 0.1
    assert noisy.classification is Classification.POOR_CALIBRATOR
    assert noisy.comment == "This is not a good calibrator"


def test_standard_error_and_interval(quantities, good_ct):
    result = estimate(quantities, good_ct, verbose=False)
    slope = result.regression.slope
    expected_se = (
        slope.standard_error * (1 + result.value) * math.log(10) / slope.value**2
    )
    lower, upper = result.confidence_interval

    assert math.isclose(result.standard_error, expected_se)
    assert result.standard_error > 0
    assert lower <= result.value <= upper
    assert math.isclose(upper - lower, 2 * 3.182446 * result.standard_error, rel_tol=1e-5)


def test_column_vector_quantities(quantities, good_ct):
    row = estimate(quantities, good_ct, verbose=False)
    col = estimate(np.array(quantities).reshape(-1, 1), good_ct, verbose=False)
    assert math.isclose(row.value, col.value)


def test_verbose_does_not_change_result(quantities, good_ct, capsys):
    quiet = estimate(quantities, good_ct, verbose=False)
    loud = estimate(quantities, good_ct, verbose=True)
    assert quiet.to_dict() == loud.to_dict()


def test_verbose_prints_report(quantities, good_ct, capsys):
    estimate(quantities, good_ct)
    out = capsys.readouterr().out
    assert "PCR Efficiency" in out
    assert "Calibration curve regression" in out
    assert "This is a good calibrator" in out


def test_quiet_prints_nothing(quantities, good_ct, capsys):
    estimate(quantities, good_ct, verbose=False)
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("bad", [0.0, -0.5, math.nan, math.inf])
def test_bad_quantity_never_reaches_regressor(bad, good_ct):
    regressor = FixedRegressor()
    with pytest.raises(ValidationError):
        estimate([0.12, bad, 3, 15, 30], good_ct, verbose=False, regressor=regressor)
    assert regressor.calls == []


def test_column_mismatch(good_ct):
    with pytest.raises(ValidationError, match=r"\(5\).*\(4\)"):
        estimate([0.12, 0.5, 3, 15], good_ct, verbose=False)


def test_two_points_fail_fast():
    regressor = FixedRegressor()
    with pytest.raises(ValidationError, match="At least 3"):
        estimate([1.0, 10.0], [[30.0, 26.7]], verbose=False, regressor=regressor)
    assert regressor.calls == []


def test_regressor_receives_log_quantities(quantities, good_ct):
    regressor = FixedRegressor()
    estimate(quantities, good_ct, verbose=True, regressor=regressor)
    x, y, verbose = regressor.calls[0]
    assert np.allclose(x, np.log10(quantities))
    assert np.array_equal(y, good_ct)
    assert verbose is True


def test_positive_slope_raises():
    ct = [[24.0, 27.3, 30.6], [24.1, 27.2, 30.7]]
    with pytest.raises(ValidationError, match="must be negative"):
        estimate([1.0, 10.0, 100.0], ct, verbose=False)


def test_near_zero_slope_raises():
    regressor = FixedRegressor(make_result(slope=-1e-4))
    with pytest.raises(ValidationError, match="too close to zero"):
        estimate([1.0, 10.0, 100.0], [[30.0, 29.9, 29.8]], verbose=False, regressor=regressor)


def test_shallow_slope_warns_but_returns():
    ct = [[30.0, 28.0, 26.01, 24.0], [30.02, 27.98, 26.0, 24.01]]
    with pytest.warns(UserWarning, match="outside"):
        result = estimate([1.0, 10.0, 100.0, 1000.0], ct, verbose=False)
    assert result.value > 1.0


def test_in_range_efficiency_does_not_warn(quantities, good_ct):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        estimate(quantities, good_ct, verbose=False)


def test_missing_fit_is_unavailable():
    with pytest.raises(RegressionError, match="unavailable"):
        EfficiencyEstimator(regressor=object())


def test_collinear_quantities_raise():
    with pytest.raises(RegressionError, match="variance in x"):
        estimate([5.0, 5.0, 5.0], [[30.0, 29.0, 28.0]], verbose=False)


def test_foreign_exception_is_wrapped(quantities, good_ct):
    regressor = FailingRegressor(np.linalg.LinAlgError("singular matrix"))
    with pytest.raises(RegressionError, match="singular matrix") as info:
        estimate(quantities, good_ct, verbose=False, regressor=regressor)
    assert isinstance(info.value.__cause__, np.linalg.LinAlgError)


def test_regression_error_propagates_unchanged(quantities, good_ct):
    original = RegressionError("no fit")
    with pytest.raises(RegressionError) as info:
        estimate(quantities, good_ct, verbose=False, regressor=FailingRegressor(original))
    assert info.value is original


def test_incomplete_result_raises(quantities, good_ct):
    with pytest.raises(RegressionError, match="incomplete result"):
        estimate(quantities, good_ct, verbose=False, regressor=FixedRegressor(object()))


def test_quality_index_formula():
    result = make_result(slope=-3.4, cv=0.8, rse=0.2, sse=0.12)
    expected = ((0.8 * 0.2 / -3.4) ** 2) / 0.12
    assert math.isclose(quality_index(result), expected)


def test_quality_index_perfect_fit_scores_zero():
    assert quality_index(make_result(cv=0.0, rse=0.0, sse=0.0)) == 0.0


def test_quality_index_non_finite_diagnostics_raise():
    with pytest.raises(ValidationError, match="finite"):
        quality_index(make_result(cv=math.nan))


def test_classify_threshold_is_inclusive():
    assert classify(0.1) is Classification.POOR_CALIBRATOR
    assert classify(np.nextafter(0.1, 0.0)) is Classification.GOOD_CALIBRATOR
    assert classify(0.0) is Classification.GOOD_CALIBRATOR


def test_classify_custom_threshold():
    assert classify(0.05, threshold=0.05) is Classification.POOR_CALIBRATOR


def test_quality_at_threshold_classifies_poor():
    # quality = ((cv * rse / slope)^2) / sse = 0.1 exactly
    slope, rse, sse = -2.0, 1.0, 10.0
    cv = math.sqrt(0.1 * sse) * abs(slope) / rse
    regressor = FixedRegressor(make_result(slope=slope, cv=cv, rse=rse, sse=sse))
    with pytest.warns(UserWarning):
        result = estimate([1.0, 10.0, 100.0], [[30.0, 28.0, 26.0]], verbose=False, regressor=regressor)
    assert math.isclose(result.quality_index, 0.1)
    assert result.classification is Classification.POOR_CALIBRATOR


def test_config_confidence_level_widens_interval(quantities, good_ct):
    narrow = estimate(quantities, good_ct, verbose=False, confidence_level=0.90)
    wide = estimate(quantities, good_ct, verbose=False, confidence_level=0.99)
    assert (wide.confidence_interval[1] - wide.confidence_interval[0]) > (
        narrow.confidence_interval[1] - narrow.confidence_interval[0]
    )
    assert wide.confidence_level == 0.99


@pytest.mark.parametrize("level", [0.0, 1.0, 1.5, math.nan])
def test_config_invalid_confidence_level(level):
    with pytest.raises(ValidationError, match="confidence_level"):
        EstimatorConfig(confidence_level=level)


def test_config_negative_threshold():
    with pytest.raises(ValidationError, match="quality_threshold"):
        EstimatorConfig(quality_threshold=-0.1)


def test_call_level_verbose_overrides_config(quantities, good_ct, capsys):
    estimator = EfficiencyEstimator(config=EstimatorConfig(verbose=True))
    estimator.estimate(quantities, good_ct, verbose=False)
    assert capsys.readouterr().out == ""


def test_config_estimators_are_independent(quantities, good_ct, noisy_ct):
    estimator = EfficiencyEstimator(config=EstimatorConfig(verbose=False))
    first = estimator.estimate(quantities, good_ct)
    estimator.estimate(quantities, noisy_ct)
    again = estimator.estimate(quantities, good_ct)
    assert first.to_dict() == again.to_dict()
