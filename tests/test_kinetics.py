import math

import numpy as np
import pytest

from dissofit.errors import (
    DegenerateFitError,
    DomainViolationError,
    InsufficientDataError,
)
from dissofit.kinetics import (
    MODELS,
    Observation,
    as_observations,
    fit_all_models,
    fit_model,
    get_model,
)
from dissofit.stats import fit_line, r_squared

LINEAR = [(1, 10.0), (2, 19.0), (3, 28.0), (4, 37.0), (5, 46.0)]
HALVING = [(1, 50.0), (2, 25.0), (3, 12.5)]
# Q = 5 * t**0.5, starting at t = 0.
SQRT_RELEASE = [(0, 0.0), (1, 5.0), (4, 10.0), (9, 15.0), (16, 20.0)]


def test_zero_order_on_linear_profile():
    report = fit_model(LINEAR, "zero_order")
    assert report.ok
    assert report.parameters["k0"] == pytest.approx(9.0, abs=1e-4)
    assert report.intercept == pytest.approx(1.0, abs=1e-4)
    assert report.r2 == pytest.approx(1.0, abs=1e-9)
    assert report.n_points == 5


def test_first_order_on_halving_profile_uses_raw_slope():
    report = fit_model(HALVING, "first_order")
    assert report.n_points == 2
    assert report.parameters["k1"] == pytest.approx(-math.log(2), abs=1e-4)
    assert abs(report.parameters["k1"]) == pytest.approx(0.693, abs=1e-3)
    assert report.r2 == pytest.approx(1.0, abs=1e-9)


def test_all_models_on_square_root_release():
    outcome = fit_all_models(SQRT_RELEASE, experiment_name="sqrt")
    assert [r.model for r in outcome] == [m.key for m in MODELS]
    assert not outcome.failures

    higuchi = outcome["higuchi"]
    assert higuchi.parameters["kh"] == pytest.approx(5.0, abs=1e-4)
    assert higuchi.r2 == pytest.approx(1.0, abs=1e-9)

    peppas = outcome["korsmeyer_peppas"]
    assert peppas.n_points == 4
    assert peppas.parameters["k"] == pytest.approx(5.0, abs=1e-4)
    assert peppas.parameters["n"] == pytest.approx(0.5, abs=1e-4)
    assert peppas.r2 == pytest.approx(1.0, abs=1e-9)


def test_first_point_is_dropped_for_log_models():
    # Index 0 is an outlier that would wreck the fit if it were used.
    obs = [(0.5, 95.0), (1, 50.0), (2, 25.0), (3, 12.5), (4, 6.25)]
    t = np.array([o[0] for o in obs], dtype=float)
    q = np.array([o[1] for o in obs], dtype=float)

    first = fit_model(obs, "first_order")
    expected = fit_line(t[1:], np.log(q[1:]))
    assert first.n_points == len(obs) - 1
    assert first.slope == pytest.approx(expected.slope)
    assert first.intercept == pytest.approx(expected.intercept)
    assert first.r2 == pytest.approx(r_squared(t[1:], np.log(q[1:])))

    peppas = fit_model(obs, "korsmeyer_peppas")
    expected = fit_line(np.log(t[1:]), np.log(q[1:]))
    assert peppas.n_points == len(obs) - 1
    assert peppas.parameters["n"] == pytest.approx(expected.slope)
    assert peppas.parameters["k"] == pytest.approx(math.exp(expected.intercept))


def test_zero_percentage_reports_domain_violation_for_log_models():
    obs = [(0, 0.0), (1, 10.0), (2, 0.0), (3, 30.0)]
    outcome = fit_all_models(obs, experiment_name="bad")

    for key in ("first_order", "korsmeyer_peppas"):
        report = outcome[key]
        assert not report.ok
        assert report.error_kind == "DomainViolation"
        assert math.isnan(report.r2)
        assert all(math.isnan(v) for v in report.parameters.values())

    assert outcome["zero_order"].ok
    assert outcome["higuchi"].ok


def test_negative_percentage_raises_domain_violation():
    with pytest.raises(DomainViolationError, match="percentage at index 2"):
        fit_model([(0, 1.0), (1, 10.0), (2, -4.0), (3, 30.0)], "first_order")


def test_negative_time_raises_for_square_root():
    with pytest.raises(DomainViolationError, match="time"):
        fit_model([(-1, 5.0), (1, 10.0), (2, 20.0)], "higuchi")


def test_zero_time_after_first_point_violates_log_domain():
    with pytest.raises(DomainViolationError, match="time at index 1"):
        fit_model([(0, 5.0), (0, 10.0), (2, 20.0), (3, 25.0)], "korsmeyer_peppas")


def test_insufficient_data():
    with pytest.raises(InsufficientDataError):
        fit_model([(1, 10.0)], "zero_order")
    with pytest.raises(InsufficientDataError, match="at least 3"):
        fit_model([(1, 10.0), (2, 20.0)], "first_order")

    outcome = fit_all_models([(1, 10.0), (2, 20.0)])
    assert outcome["zero_order"].ok
    assert outcome["higuchi"].ok
    assert outcome["first_order"].error_kind == "InsufficientData"
    assert outcome["korsmeyer_peppas"].error_kind == "InsufficientData"


def test_constant_time_is_degenerate_not_finite():
    obs = [(5, 10.0), (5, 20.0), (5, 30.0)]
    with pytest.raises(DegenerateFitError):
        fit_model(obs, "zero_order")

    outcome = fit_all_models(obs)
    assert {r.error_kind for r in outcome} == {"DegenerateFit"}
    assert all(math.isnan(r.r2) for r in outcome)


def test_constant_percentage_is_degenerate():
    with pytest.raises(DegenerateFitError, match="R\\^2 is undefined"):
        fit_model([(1, 10.0), (2, 10.0), (3, 10.0)], "zero_order")


def test_failures_are_logged_and_others_still_fitted(caplog):
    obs = [(0, 0.0), (1, 10.0), (2, 0.0), (3, 30.0)]
    with caplog.at_level("WARNING"):
        outcome = fit_all_models(obs, experiment_name="tablet")
    assert len(outcome) == 4
    assert len(outcome.failures) == 2
    assert any("Skipping First-order kinetics" in rec.message for rec in caplog.records)


def test_variance_method_is_forwarded():
    a = fit_model(LINEAR, "zero_order", variance_method="identity")
    b = fit_model(LINEAR, "zero_order", variance_method="centered")
    assert a.slope == pytest.approx(b.slope)


def test_fit_reports_are_hashable_and_comparable():
    a = fit_model(LINEAR, "zero_order")
    b = fit_model(LINEAR, "zero_order")
    assert a == b
    assert hash(a) == hash(b)
    outcome = fit_all_models(LINEAR, experiment_name="linear")
    assert hash(outcome) == hash(fit_all_models(LINEAR, experiment_name="linear"))


def test_observations_and_model_lookup():
    obs = as_observations([(1, 2.0), Observation(3.0, 4.0)])
    assert obs == (Observation(1.0, 2.0), Observation(3.0, 4.0))
    with pytest.raises(ValueError):
        as_observations([])

    assert get_model("higuchi").label == "Higuchi's equation"
    assert get_model(MODELS[0]) is MODELS[0]
    with pytest.raises(ValueError, match="Unknown kinetics model"):
        get_model("weibull")
    with pytest.raises(KeyError):
        fit_all_models(LINEAR)["weibull"]
