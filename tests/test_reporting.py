import numpy as np
import pandas as pd
import pytest

from dissofit.kinetics import fit_all_models
from dissofit.reporting import (
    best_fit_by_r2,
    create_results_dataframe,
    format_outcome,
    format_report_lines,
    print_best_fits,
)
from dissofit.schema import COLUMNS

LINEAR = [(1, 10.0), (2, 19.0), (3, 28.0), (4, 37.0), (5, 46.0)]
SQRT_RELEASE = [(0, 0.0), (1, 5.0), (4, 10.0), (9, 15.0), (16, 20.0)]


def test_format_outcome_layout():
    text = format_outcome(fit_all_models(SQRT_RELEASE, experiment_name="Tablet A"))
    lines = text.splitlines()

    assert lines[0] == 'Results of processing "Tablet A"'
    assert "Higuchi's equation\tkh = 5.0000\trsq = 1.0000" in lines
    assert "Peppas' equation\tk  = 5.0000\trsq = 1.0000" in lines
    assert "\t\t\tn  = 0.5000" in lines
    assert lines.index("\t\t\tn  = 0.5000") == lines.index(
        "Peppas' equation\tk  = 5.0000\trsq = 1.0000"
    ) + 1


def test_zero_order_line():
    outcome = fit_all_models(LINEAR)
    assert format_report_lines(outcome["zero_order"]) == [
        "Zero-order kinetics\tk0 = 9.0000\trsq = 1.0000"
    ]
    assert format_report_lines(outcome["zero_order"], decimals=2) == [
        "Zero-order kinetics\tk0 = 9.00\trsq = 1.00"
    ]


def test_failed_models_print_failure_not_numbers():
    outcome = fit_all_models([(0, 0.0), (1, 10.0), (2, 0.0), (3, 30.0)], "bad")
    text = format_outcome(outcome)
    assert "First-order kinetics\tfit failed (DomainViolation):" in text
    assert "Peppas' equation\tfit failed (DomainViolation):" in text
    assert "nan" not in text.lower()
    assert "inf" not in text.lower()


def test_create_results_dataframe():
    outcomes = [
        fit_all_models(LINEAR, experiment_name="linear"),
        fit_all_models([(5, 10.0), (5, 20.0), (5, 30.0)], experiment_name="flat"),
    ]
    df = create_results_dataframe(outcomes, ["linear.json", "flat.json"])

    assert list(df.columns) == list(COLUMNS.ordered)
    assert len(df) == 8

    row = df[(df[COLUMNS.experiment] == "linear") & (df[COLUMNS.model] == "zero_order")].iloc[0]
    assert np.isclose(row[COLUMNS.k0], 9.0)
    assert np.isnan(row[COLUMNS.k1])
    assert row[COLUMNS.status] == "ok"
    assert row[COLUMNS.source] == "linear.json"

    flat = df[df[COLUMNS.experiment] == "flat"]
    assert set(flat[COLUMNS.status]) == {"DegenerateFit"}
    assert flat[COLUMNS.r2].isna().all()
    assert (flat[COLUMNS.message] != "").all()


def test_create_results_dataframe_checks_sources():
    outcome = fit_all_models(LINEAR)
    with pytest.raises(ValueError, match="source files"):
        create_results_dataframe([outcome], ["a.json", "b.json"])


def test_best_fit_by_r2(capsys):
    noisy = [(1, 10.0), (2, 21.0), (3, 27.0), (4, 41.0), (5, 44.0)]
    df = create_results_dataframe(
        [
            fit_all_models(noisy, experiment_name="noisy"),
            fit_all_models([(5, 10.0), (5, 20.0), (5, 30.0)], experiment_name="flat"),
        ]
    )
    best = best_fit_by_r2(df)

    assert list(best[COLUMNS.experiment]) == ["noisy"]
    noisy_rows = df[df[COLUMNS.experiment] == "noisy"]
    assert best.iloc[0][COLUMNS.r2] == noisy_rows[COLUMNS.r2].max()

    print_best_fits(df)
    out = capsys.readouterr().out
    assert "noisy:" in out
    assert "flat" not in out


def test_best_fit_with_no_successful_fit(capsys):
    df = create_results_dataframe([fit_all_models([(1, 10.0)], "single")])
    assert best_fit_by_r2(df).empty
    print_best_fits(df)
    assert "(no successful fits)" in capsys.readouterr().out
    assert isinstance(df, pd.DataFrame)
