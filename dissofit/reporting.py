"""Format fitting outcomes for the console and as result tables.

This module is the presentation boundary for in-memory fit reports. Failed
model fits are rendered as explicit failure text (console) or as NaN
parameters with a status column (tables); non-finite numbers are never
printed as if they were results.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_DECIMALS
from .kinetics import FitReport, FittingOutcome
from .schema import COLUMNS


def _fmt(value: float, decimals: int) -> str:
    return f"{value:.{decimals}f}"


def format_report_lines(report: FitReport, decimals: int = DEFAULT_DECIMALS) -> List[str]:
    """Return the console lines for a single model.

    Successful fits print each parameter followed by R^2 on one line, e.g.
    ``Zero-order kinetics\\tk0 = 9.0000\\trsq = 1.0000``. The Peppas exponent
    ``n`` goes on its own indented line below the rate constant. Failed fits
    print the failure kind and message in place of numbers.
    """
    if not report.ok:
        return [f"{report.label}\tfit failed ({report.error_kind}): {report.error}"]

    names = list(report.parameters)
    first, rest = names[0], names[1:]
    lines = [
        f"{report.label}\t{first.ljust(2)} = {_fmt(report.parameters[first], decimals)}"
        f"\trsq = {_fmt(report.r2, decimals)}"
    ]
    for name in rest:
        lines.append(f"\t\t\t{name.ljust(2)} = {_fmt(report.parameters[name], decimals)}")
    return lines


def format_outcome(outcome: FittingOutcome, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render a full fitting outcome in the console layout."""
    lines = [f'Results of processing "{outcome.experiment_name}"', ""]
    for report in outcome:
        lines.extend(format_report_lines(report, decimals))
    return "\n".join(lines) + "\n"


def print_outcome(outcome: FittingOutcome, decimals: int = DEFAULT_DECIMALS) -> None:
    print()
    print(format_outcome(outcome, decimals))


def create_results_dataframe(
    outcomes: Iterable[FittingOutcome],
    source_files: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Flatten fitting outcomes into one row per (experiment, model).

    Args:
        outcomes: Fitting outcomes, one per experiment.
        source_files (optional): File paths parallel to ``outcomes``.

    Returns:
        pandas.DataFrame: Columns in :attr:`ResultColumns.ordered` order.
        Parameters a model does not report are NaN.
    """
    outcomes = list(outcomes)
    if source_files is not None and len(source_files) != len(outcomes):
        raise ValueError(
            f"Got {len(source_files)} source files for {len(outcomes)} outcomes."
        )

    rows = []
    for i, outcome in enumerate(outcomes):
        source = source_files[i] if source_files is not None else ""
        for report in outcome:
            row = {
                COLUMNS.experiment: outcome.experiment_name,
                COLUMNS.source: source,
                COLUMNS.model: report.model,
                COLUMNS.label: report.label,
                COLUMNS.r2: report.r2,
                COLUMNS.n_points: report.n_points,
                COLUMNS.status: "ok" if report.ok else report.error_kind,
                COLUMNS.message: report.error or "",
            }
            for col in COLUMNS.parameters:
                row[col] = report.parameters.get(col, np.nan)
            rows.append(row)

    return pd.DataFrame(rows, columns=list(COLUMNS.ordered))


def best_fit_by_r2(results_df: pd.DataFrame) -> pd.DataFrame:
    """Return, per experiment, the successful model with the highest R^2.

    The fitter itself never ranks models; this is a convenience for the
    summary printed at the end of a run. Experiments without a successful
    fit are omitted.
    """
    ok = results_df[results_df[COLUMNS.status] == "ok"]
    if ok.empty:
        return ok.copy()
    idx = ok.groupby(COLUMNS.experiment, sort=False)[COLUMNS.r2].idxmax()
    return ok.loc[idx].reset_index(drop=True)


def print_best_fits(results_df: pd.DataFrame, decimals: int = DEFAULT_DECIMALS) -> None:
    print("Highest R^2 per experiment:")
    best = best_fit_by_r2(results_df)
    if best.empty:
        print("  (no successful fits)")
        return
    for _, row in best.iterrows():
        r2 = row[COLUMNS.r2]
        shown = _fmt(r2, decimals) if math.isfinite(r2) else "n/a"
        print(f" - {row[COLUMNS.experiment]}: {row[COLUMNS.label]} (rsq = {shown})")
