"""Write fitting results and the linearised points behind them to CSV files.

This module is the file-output boundary between in-memory fit reports and
tabular artifacts.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Tuple

import pandas as pd

from .config import DEFAULT_DECIMALS, DEFAULT_OUTPUT_DIR
from .kinetics import FittingOutcome
from .schema import COLUMNS

logger = logging.getLogger(__name__)


def _build_points_table(outcomes: Iterable[FittingOutcome]) -> pd.DataFrame:
    """Build the table of transformed (x, y) pairs used by each regression.

    Args:
        outcomes: Fitting outcomes.

    Returns:
        pandas.DataFrame: Columns ``Experiment``, ``Model``, ``Index``,
        ``x`` and ``y``. Failed models contribute no rows.
    """
    rows = []
    for outcome in outcomes:
        for report in outcome:
            for i, (x, y) in enumerate(zip(report.x, report.y)):
                rows.append(
                    {
                        COLUMNS.experiment: outcome.experiment_name,
                        COLUMNS.model: report.model,
                        "Index": i,
                        "x": x,
                        "y": y,
                    }
                )
    return pd.DataFrame(rows, columns=[COLUMNS.experiment, COLUMNS.model, "Index", "x", "y"])


def save_results_to_csv(
    results_df: pd.DataFrame,
    outcomes: Iterable[FittingOutcome] = (),
    output_dir: str = DEFAULT_OUTPUT_DIR,
    decimals: int = DEFAULT_DECIMALS,
) -> Tuple[str, str]:
    """Save the results table and the linearised points to CSV files.

    Args:
        results_df (pandas.DataFrame): Output from
            :func:`~dissofit.reporting.create_results_dataframe`.
        outcomes: Fitting outcomes whose transformed points are exported.
        output_dir (str): Directory where CSV outputs are written.
        decimals (int): Rounding applied to parameters and R^2 in the
            results file. The points file is written unrounded.

    Returns:
        tuple[str, str]: Paths to ``kinetics_results.csv`` and
        ``linearized_points.csv``.

    Raises:
        ValueError: If ``results_df`` lacks the standard result columns.
    """
    missing = [c for c in COLUMNS.ordered if c not in results_df.columns]
    if missing:
        raise ValueError(f"Results table is missing columns: {missing}")

    os.makedirs(output_dir, exist_ok=True)
    results_path = os.path.join(output_dir, "kinetics_results.csv")
    points_path = os.path.join(output_dir, "linearized_points.csv")

    report = results_df.copy()
    numeric = [*COLUMNS.parameters, COLUMNS.r2]
    report[numeric] = report[numeric].astype(float).round(decimals)
    report.to_csv(results_path, index=False)

    _build_points_table(outcomes).to_csv(points_path, index=False)

    logger.info("Saved kinetics results to %s", results_path)
    logger.info("Saved linearized points to %s", points_path)
    return results_path, points_path
