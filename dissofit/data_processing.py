"""
Load dissolution experiments from JSON or CSV files.
"""

# Both formats end up as a tidy DataFrame with ``minutes`` and ``percentage``
# columns in file order. Records with missing or non-numeric values are
# dropped with a warning; ordering problems are reported but not corrected.

from __future__ import annotations

import json
import logging
import math
import numbers
import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Tuple

import numpy as np
import pandas as pd

from .kinetics import Observation
from .schema import TIME_COL, PERCENTAGE_COL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Experiment:
    """A named set of dissolution readings.

    Attributes:
        name: Experiment name from the file, or the file stem.
        data: DataFrame with ``minutes`` and ``percentage`` columns.
        source_file: Path the experiment was read from, if any.
    """

    name: str
    data: pd.DataFrame = field(compare=False)
    source_file: str = ""

    @property
    def observations(self) -> Tuple[Observation, ...]:
        return tuple(
            Observation(float(t), float(p))
            for t, p in zip(self.data[TIME_COL], self.data[PERCENTAGE_COL])
        )

    def __len__(self) -> int:
        return len(self.data)


def _is_number(value) -> bool:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        # JSON integers are unbounded; those beyond float range are unusable.
        return False


def _warn_if_unordered(df: pd.DataFrame, name: str) -> None:
    times = df[TIME_COL].to_numpy(dtype=float)
    if len(times) > 1 and np.any(np.diff(times) < 0):
        logger.warning(
            "Experiment %r: time values are not in non-decreasing order; "
            "points are used in file order.",
            name,
        )


def experiment_from_records(
    records: Iterable[Mapping], name: str = "", source_file: str = ""
) -> Experiment:
    """Build an :class:`Experiment` from ``{"minutes", "percentage"}`` records.

    Records that are not mappings, or whose ``minutes`` or ``percentage`` is
    missing or not a number, are skipped.

    Raises:
        ValueError: If no usable record remains.
    """
    rows = []
    for i, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning("Experiment %r: record %d is not an object; skipped.", name, i)
            continue
        minutes = record.get(TIME_COL)
        percentage = record.get(PERCENTAGE_COL)
        if not (_is_number(minutes) and _is_number(percentage)):
            logger.warning(
                "Experiment %r: record %d has non-numeric minutes/percentage "
                "(%r, %r); skipped.",
                name,
                i,
                minutes,
                percentage,
            )
            continue
        rows.append({TIME_COL: float(minutes), PERCENTAGE_COL: float(percentage)})

    if not rows:
        raise ValueError(f"Experiment {name!r} contains no valid data points.")

    df = pd.DataFrame.from_records(rows, columns=[TIME_COL, PERCENTAGE_COL])
    _warn_if_unordered(df, name)
    return Experiment(name=name, data=df, source_file=source_file)


def _file_stem(filepath: str) -> str:
    return os.path.splitext(os.path.basename(filepath))[0]


def load_experiment_json(filepath: str) -> Experiment:
    """Load an experiment stored as a JSON object.

    The object holds an optional ``experiment_name`` string and a
    ``data_points`` array of ``{"minutes": ..., "percentage": ...}`` records.

    Args:
        filepath (str): Path to the JSON file.

    Returns:
        Experiment: Parsed experiment. The file stem is used as name when
        ``experiment_name`` is absent.

    Raises:
        ValueError: If the file is not valid JSON, is not an object, lacks a
            ``data_points`` array, or has no valid records.
    """
    with open(filepath, "r", encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"{filepath}: invalid JSON at line {exc.lineno}, column {exc.colno}: "
                f"{exc.msg}"
            ) from exc

    if not isinstance(payload, dict):
        raise ValueError(f"{filepath}: expected a JSON object at top level.")

    name = payload.get("experiment_name")
    if not isinstance(name, str) or not name:
        name = _file_stem(filepath)

    points = payload.get("data_points")
    if not isinstance(points, list):
        raise ValueError(f"{filepath}: 'data_points' must be an array.")

    return experiment_from_records(points, name=name, source_file=filepath)


def load_experiment_csv(filepath: str) -> Experiment:
    """Load an experiment from a CSV file with ``minutes`` and ``percentage`` columns.

    Column names are matched case-insensitively after stripping whitespace.
    Rows with missing or non-numeric entries are dropped.
    """
    raw = pd.read_csv(filepath)
    columns = {str(col).strip().lower(): col for col in raw.columns}
    missing = [c for c in (TIME_COL, PERCENTAGE_COL) if c not in columns]
    if missing:
        raise ValueError(f"{filepath}: missing required column(s) {missing}.")

    df = pd.DataFrame(
        {
            TIME_COL: pd.to_numeric(raw[columns[TIME_COL]], errors="coerce"),
            PERCENTAGE_COL: pd.to_numeric(raw[columns[PERCENTAGE_COL]], errors="coerce"),
        }
    )
    name = _file_stem(filepath)
    valid = df.notna().all(axis=1)
    dropped = int((~valid).sum())
    if dropped:
        logger.warning(
            "Experiment %r: dropped %d row(s) with missing or non-numeric values.",
            name,
            dropped,
        )
    df = df[valid].reset_index(drop=True)
    if df.empty:
        raise ValueError(f"Experiment {name!r} contains no valid data points.")

    _warn_if_unordered(df, name)
    return Experiment(name=name, data=df, source_file=filepath)


def load_experiment(filepath: str) -> Experiment:
    """Load an experiment, choosing the reader from the file extension."""
    ext = os.path.splitext(filepath)[1].lower()
    if ext == ".json":
        return load_experiment_json(filepath)
    if ext == ".csv":
        return load_experiment_csv(filepath)
    raise ValueError(f"{filepath}: unsupported file type {ext!r} (expected .json or .csv).")
