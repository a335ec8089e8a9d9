"""Define standardized column names for input and result DataFrames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

TIME_COL = "minutes"
PERCENTAGE_COL = "percentage"


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels.

    These column names are used in the results table produced by
    :func:`dissofit.reporting.create_results_dataframe` and in the exported
    CSV, one row per (experiment, model).

    Attributes:
        experiment: Experiment name.
        source: File the experiment was loaded from.
        model: Model key (``zero_order``, ``first_order``, ``higuchi``,
            ``korsmeyer_peppas``).
        label: Human-readable model name.
        k0, k1, kh: Slopes of the zero-order, first-order and Higuchi fits.
            ``k1`` is the slope of ln(percentage) against time and is negative
            for a decaying profile.
        k, n: Korsmeyer-Peppas rate constant (exp of the intercept) and
            release exponent (slope).
        r2: Coefficient of determination of the linearised fit.
        n_points: Number of points used in the regression.
        status: ``"ok"`` or the failure kind (``InsufficientData``,
            ``DegenerateFit``, ``DomainViolation``).
        message: Failure message, empty for successful fits.
    """

    experiment: str = "Experiment"
    source: str = "Source File"
    model: str = "Model"
    label: str = "Model Name"
    k0: str = "k0"
    k1: str = "k1"
    kh: str = "kh"
    k: str = "k"
    n: str = "n"
    r2: str = "R2"
    n_points: str = "Points Used"
    status: str = "Status"
    message: str = "Message"

    @property
    def parameters(self) -> Tuple[str, ...]:
        return (self.k0, self.k1, self.kh, self.k, self.n)

    @property
    def ordered(self) -> Tuple[str, ...]:
        return (
            self.experiment,
            self.source,
            self.model,
            self.label,
            *self.parameters,
            self.r2,
            self.n_points,
            self.status,
            self.message,
        )


COLUMNS = ResultColumns()
