"""
Dissolution-kinetics model fitting.

Four classical release models are linearised and fitted by ordinary least
squares on transformed (time, percentage) data:

- Zero-order:        percentage      = k0 * t + b
- First-order:       ln(percentage)  = k1 * t + b
- Higuchi:           percentage      = kh * sqrt(t) + b
- Korsmeyer-Peppas:  ln(percentage)  = n * ln(t) + ln(k)

The first-order and Korsmeyer-Peppas fits always skip the first observation,
which is conventionally the t = 0 reading. Time zero is not special-cased
otherwise; if the first point is not at t = 0 it is still dropped.

``k1`` is reported as the raw slope of ln(percentage) against time, so a
decaying profile gives a negative value whose magnitude is the first-order
rate constant.

Each model is fitted independently. :func:`fit_model` raises a
:class:`~dissofit.errors.KineticsError` subclass when a model cannot be
fitted; :func:`fit_all_models` records such failures in the corresponding
:class:`FitReport` and carries on with the remaining models.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, NamedTuple, Optional, Tuple

import numpy as np

from .config import DEFAULT_VARIANCE_METHOD
from .errors import (
    DegenerateFitError,
    DomainViolationError,
    InsufficientDataError,
    KineticsError,
)
from .stats import LineFit, fit_line, r_squared

logger = logging.getLogger(__name__)

MIN_REGRESSION_POINTS = 2


@dataclass(frozen=True)
class Observation:
    """A single dissolution reading."""

    time: float
    percentage: float


def as_observations(pairs: Iterable) -> Tuple[Observation, ...]:
    """Convert ``(time, percentage)`` pairs or :class:`Observation` objects.

    Order is preserved. Raises ``ValueError`` for an empty input.
    """
    observations = tuple(
        p if isinstance(p, Observation) else Observation(float(p[0]), float(p[1]))
        for p in pairs
    )
    if not observations:
        raise ValueError("Observation sequence must not be empty.")
    return observations


class _Transform(NamedTuple):
    func: Callable[[np.ndarray], np.ndarray]
    valid: Callable[[np.ndarray], np.ndarray]
    requirement: str


_TRANSFORMS: Dict[str, _Transform] = {
    "identity": _Transform(lambda v: v, lambda v: np.ones_like(v, dtype=bool), ""),
    "sqrt": _Transform(np.sqrt, lambda v: v >= 0, "must be >= 0 under a square root"),
    "log": _Transform(np.log, lambda v: v > 0, "must be > 0 under a logarithm"),
}


def _slope_as(name: str) -> Callable[[LineFit], Dict[str, float]]:
    def parameters(line: LineFit) -> Dict[str, float]:
        return {name: line.slope}

    return parameters


def _peppas_parameters(line: LineFit) -> Dict[str, float]:
    with np.errstate(over="ignore", invalid="ignore"):
        k = float(np.exp(line.intercept))
    return {"k": k, "n": line.slope}


@dataclass(frozen=True)
class KineticModel:
    """Description of one linearised kinetics model.

    Attributes:
        key: Identifier used in tables and lookups.
        label: Human-readable name used in console output.
        x_transform: Transform applied to time (``identity``, ``sqrt``, ``log``).
        y_transform: Transform applied to percentage.
        drop_first: Whether the first observation is excluded.
        parameter_names: Names of the reported parameters, in output order.
        parameters: Maps the fitted line to the reported parameters.
    """

    key: str
    label: str
    x_transform: str
    y_transform: str
    drop_first: bool
    parameter_names: Tuple[str, ...]
    parameters: Callable[[LineFit], Dict[str, float]] = field(compare=False)

    @property
    def min_observations(self) -> int:
        return MIN_REGRESSION_POINTS + (1 if self.drop_first else 0)


ZERO_ORDER = KineticModel(
    key="zero_order",
    label="Zero-order kinetics",
    x_transform="identity",
    y_transform="identity",
    drop_first=False,
    parameter_names=("k0",),
    parameters=_slope_as("k0"),
)
FIRST_ORDER = KineticModel(
    key="first_order",
    label="First-order kinetics",
    x_transform="identity",
    y_transform="log",
    drop_first=True,
    parameter_names=("k1",),
    parameters=_slope_as("k1"),
)
HIGUCHI = KineticModel(
    key="higuchi",
    label="Higuchi's equation",
    x_transform="sqrt",
    y_transform="identity",
    drop_first=False,
    parameter_names=("kh",),
    parameters=_slope_as("kh"),
)
KORSMEYER_PEPPAS = KineticModel(
    key="korsmeyer_peppas",
    label="Peppas' equation",
    x_transform="log",
    y_transform="log",
    drop_first=True,
    parameter_names=("k", "n"),
    parameters=_peppas_parameters,
)

MODELS: Tuple[KineticModel, ...] = (ZERO_ORDER, FIRST_ORDER, HIGUCHI, KORSMEYER_PEPPAS)
_MODELS_BY_KEY = {m.key: m for m in MODELS}


def get_model(model) -> KineticModel:
    """Return the :class:`KineticModel` for a key or pass a model through."""
    if isinstance(model, KineticModel):
        return model
    try:
        return _MODELS_BY_KEY[model]
    except KeyError:
        raise ValueError(
            f"Unknown kinetics model {model!r}; expected one of {sorted(_MODELS_BY_KEY)}."
        ) from None


@dataclass(frozen=True)
class FitReport:
    """Result of fitting one model to one observation sequence.

    A failed report has ``error_kind`` set and NaN in every numeric field.
    """

    model: str
    label: str
    parameters: Dict[str, float] = field(compare=False)
    r2: float
    n_points: int
    slope: float
    intercept: float
    x: Tuple[float, ...] = ()
    y: Tuple[float, ...] = ()
    error_kind: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def failed(cls, model: KineticModel, exc: KineticsError) -> "FitReport":
        return cls(
            model=model.key,
            label=model.label,
            parameters={name: math.nan for name in model.parameter_names},
            r2=math.nan,
            n_points=0,
            slope=math.nan,
            intercept=math.nan,
            error_kind=exc.kind,
            error=str(exc),
        )


@dataclass(frozen=True)
class FittingOutcome:
    """The four fit reports for one experiment, in :data:`MODELS` order."""

    experiment_name: str
    reports: Tuple[FitReport, ...]
    n_observations: int = 0

    def __iter__(self) -> Iterator[FitReport]:
        return iter(self.reports)

    def __len__(self) -> int:
        return len(self.reports)

    def __getitem__(self, key: str) -> FitReport:
        for report in self.reports:
            if report.model == key:
                return report
        raise KeyError(key)

    @property
    def failures(self) -> Tuple[FitReport, ...]:
        return tuple(r for r in self.reports if not r.ok)


def _columns(observations) -> Tuple[np.ndarray, np.ndarray]:
    obs = as_observations(observations)
    times = np.array([o.time for o in obs], dtype=float)
    percentages = np.array([o.percentage for o in obs], dtype=float)
    return times, percentages


def _transform(
    values: np.ndarray, name: str, variable: str, model: KineticModel, offset: int
) -> np.ndarray:
    transform = _TRANSFORMS[name]
    with np.errstate(invalid="ignore"):
        valid = np.isfinite(values) & transform.valid(values)
    if not np.all(valid):
        idx = int(np.flatnonzero(~valid)[0])
        requirement = transform.requirement or "must be finite"
        raise DomainViolationError(
            f"{model.label}: {variable} at index {idx + offset} is "
            f"{float(values[idx])!r}; {variable} {requirement}."
        )
    return transform.func(values)


def fit_model(
    observations, model, variance_method: str = DEFAULT_VARIANCE_METHOD
) -> FitReport:
    """Fit a single kinetics model.

    Args:
        observations: Sequence of :class:`Observation` or ``(time, percentage)``
            pairs, ordered by time.
        model: Model key (for example ``"higuchi"``) or :class:`KineticModel`.
        variance_method (str, optional): Variance formula used by the slope
            computation. Defaults to ``"identity"``.

    Returns:
        FitReport: Successful report with finite parameters and R^2.

    Raises:
        InsufficientDataError: If fewer than two points remain for the
            regression (three observations for models that drop the first).
        DomainViolationError: If a used time or percentage value lies outside
            the domain of the model's transform.
        DegenerateFitError: If a transformed variable is constant or any fitted
            quantity is non-finite.
    """
    definition = get_model(model)
    times, percentages = _columns(observations)
    n_total = len(times)
    if n_total < definition.min_observations:
        raise InsufficientDataError(
            f"{definition.label} needs at least {definition.min_observations} observations, "
            f"got {n_total}."
        )

    start = 1 if definition.drop_first else 0
    x = _transform(times[start:], definition.x_transform, "time", definition, start)
    y = _transform(percentages[start:], definition.y_transform, "percentage", definition, start)

    if np.ptp(x) == 0:
        raise DegenerateFitError(
            f"{definition.label}: transformed time is constant; slope is undefined."
        )
    if np.ptp(y) == 0:
        raise DegenerateFitError(
            f"{definition.label}: transformed percentage is constant; R^2 is undefined."
        )

    line = fit_line(x, y, variance_method=variance_method)
    r2 = r_squared(x, y)
    params = definition.parameters(line)

    if not line.is_finite:
        raise DegenerateFitError(f"{definition.label}: regression produced {line}.")
    if not all(np.isfinite(v) for v in params.values()):
        raise DegenerateFitError(f"{definition.label}: non-finite parameters {params}.")
    if not np.isfinite(r2):
        raise DegenerateFitError(f"{definition.label}: R^2 is not finite ({r2}).")

    logger.debug(
        "%s: slope=%g intercept=%g r2=%g (n=%d)",
        definition.label,
        line.slope,
        line.intercept,
        r2,
        len(x),
    )
    return FitReport(
        model=definition.key,
        label=definition.label,
        parameters=params,
        r2=r2,
        n_points=int(len(x)),
        slope=line.slope,
        intercept=line.intercept,
        x=tuple(float(v) for v in x),
        y=tuple(float(v) for v in y),
    )


def fit_all_models(
    observations,
    experiment_name: str = "",
    variance_method: str = DEFAULT_VARIANCE_METHOD,
    models: Iterable = MODELS,
) -> FittingOutcome:
    """Fit every model and collect the reports.

    A model that fails is logged and represented by a failed
    :class:`FitReport`; the other models are still fitted. No model is
    preferred over another.
    """
    obs = as_observations(observations)
    reports = []
    for model in models:
        definition = get_model(model)
        try:
            reports.append(fit_model(obs, definition, variance_method=variance_method))
        except KineticsError as exc:
            logger.warning(
                "Skipping %s for %r: %s (%s)",
                definition.label,
                experiment_name,
                exc,
                exc.kind,
            )
            reports.append(FitReport.failed(definition, exc))

    logger.info(
        "Fitted %d/%d models to %d observations for %r",
        sum(r.ok for r in reports),
        len(reports),
        len(obs),
        experiment_name,
    )
    return FittingOutcome(
        experiment_name=experiment_name,
        reports=tuple(reports),
        n_observations=len(obs),
    )
