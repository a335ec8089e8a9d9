"""Provide the least-squares line fit and its coefficient of determination.

Both routines follow the moment formulas directly instead of delegating to
``numpy.polyfit`` so that the slope is computed from the same mean/variance
primitives used everywhere else in the package.

A constant independent variable is not an error at this level: the division
by a zero variance (or a zero sum of squares) produces NaN or infinity, which
the kinetics layer turns into a typed failure.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np

from .descriptive import mean, mean_of_products, variance


class LineFit(NamedTuple):
    """Parameters of ``y = slope * x + intercept``."""

    slope: float
    intercept: float

    @property
    def is_finite(self) -> bool:
        return bool(np.isfinite(self.slope) and np.isfinite(self.intercept))


def _paired(x, y, min_points: int) -> Tuple[np.ndarray, np.ndarray]:
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape or x_arr.ndim != 1:
        raise ValueError(
            f"x and y must be one-dimensional with equal length, got "
            f"{x_arr.shape} and {y_arr.shape}."
        )
    if x_arr.size < min_points:
        raise ValueError(
            f"At least {min_points} points are required, got {x_arr.size}."
        )
    return x_arr, y_arr


def fit_line(
    independent, dependent, variance_method: str = "identity"
) -> LineFit:
    """Fit an ordinary least-squares straight line.

    Args:
        independent: Independent-variable values.
        dependent: Dependent-variable values, same length as ``independent``.
        variance_method (str, optional): Passed to
            :func:`~dissofit.stats.descriptive.variance`. Defaults to
            ``"identity"``.

    Returns:
        LineFit: Slope and intercept. Both are non-finite when
        ``independent`` has zero variance.

    Raises:
        ValueError: If the inputs differ in length or hold fewer than two
            points.
    """
    x, y = _paired(independent, dependent, min_points=2)
    x_mean = np.float64(mean(x))
    y_mean = np.float64(mean(y))
    products_mean = np.float64(mean_of_products(x, y))
    x_var = np.float64(variance(x, method=variance_method))

    with np.errstate(divide="ignore", invalid="ignore"):
        slope = (products_mean - x_mean * y_mean) / x_var
        intercept = y_mean - slope * x_mean
    return LineFit(float(slope), float(intercept))


def r_squared(x, y) -> float:
    """Return the squared Pearson correlation of ``x`` and ``y``.

    Returns NaN when either variable is constant.

    Raises:
        ValueError: If the inputs differ in length or are empty.
    """
    x_arr, y_arr = _paired(x, y, min_points=1)
    dx = x_arr - mean(x_arr)
    dy = y_arr - mean(y_arr)
    top = np.sum(dx * dy)
    bottom = np.sum(dx**2) * np.sum(dy**2)
    with np.errstate(divide="ignore", invalid="ignore"):
        r = top / np.sqrt(bottom)
    return float(r**2)
