"""Provide the descriptive statistics used by the regression routines.

Every function accepts any one-dimensional sequence of numbers and returns a
plain ``float``. Means are population means (division by ``n``).
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

VARIANCE_METHODS: Tuple[str, ...] = ("identity", "centered")


def _as_array(data, name: str = "data") -> np.ndarray:
    arr = np.asarray(data, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {arr.shape}.")
    if arr.size == 0:
        raise ValueError(f"{name} must not be empty.")
    return arr


def mean(data) -> float:
    """Return the arithmetic mean of ``data``.

    Raises:
        ValueError: If ``data`` is empty.
    """
    arr = _as_array(data)
    with np.errstate(over="ignore"):
        total = np.sum(arr)
    if not np.isfinite(total) and np.all(np.isfinite(arr)):
        # Sum overflowed; scale first so finite inputs keep a finite mean.
        return float(np.sum(arr / arr.size))
    return float(total / arr.size)


def mean_of_products(a, b) -> float:
    """Return the mean of the element-wise products of ``a`` and ``b``.

    Raises:
        ValueError: If the sequences are empty or differ in length.
    """
    a_arr = _as_array(a, "a")
    b_arr = _as_array(b, "b")
    if a_arr.size != b_arr.size:
        raise ValueError(
            f"Sequences must have equal length, got {a_arr.size} and {b_arr.size}."
        )
    return mean(a_arr * b_arr)


def variance(data, method: str = "identity") -> float:
    """Return the population variance of ``data``.

    Args:
        data: Numeric sequence.
        method (str, optional): ``"identity"`` computes
            ``mean(x**2) - mean(x)**2``; ``"centered"`` computes
            ``mean((x - mean(x))**2)``. Defaults to ``"identity"``.

    Returns:
        float: Population variance.

    Raises:
        ValueError: If ``data`` is empty or ``method`` is unknown.

    Note:
        The identity form loses precision when the mean is large compared
        with the spread and may come out slightly negative. The centered form
        does not, but gives results that differ in the last digits from
        reports produced with the identity form.
    """
    arr = _as_array(data)
    if method == "identity":
        return mean(arr**2) - mean(arr) ** 2
    if method == "centered":
        return mean((arr - mean(arr)) ** 2)
    raise ValueError(
        f"Unknown variance method {method!r}; expected one of {VARIANCE_METHODS}."
    )
