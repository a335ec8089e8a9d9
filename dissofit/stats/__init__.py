"""
Statistical utilities for dissolution-kinetics fitting.

This subpackage provides the numerical routines behind every model fit. All
functions operate on numeric sequences and primitive types; no
kinetics-specific logic is included.

Modules:
    descriptive:
        Mean, mean of products and population variance (with the
        mean-of-squares identity as default and a centered alternative).

    regression:
        Ordinary least-squares line fit and squared Pearson correlation.

Design Principle:
    This subpackage has no dependencies on the kinetics, reporting or
    plotting modules. Degenerate inputs produce non-finite numbers rather
    than exceptions; interpreting them is left to the caller.
"""

from .descriptive import VARIANCE_METHODS, mean, mean_of_products, variance
from .regression import LineFit, fit_line, r_squared

__all__ = [
    "VARIANCE_METHODS",
    "mean",
    "mean_of_products",
    "variance",
    "LineFit",
    "fit_line",
    "r_squared",
]
