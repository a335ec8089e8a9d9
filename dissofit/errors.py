"""Exceptions raised when a kinetics model cannot be fitted.

Each exception carries a ``kind`` string that is written into failed fit
reports and result tables.
"""

from __future__ import annotations


class KineticsError(ValueError):
    """Base class for per-model fitting failures."""

    kind = "KineticsError"


class InsufficientDataError(KineticsError):
    """Too few observations for the requested model."""

    kind = "InsufficientData"


class DegenerateFitError(KineticsError):
    """Regression or R^2 is undefined (constant variable or non-finite result)."""

    kind = "DegenerateFit"


class DomainViolationError(KineticsError):
    """A value lies outside the domain of a model's transform."""

    kind = "DomainViolation"
