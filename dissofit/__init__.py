"""
A Python package for fitting dissolution-kinetics models to drug-release data.

Fits zero-order, first-order, Higuchi and Korsmeyer-Peppas models by linear
regression on transformed (time, percentage dissolved) observations.

Modules:
    - stats: Mean, variance, least-squares line fit and R^2.
    - kinetics: Model definitions and the per-model fitter.
    - data_processing: Loads experiments from JSON or CSV files.
    - reporting: Console text and result tables.
    - output: CSV export.
    - plotting: Figures of the linearised fits.
"""

__version__ = "1.0.0"

from .config import FitSettings
from .data_processing import Experiment, load_experiment
from .errors import (
    DegenerateFitError,
    DomainViolationError,
    InsufficientDataError,
    KineticsError,
)
from .kinetics import (
    MODELS,
    FitReport,
    FittingOutcome,
    Observation,
    fit_all_models,
    fit_model,
)
from .reporting import create_results_dataframe, format_outcome

__all__ = [
    # Configuration
    "FitSettings",
    # Data loading
    "Experiment",
    "load_experiment",
    # Fitting
    "MODELS",
    "Observation",
    "FitReport",
    "FittingOutcome",
    "fit_model",
    "fit_all_models",
    # Errors
    "KineticsError",
    "InsufficientDataError",
    "DegenerateFitError",
    "DomainViolationError",
    # Reporting
    "create_results_dataframe",
    "format_outcome",
]
