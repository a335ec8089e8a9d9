"""Default settings for a fitting run."""

from __future__ import annotations

from dataclasses import dataclass

from .stats import VARIANCE_METHODS

DEFAULT_VARIANCE_METHOD = "identity"
DEFAULT_DECIMALS = 4
DEFAULT_OUTPUT_DIR = "output"


@dataclass(frozen=True)
class FitSettings:
    """Options shared by the fitter and the presentation layer.

    Attributes:
        variance_method: ``"identity"`` reproduces the mean-of-squares
            formula; ``"centered"`` uses the numerically stable two-pass
            formula.
        decimals: Decimal places for rates and R^2 in console output.
        output_dir: Directory for CSV and figure files.
        make_plots: Whether to render the linearised-fit figure.
        write_csv: Whether to export the results table.
    """

    variance_method: str = DEFAULT_VARIANCE_METHOD
    decimals: int = DEFAULT_DECIMALS
    output_dir: str = DEFAULT_OUTPUT_DIR
    make_plots: bool = True
    write_csv: bool = True

    def __post_init__(self):
        if self.variance_method not in VARIANCE_METHODS:
            raise ValueError(
                f"variance_method must be one of {VARIANCE_METHODS}, "
                f"got {self.variance_method!r}"
            )
        if self.decimals < 0:
            raise ValueError(f"decimals must be >= 0, got {self.decimals}")
