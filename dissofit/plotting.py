"""
Diagnostic figures for dissolution-kinetics fits.

One black-and-white figure per experiment with four panels, one per model,
each showing the linearised points used by the regression and the fitted
line. Plotting code only renders precomputed fit reports; it performs no
fitting of its own.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Iterable, List, Tuple

import matplotlib.pyplot as plt
from matplotlib.ticker import MaxNLocator
import numpy as np

from .config import DEFAULT_DECIMALS, DEFAULT_OUTPUT_DIR
from .kinetics import FitReport, FittingOutcome

# Axis labels of the linearised coordinates, keyed by model.
_AXIS_LABELS: Dict[str, Tuple[str, str]] = {
    "zero_order": (r"$t$ / min", r"$Q$ / %"),
    "first_order": (r"$t$ / min", r"$\ln Q$"),
    "higuchi": (r"$\sqrt{t}$ / min$^{1/2}$", r"$Q$ / %"),
    "korsmeyer_peppas": (r"$\ln t$", r"$\ln Q$"),
}


def setup_plot_style():
    """High-legibility style for black-and-white report figures."""
    try:
        if "seaborn-v0_8-whitegrid" in plt.style.available:
            plt.style.use("seaborn-v0_8-whitegrid")
        else:
            plt.style.use("default")
    except OSError:
        plt.style.use("default")

    plt.rcParams.update(
        {
            "font.family": "serif",
            "font.serif": ["Times New Roman", "Times", "Nimbus Roman", "DejaVu Serif"],
            "mathtext.fontset": "stix",
            "font.size": 12,
            "axes.titlesize": 14,
            "axes.labelsize": 12,
            "legend.fontsize": 10,
            "figure.dpi": 120,
            "savefig.dpi": 300,
            "savefig.bbox": "tight",
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": 0.25,
            "grid.linestyle": "--",
            "legend.frameon": False,
        }
    )


def _equation_text(report: FitReport, decimals: int) -> str:
    params = ", ".join(
        f"{name} = {value:.{decimals}f}" for name, value in report.parameters.items()
    )
    return f"{params}\n" + rf"$R^2 = {report.r2:.{decimals}f}$"


def _draw_report(ax, report: FitReport, decimals: int) -> None:
    x_label, y_label = _AXIS_LABELS.get(report.model, ("x", "y"))
    ax.set_title(report.label, fontweight="bold")
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)

    if not report.ok:
        ax.text(
            0.5,
            0.5,
            f"Fit failed\n({report.error_kind})",
            transform=ax.transAxes,
            ha="center",
            va="center",
        )
        return

    x = np.asarray(report.x, dtype=float)
    y = np.asarray(report.y, dtype=float)
    ax.scatter(x, y, s=40, edgecolor="black", facecolor="white", linewidth=1.2,
               label="Observations", zorder=3)
    xgrid = np.linspace(float(np.min(x)), float(np.max(x)), 120)
    ax.plot(xgrid, report.slope * xgrid + report.intercept, color="black",
            linewidth=1.8, label="Least-squares line")
    ax.text(
        0.98,
        0.02,
        _equation_text(report, decimals),
        transform=ax.transAxes,
        ha="right",
        va="bottom",
    )
    ax.xaxis.set_major_locator(MaxNLocator(nbins=6))
    ax.legend(loc="upper left")


def plot_linearized_fits(
    outcome: FittingOutcome,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    decimals: int = DEFAULT_DECIMALS,
) -> str:
    """Save a 2x2 figure of the linearised fits of one experiment.

    Returns the PNG path.
    """
    setup_plot_style()
    os.makedirs(output_dir, exist_ok=True)

    fig, axes = plt.subplots(2, 2, figsize=(11, 8.5))
    fig.suptitle(outcome.experiment_name or "Dissolution profile", fontweight="bold")
    for ax, report in zip(axes.ravel(), outcome):
        _draw_report(ax, report, decimals)
    for ax in axes.ravel()[len(outcome):]:
        ax.set_visible(False)
    fig.tight_layout(rect=[0.02, 0.02, 0.98, 0.95])

    sanitized = re.sub(r"[^A-Za-z0-9._-]+", "_", outcome.experiment_name).strip("_")
    out_path = os.path.join(output_dir, f"kinetics_{sanitized or 'experiment'}.png")
    fig.savefig(out_path, dpi=300)
    plt.close(fig)
    return out_path


def plot_all_outcomes(
    outcomes: Iterable[FittingOutcome],
    output_dir: str = DEFAULT_OUTPUT_DIR,
    decimals: int = DEFAULT_DECIMALS,
) -> List[str]:
    return [plot_linearized_fits(o, output_dir, decimals) for o in outcomes]
