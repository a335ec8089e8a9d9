"""Command-line entry point for dissolution-kinetics fitting."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import typer

from .config import DEFAULT_DECIMALS, DEFAULT_OUTPUT_DIR, DEFAULT_VARIANCE_METHOD, FitSettings
from .data_processing import load_experiment
from .kinetics import fit_all_models
from .output import save_results_to_csv
from .reporting import create_results_dataframe, print_best_fits, print_outcome

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

app = typer.Typer(add_completion=False, help="Fit dissolution-kinetics models to experiment files.")


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="w"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def run(files: List[str], settings: FitSettings) -> int:
    """Fit every file and write the configured outputs.

    Files that cannot be loaded are logged and skipped. Returns the process
    exit code: 0 if at least one experiment was fitted, 1 otherwise.
    """
    start_time = time.time()
    logging.info("Processing %d input file(s)", len(files))

    outcomes = []
    sources = []
    for filepath in files:
        try:
            experiment = load_experiment(filepath)
        except (OSError, ValueError) as exc:
            logging.error("Error loading %s: %s", filepath, exc)
            continue

        logging.info(
            "Loaded %d data point(s) for %r from %s",
            len(experiment),
            experiment.name,
            filepath,
        )
        outcome = fit_all_models(
            experiment.observations,
            experiment_name=experiment.name,
            variance_method=settings.variance_method,
        )
        print_outcome(outcome, settings.decimals)
        outcomes.append(outcome)
        sources.append(filepath)

    if not outcomes:
        logging.error("No experiment could be processed. Terminating execution.")
        return 1

    results_df = create_results_dataframe(outcomes, sources)
    if len(outcomes) > 1:
        print_best_fits(results_df, settings.decimals)

    if settings.write_csv:
        save_results_to_csv(
            results_df, outcomes, output_dir=settings.output_dir, decimals=settings.decimals
        )

    if settings.make_plots:
        from .plotting import plot_all_outcomes

        for path in plot_all_outcomes(outcomes, settings.output_dir, settings.decimals):
            logging.info("  - Kinetics figure: %s", path)

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    return 0


@app.command()
def main(
    files: List[str] = typer.Argument(..., help="Experiment files (.json or .csv)."),
    output_dir: str = typer.Option(DEFAULT_OUTPUT_DIR, "--output-dir", "-o", help="Directory for CSV and figure output."),
    variance_method: str = typer.Option(
        DEFAULT_VARIANCE_METHOD,
        "--variance-method",
        help="Variance formula: 'identity' (mean of squares minus square of mean) or 'centered'.",
    ),
    decimals: int = typer.Option(DEFAULT_DECIMALS, "--decimals", help="Decimal places in console output."),
    plot: bool = typer.Option(True, "--plot/--no-plot", help="Render the linearised-fit figure."),
    csv: bool = typer.Option(True, "--csv/--no-csv", help="Write result CSV files."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write the log to this file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Fit zero-order, first-order, Higuchi and Korsmeyer-Peppas models."""
    configure_logging(verbose, log_file)
    try:
        settings = FitSettings(
            variance_method=variance_method,
            decimals=decimals,
            output_dir=output_dir,
            make_plots=plot,
            write_csv=csv,
        )
    except ValueError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2)

    raise typer.Exit(code=run(files, settings))


if __name__ == "__main__":
    app()
