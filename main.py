#!/usr/bin/env python3
"""
Main script for running dissolution-kinetics fitting.
"""

# Pipeline overview:
# 1) Load each experiment (JSON with experiment_name/data_points, or CSV with
#    minutes/percentage columns), skipping malformed records.
# 2) Fit zero-order, first-order, Higuchi and Korsmeyer-Peppas models by least
#    squares on transformed data; the log-based fits drop the first point.
# 3) Print per-model rates and R^2, with explicit failure text for models that
#    could not be fitted.
# 4) Export a results table, the linearised points, and one figure per
#    experiment.

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dissofit.cli import app

if __name__ == "__main__":
    app()
