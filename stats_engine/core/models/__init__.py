"""
Input models for the statistics engine.

This module provides the core data structures:
- VariableInfo / MissingValueSpec: variable metadata and missing codes
- RegressionRequest: normalized regression diagnostics input
- DiagnosticsOptions, FrequencyOptions, GoodnessOfFitOptions: configuration
"""

from .variable import MissingValueSpec, VariableInfo, clean_values, coerce_numeric
from .options import (
    DEFAULT_PERCENTILES,
    DiagnosticsOptions,
    FrequencyOptions,
    GoodnessOfFitOptions,
    PercentileMethod,
)
from .request import RegressionRequest, prepare_independent_data

__all__ = [
    # Variables
    "MissingValueSpec",
    "VariableInfo",
    "clean_values",
    "coerce_numeric",

    # Options
    "DEFAULT_PERCENTILES",
    "DiagnosticsOptions",
    "FrequencyOptions",
    "GoodnessOfFitOptions",
    "PercentileMethod",

    # Requests
    "RegressionRequest",
    "prepare_independent_data",
]
