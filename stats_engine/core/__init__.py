"""
Core module for the statistics engine.

This module contains pure numerical implementations with no I/O and no
request handling. It can be used standalone for testing or integration
with other applications.
"""

from .errors import (
    FailureReason,
    StatsEngineError,
    InputError,
    NumericalError,
    SingularMatrixError,
    ZeroVarianceError,
    InsufficientDataError,
    UnderdeterminedError,
    InsufficientGroupSizeError,
    InsufficientObservationsError,
)

from .models import (
    MissingValueSpec,
    VariableInfo,
    RegressionRequest,
    DiagnosticsOptions,
    FrequencyOptions,
    GoodnessOfFitOptions,
    PercentileMethod,
)

from .results import (
    Outcome,
    HypothesisTestResult,
    ResidualStats,
    DiagnosticKind,
    DiagnosticReport,
    CategoryFrequencies,
    GoodnessOfFitResult,
)

from .solver import RegressionModel, fit_ols, invert

from .statistics import (
    breusch_pagan_test,
    white_test,
    goldfeld_quandt_test,
    kolmogorov_smirnov_test,
    jarque_bera_test,
    shapiro_wilk_test,
    FrequencyCalculator,
    build_distribution,
    chi_square_goodness_of_fit,
)

from .diagnostics import analyze_homoscedasticity, analyze_normality

__all__ = [
    # Errors
    "FailureReason",
    "StatsEngineError",
    "InputError",
    "NumericalError",
    "SingularMatrixError",
    "ZeroVarianceError",
    "InsufficientDataError",
    "UnderdeterminedError",
    "InsufficientGroupSizeError",
    "InsufficientObservationsError",

    # Models
    "MissingValueSpec",
    "VariableInfo",
    "RegressionRequest",
    "DiagnosticsOptions",
    "FrequencyOptions",
    "GoodnessOfFitOptions",
    "PercentileMethod",

    # Results
    "Outcome",
    "HypothesisTestResult",
    "ResidualStats",
    "DiagnosticKind",
    "DiagnosticReport",
    "CategoryFrequencies",
    "GoodnessOfFitResult",

    # Solver
    "RegressionModel",
    "fit_ols",
    "invert",

    # Tests
    "breusch_pagan_test",
    "white_test",
    "goldfeld_quandt_test",
    "kolmogorov_smirnov_test",
    "jarque_bera_test",
    "shapiro_wilk_test",

    # Frequencies
    "FrequencyCalculator",
    "build_distribution",
    "chi_square_goodness_of_fit",

    # Suites
    "analyze_homoscedasticity",
    "analyze_normality",
]
