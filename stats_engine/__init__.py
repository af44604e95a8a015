"""
Statistics Engine

A stateless statistical computation engine: OLS regression with residual
diagnostics (homoscedasticity and normality), weighted percentiles and a
chi-square goodness-of-fit test.

Conventions:
- Percentiles: 0..100 scale
- Predictors: observation-major (n x p) internally, intercept added by the solver
- Significance level: alpha = 0.05 unless configured; a test "passes" when p > alpha
- Missing values: None, NaN, inf, non-numeric text and user-missing codes are
  removed before any statistic is computed
- Results: dataclasses with to_dict() producing JSON-safe camelCase payloads
"""

__version__ = "1.0.0"
__author__ = "Statistics Engine"

from .core import (
    RegressionRequest,
    DiagnosticsOptions,
    FrequencyOptions,
    GoodnessOfFitOptions,
    PercentileMethod,
    DiagnosticReport,
    GoodnessOfFitResult,
    FrequencyCalculator,
    fit_ols,
    analyze_homoscedasticity,
    analyze_normality,
    chi_square_goodness_of_fit,
)
from .workers import AnalysisDispatcher, handle_message

__all__ = [
    # Version
    "__version__",

    # Inputs
    "RegressionRequest",
    "DiagnosticsOptions",
    "FrequencyOptions",
    "GoodnessOfFitOptions",
    "PercentileMethod",

    # Results
    "DiagnosticReport",
    "GoodnessOfFitResult",

    # Analyses
    "FrequencyCalculator",
    "fit_ols",
    "analyze_homoscedasticity",
    "analyze_normality",
    "chi_square_goodness_of_fit",

    # Request boundary
    "AnalysisDispatcher",
    "handle_message",
]
