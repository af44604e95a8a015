"""
Result classes returned by the statistics engine.

- Outcome: tagged success/failure container
- HypothesisTestResult, ResidualStats, DiagnosticReport: residual diagnostics
- CategoryFrequencies, GoodnessOfFitResult: chi-square goodness of fit
"""

from .outcome import Outcome
from .test_result import (
    DEFAULT_ALPHA,
    DiagnosticKind,
    DiagnosticReport,
    HypothesisTestResult,
    ResidualStats,
    aggregate_verdict,
    json_safe,
)
from .categorical import (
    INSUFFICIENT_EMPTY,
    INSUFFICIENT_SINGLE_CATEGORY,
    CategoryFrequencies,
    GoodnessOfFitResult,
)

__all__ = [
    "Outcome",
    "DEFAULT_ALPHA",
    "DiagnosticKind",
    "DiagnosticReport",
    "HypothesisTestResult",
    "ResidualStats",
    "aggregate_verdict",
    "json_safe",
    "INSUFFICIENT_EMPTY",
    "INSUFFICIENT_SINGLE_CATEGORY",
    "CategoryFrequencies",
    "GoodnessOfFitResult",
]
