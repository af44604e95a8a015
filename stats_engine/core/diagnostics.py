"""stats_engine.core.diagnostics

Residual diagnostic suites.

Each suite fits the primary OLS model, runs its tests on the residuals and
assembles a DiagnosticReport. The fit strictly precedes the tests. A failed
fit still yields a well-formed report: every test is recorded as failed and
the suite verdict falls back to the null hypothesis.

This module intentionally contains **no I/O** so it can be unit-tested and
re-used behind any request boundary.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional

from .errors import InsufficientDataError, NumericalError
from .models.options import DiagnosticsOptions
from .models.request import RegressionRequest
from .plots import residual_plots
from .results.outcome import Outcome
from .results.test_result import (
    DiagnosticKind,
    DiagnosticReport,
    HypothesisTestResult,
    ResidualStats,
)
from .solver.ols import RegressionModel, fit_ols
from .statistics.descriptive import sample_excess_kurtosis, sample_skewness
from .statistics.homoscedasticity import (
    BREUSCH_PAGAN,
    GOLDFELD_QUANDT,
    WHITE,
    breusch_pagan_test,
    goldfeld_quandt_test,
    white_test,
)
from .statistics.normality import (
    JARQUE_BERA,
    KOLMOGOROV_SMIRNOV,
    SHAPIRO_WILK,
    jarque_bera_test,
    kolmogorov_smirnov_test,
    shapiro_wilk_test,
)

logger = logging.getLogger(__name__)

HOMOSCEDASTICITY_DESCRIPTION = "Tests if the residuals from the regression model have constant variance"
NORMALITY_DESCRIPTION = "Tests if the residuals from the regression model are normally distributed"


def _model_summary(model: RegressionModel, request: RegressionRequest) -> Dict[str, object]:
    summary = model.to_dict()
    summary["orientation_ambiguous"] = request.orientation_ambiguous
    summary["dropped_cases"] = request.dropped_cases
    return summary


def _failed_report(
    kind: DiagnosticKind,
    test_names: Dict[str, str],
    error: Exception,
    alpha: float,
    description: str,
) -> DiagnosticReport:
    """Report for a suite whose primary regression could not be fitted."""
    message = f"Regression could not be fitted: {error}"
    tests = {
        key: HypothesisTestResult.failed(name, error.reason, message, alpha)
        for key, name in test_names.items()
    }
    return DiagnosticReport(
        kind=kind,
        tests=tests,
        description=description,
        interpretation=f"{message.rstrip('.')}. No {kind.value} tests could be performed.",
        error=message,
        failure=error.reason,
    )


def _test_sentences(tests: List[HypothesisTestResult], alpha: float) -> List[str]:
    sentences = []
    for test in tests:
        if test.completed:
            side = "above" if test.p_value > alpha else "below"
            sentences.append(
                f"The {test.test_name} test shows a p-value of {test.p_value:.4f}, "
                f"which is {side} the significance level of {alpha}."
            )
        else:
            sentences.append(f"The {test.test_name} test could not be computed ({test.error}).")
    return sentences


def interpret_homoscedasticity(tests: List[HypothesisTestResult], alpha: float, verdict: bool) -> str:
    sentences = _test_sentences(tests, alpha)
    if not any(t.completed for t in tests):
        sentences.append("No test could be completed, so constant variance is assumed but not verified.")
    elif verdict:
        sentences.append(
            "Therefore, we fail to reject the null hypothesis of homoscedasticity. "
            "The residuals appear to have constant variance, indicating that the "
            "homoscedasticity assumption is satisfied."
        )
    else:
        sentences.append(
            "Therefore, we reject the null hypothesis of homoscedasticity. "
            "The residuals appear to have non-constant variance, indicating that the "
            "homoscedasticity assumption is violated. This may affect the reliability "
            "of standard errors and confidence intervals in the regression model."
        )
    return " ".join(sentences)


def interpret_normality(tests: List[HypothesisTestResult], alpha: float, verdict: bool) -> str:
    sentences = _test_sentences(tests, alpha)
    if not any(t.completed for t in tests):
        sentences.append("No test could be completed, so normality is assumed but not verified.")
    elif verdict:
        sentences.append(
            "The tests indicate that the residuals follow a normal distribution, "
            "which is a key assumption for linear regression."
        )
    else:
        sentences.append(
            "Some tests suggest the residuals may not follow a normal distribution. "
            "This could affect the validity of statistical inferences from the model."
        )
    return " ".join(sentences)


def analyze_homoscedasticity(
    request: RegressionRequest,
    options: Optional[DiagnosticsOptions] = None,
) -> DiagnosticReport:
    """Run the homoscedasticity suite.

    Args:
        request: Normalized regression input
        options: Diagnostics options (defaults if None)

    Returns:
        DiagnosticReport with breuschPagan, white and goldfeldQuandt results
    """
    options = options or DiagnosticsOptions.default()
    alpha = options.alpha
    kind = DiagnosticKind.HOMOSCEDASTICITY
    logger.debug(
        "Homoscedasticity suite: n=%d, p=%d", request.n_observations, request.n_predictors
    )

    selected = {}
    if options.run_breusch_pagan:
        selected["breuschPagan"] = BREUSCH_PAGAN
    if options.run_white:
        selected["white"] = WHITE
    if options.run_goldfeld_quandt:
        selected["goldfeldQuandt"] = GOLDFELD_QUANDT

    try:
        model = fit_ols(request.dependent, request.independent)
    except (NumericalError, InsufficientDataError) as e:
        logger.warning("Primary regression failed: %s", e)
        return _failed_report(kind, selected, e, alpha, HOMOSCEDASTICITY_DESCRIPTION)

    X = request.independent
    tests: Dict[str, HypothesisTestResult] = {}
    if options.run_breusch_pagan:
        tests["breuschPagan"] = breusch_pagan_test(X, model.residuals, alpha)
    if options.run_white:
        tests["white"] = white_test(model.fitted, model.residuals, alpha)
    if options.run_goldfeld_quandt:
        tests["goldfeldQuandt"] = goldfeld_quandt_test(
            X, request.dependent, alpha, min_observations=options.gq_min_observations
        )

    visualizations = {}
    if options.include_visualizations:
        visualizations = {
            "residualVsFitted": residual_plots.residual_vs_fitted(model.residuals, model.fitted),
            "residualVsIndependent": residual_plots.residual_vs_independent(
                model.residuals, X, request.variable_infos
            ),
            "scaleLocation": residual_plots.scale_location(model.residuals, model.fitted),
        }

    report = DiagnosticReport(
        kind=kind,
        tests=tests,
        residual_stats=ResidualStats.from_residuals(model.residuals),
        visualizations=visualizations,
        description=HOMOSCEDASTICITY_DESCRIPTION,
        model_summary=_model_summary(model, request),
    )
    report.interpretation = interpret_homoscedasticity(list(tests.values()), alpha, report.verdict)
    return report


def analyze_normality(
    request: RegressionRequest,
    options: Optional[DiagnosticsOptions] = None,
) -> DiagnosticReport:
    """Run the normality suite on the regression residuals.

    Args:
        request: Normalized regression input
        options: Diagnostics options (defaults if None)

    Returns:
        DiagnosticReport with kolmogorovSmirnov, jarqueBera and shapiroWilk results
    """
    options = options or DiagnosticsOptions.default()
    alpha = options.alpha
    kind = DiagnosticKind.NORMALITY
    logger.debug("Normality suite: n=%d, p=%d", request.n_observations, request.n_predictors)

    selected = {"kolmogorovSmirnov": KOLMOGOROV_SMIRNOV, "jarqueBera": JARQUE_BERA}
    if options.run_shapiro_wilk:
        selected["shapiroWilk"] = SHAPIRO_WILK

    try:
        model = fit_ols(request.dependent, request.independent)
    except (NumericalError, InsufficientDataError) as e:
        logger.warning("Primary regression failed: %s", e)
        return _failed_report(kind, selected, e, alpha, NORMALITY_DESCRIPTION)

    residuals = model.residuals
    tests: Dict[str, HypothesisTestResult] = {
        "kolmogorovSmirnov": kolmogorov_smirnov_test(residuals, alpha),
        "jarqueBera": jarque_bera_test(residuals, alpha),
    }
    if options.run_shapiro_wilk:
        tests["shapiroWilk"] = shapiro_wilk_test(residuals, alpha)

    stats = dataclasses.replace(
        ResidualStats.from_residuals(residuals),
        skewness=Outcome.capture(sample_skewness, residuals).value,
        kurtosis=Outcome.capture(sample_excess_kurtosis, residuals).value,
    )

    visualizations = {}
    if options.include_visualizations:
        visualizations = {
            "histogram": residual_plots.histogram(residuals, options.histogram_bins),
            "qqPlot": residual_plots.qq_plot(residuals),
        }

    report = DiagnosticReport(
        kind=kind,
        tests=tests,
        residual_stats=stats,
        visualizations=visualizations,
        description=NORMALITY_DESCRIPTION,
        model_summary=_model_summary(model, request),
    )
    report.interpretation = interpret_normality(list(tests.values()), alpha, report.verdict)
    return report
