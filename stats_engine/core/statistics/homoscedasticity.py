"""stats_engine.core.statistics.homoscedasticity

Tests for constant residual variance after an OLS fit.

Includes:
- Breusch-Pagan: auxiliary regression of scaled squared residuals on X
- White: auxiliary regression of squared residuals on y_hat and y_hat^2
- Goldfeld-Quandt: variance ratio of the two tails sorted by a regressor

Each ``*_statistic`` function returns the raw values and raises on failure;
each ``*_test`` function wraps it into a HypothesisTestResult, turning
numerical and insufficient-data errors into a failed record.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict

import numpy as np

from .descriptive import as_vector
from .distributions import chi2_sf, f_cdf, f_sf
from ..errors import InsufficientGroupSizeError, InsufficientObservationsError, ZeroVarianceError
from ..results.outcome import Outcome
from ..results.test_result import DEFAULT_ALPHA, HypothesisTestResult
from ..solver.ols import as_design_columns, fit_ols

logger = logging.getLogger(__name__)

BREUSCH_PAGAN = "Breusch-Pagan"
WHITE = "White"
GOLDFELD_QUANDT = "Goldfeld-Quandt"

GQ_MIN_OBSERVATIONS = 20

# Squared-residual scale below which residuals are treated as an exact fit.
_ZERO_VARIANCE_TOLERANCE = 1e-20


def _lagrange_multiplier(target: np.ndarray, regressors: np.ndarray) -> float:
    """n * R^2 of the auxiliary regression of ``target`` on ``regressors``.

    Regressors are centered first; with the intercept this spans the same
    space, and keeps X'X well conditioned for large-valued columns.
    """
    centered = regressors - regressors.mean(axis=0)
    aux = fit_ols(target, centered)
    if math.isnan(aux.r_squared):
        raise ZeroVarianceError("Auxiliary regression target has zero variance")
    return aux.n_observations * aux.r_squared


def breusch_pagan_statistic(X, residuals) -> Dict[str, Any]:
    """Breusch-Pagan LM statistic.

        g_i = e_i^2 / mean(e^2)
        LM  = n * R^2(g ~ 1 + X),  df = number of regressors

    Args:
        X: predictors without intercept (n x p)
        residuals: residuals of the primary fit

    Returns:
        mapping with statistic, p_value, df
    """
    e = as_vector(residuals, "residuals")
    x_mat = as_design_columns(X)

    sigma2 = float(np.mean(e ** 2))
    if sigma2 <= _ZERO_VARIANCE_TOLERANCE:
        raise ZeroVarianceError("Residual variance is zero; the model fits exactly")

    g = e ** 2 / sigma2
    lm = _lagrange_multiplier(g, x_mat)
    df = int(x_mat.shape[1])
    return {"statistic": lm, "p_value": chi2_sf(lm, df), "df": df}


def white_statistic(fitted, residuals) -> Dict[str, Any]:
    """White's test, simplified form using fitted values.

        LM = n * R^2(e^2 ~ 1 + y_hat + y_hat^2),  df = 2
    """
    e = as_vector(residuals, "residuals")
    y_hat = as_vector(fitted, "fitted values")

    if float(np.mean(e ** 2)) <= _ZERO_VARIANCE_TOLERANCE:
        raise ZeroVarianceError("Residual variance is zero; the model fits exactly")

    # Center before squaring: y_hat^2 of a large-mean fit is nearly collinear with y_hat.
    c = y_hat - y_hat.mean()
    aux_x = np.column_stack([c, c ** 2])
    lm = _lagrange_multiplier(e ** 2, aux_x)
    return {"statistic": lm, "p_value": chi2_sf(lm, 2), "df": 2}


def goldfeld_quandt_statistic(X, y, min_observations: int = GQ_MIN_OBSERVATIONS) -> Dict[str, Any]:
    """Goldfeld-Quandt F statistic.

    Cases are sorted by the first regressor (stable), the middle n // 3 are
    dropped and the leading and trailing groups of (n - drop) // 2 cases are
    fitted separately:

        F = (RSS_trailing / df) / (RSS_leading / df),  df = group - k

    where k counts the coefficients including the intercept. The p-value is
    the tail of F(df, df) on the side the statistic falls.

    Raises:
        InsufficientObservationsError: n < min_observations
        InsufficientGroupSizeError: a group has fewer than k + 1 cases
        ZeroVarianceError: the leading group fits exactly
    """
    y_arr = as_vector(y, "dependent")
    x_mat = as_design_columns(X)
    n = int(y_arr.shape[0])

    if n < min_observations:
        raise InsufficientObservationsError(
            f"Goldfeld-Quandt test requires at least {min_observations} observations (got {n})"
        )

    order = np.argsort(x_mat[:, 0], kind="stable")
    drop = n // 3
    group = (n - drop) // 2
    k = int(x_mat.shape[1]) + 1
    if group < k + 1:
        raise InsufficientGroupSizeError(
            f"Goldfeld-Quandt groups of {group} cases are too small for {k} coefficients"
        )

    logger.debug("Goldfeld-Quandt split: n=%d, dropped=%d, group=%d", n, drop, group)
    lead = order[:group]
    trail = order[n - group:]
    lead_fit = fit_ols(y_arr[lead], x_mat[lead])
    trail_fit = fit_ols(y_arr[trail], x_mat[trail])

    if lead_fit.sse <= _ZERO_VARIANCE_TOLERANCE:
        raise ZeroVarianceError("Leading group residual sum of squares is zero")

    df = group - k
    f_stat = (trail_fit.sse / df) / (lead_fit.sse / df)
    p_value = f_cdf(f_stat, df, df) if f_stat < 1.0 else f_sf(f_stat, df, df)
    return {"statistic": f_stat, "p_value": p_value, "df": (df, df)}


def breusch_pagan_test(X, residuals, alpha: float = DEFAULT_ALPHA) -> HypothesisTestResult:
    outcome = Outcome.capture(breusch_pagan_statistic, X, residuals)
    return HypothesisTestResult.from_outcome(BREUSCH_PAGAN, outcome, alpha)


def white_test(fitted, residuals, alpha: float = DEFAULT_ALPHA) -> HypothesisTestResult:
    outcome = Outcome.capture(white_statistic, fitted, residuals)
    return HypothesisTestResult.from_outcome(WHITE, outcome, alpha)


def goldfeld_quandt_test(
    X,
    y,
    alpha: float = DEFAULT_ALPHA,
    min_observations: int = GQ_MIN_OBSERVATIONS,
) -> HypothesisTestResult:
    outcome = Outcome.capture(goldfeld_quandt_statistic, X, y, min_observations=min_observations)
    return HypothesisTestResult.from_outcome(GOLDFELD_QUANDT, outcome, alpha)
