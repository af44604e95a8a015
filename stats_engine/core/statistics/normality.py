"""stats_engine.core.statistics.normality

Normality tests for a sample (typically regression residuals).

Includes:
- Kolmogorov-Smirnov against a normal with estimated mean and sd, using the
  Stephens small-sample factor on the Kolmogorov limiting distribution
- Jarque-Bera on population skewness and kurtosis
- Shapiro-Wilk via Royston's approximation (AS R94)
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict

import numpy as np

from .descriptive import (
    as_vector,
    kurtosis_standard_error,
    population_moments,
    sample_excess_kurtosis,
    sample_skewness,
    skewness_standard_error,
)
from .distributions import chi2_sf, kolmogorov_sf, normal_cdf, normal_ppf
from ..errors import InsufficientObservationsError, ZeroVarianceError
from ..results.outcome import Outcome
from ..results.test_result import DEFAULT_ALPHA, HypothesisTestResult

logger = logging.getLogger(__name__)

KOLMOGOROV_SMIRNOV = "Kolmogorov-Smirnov"
JARQUE_BERA = "Jarque-Bera"
SHAPIRO_WILK = "Shapiro-Wilk"

SW_MAX_OBSERVATIONS = 5000

# Royston polynomial coefficients, lowest order first.
_SW_C1 = (0.0, 0.221157, -0.147981, -2.071190, 4.434685, -2.706056)
_SW_C2 = (0.0, 0.042981, -0.293762, -1.752461, 5.682633, -3.582633)
_SW_G = (-2.273, 0.459)
_SW_C3 = (0.5440, -0.39978, 0.025054, -6.714e-4)
_SW_C4 = (1.3822, -0.77857, 0.062767, -0.0020322)
_SW_C5 = (-1.5861, -0.31082, -0.083751, 0.0038915)
_SW_C6 = (-0.4803, -0.082676, 0.0030302)


def _poly(coefficients, x: float) -> float:
    result = 0.0
    for c in reversed(coefficients):
        result = result * x + c
    return result


def kolmogorov_smirnov_statistic(x) -> Dict[str, Any]:
    """Two-sided KS distance to N(mean, sd) with sample estimates.

        D      = max_i max(i/n - F(z_i), F(z_i) - (i-1)/n)
        lambda = (sqrt(n) + 0.12 + 0.11/sqrt(n)) * D
        p      = Q_KS(lambda)
    """
    arr = as_vector(x, "sample")
    n = int(arr.size)
    if n < 2:
        raise InsufficientObservationsError("Kolmogorov-Smirnov test requires at least 2 observations")

    sd = float(np.std(arr, ddof=1))
    if sd <= 0.0:
        raise ZeroVarianceError("Sample has zero variance")

    z = np.sort((arr - arr.mean()) / sd)
    cdf = np.array([normal_cdf(float(v)) for v in z])
    i = np.arange(1, n + 1, dtype=float)
    d_plus = float(np.max(i / n - cdf))
    d_minus = float(np.max(cdf - (i - 1.0) / n))
    d = max(d_plus, d_minus)

    sqrt_n = math.sqrt(n)
    lam = (sqrt_n + 0.12 + 0.11 / sqrt_n) * d
    return {"statistic": d, "p_value": kolmogorov_sf(lam)}


def jarque_bera_statistic(x) -> Dict[str, Any]:
    """Jarque-Bera statistic.

        JB = n/6 * (S^2 + (K - 3)^2 / 4),  p = P(chi2(2) > JB)

    S and K are population moments. The reported skewness and kurtosis
    extras are the bias-corrected G1 and G2 with their standard errors.
    """
    arr = as_vector(x, "sample")
    n = int(arr.size)
    if n < 4:
        raise InsufficientObservationsError("Jarque-Bera test requires at least 4 observations")

    s, k = population_moments(arr)
    jb = n / 6.0 * (s * s + (k - 3.0) ** 2 / 4.0)
    extras = {
        "skewness": sample_skewness(arr),
        "kurtosis": sample_excess_kurtosis(arr),
        "skewnessStdError": skewness_standard_error(n),
        "kurtosisStdError": kurtosis_standard_error(n),
    }
    return {"statistic": jb, "p_value": chi2_sf(jb, 2), "df": 2, "extras": extras}


def _shapiro_wilk_coefficients(n: int) -> np.ndarray:
    """Approximate Shapiro-Wilk weights a_1..a_n (antisymmetric)."""
    a = np.zeros(n)
    if n == 3:
        a[0], a[2] = -math.sqrt(0.5), math.sqrt(0.5)
        return a

    m = np.array([normal_ppf((i - 0.375) / (n + 0.25)) for i in range(1, n + 1)])
    mm = float(np.sum(m * m))
    u = 1.0 / math.sqrt(n)

    a_n = _poly(_SW_C1, u) + m[-1] / math.sqrt(mm)
    if n > 5:
        a_n1 = _poly(_SW_C2, u) + m[-2] / math.sqrt(mm)
        phi = (mm - 2.0 * m[-1] ** 2 - 2.0 * m[-2] ** 2) / (1.0 - 2.0 * a_n ** 2 - 2.0 * a_n1 ** 2)
        a[1:-1] = m[1:-1] / math.sqrt(phi)
        a[1], a[-2] = -a_n1, a_n1
    else:
        phi = (mm - 2.0 * m[-1] ** 2) / (1.0 - 2.0 * a_n ** 2)
        a[1:-1] = m[1:-1] / math.sqrt(phi)
    a[0], a[-1] = -a_n, a_n
    return a


def _shapiro_wilk_p_value(w: float, n: int) -> float:
    if n == 3:
        p = 6.0 / math.pi * (math.asin(math.sqrt(w)) - math.asin(math.sqrt(0.75)))
        return min(1.0, max(0.0, p))

    if w >= 1.0:
        return 1.0
    y = math.log(1.0 - w)
    if n <= 11:
        gamma = _poly(_SW_G, n)
        if y >= gamma:
            return 0.0
        y = -math.log(gamma - y)
        mu = _poly(_SW_C3, n)
        sigma = math.exp(_poly(_SW_C4, n))
    else:
        ln_n = math.log(n)
        mu = _poly(_SW_C5, ln_n)
        sigma = math.exp(_poly(_SW_C6, ln_n))
    return 1.0 - normal_cdf((y - mu) / sigma)


def shapiro_wilk_statistic(x) -> Dict[str, Any]:
    """Shapiro-Wilk W with Royston's normalizing transformation.

    Valid for 3 <= n <= 5000; larger samples are still computed but the
    p-value approximation is outside its calibrated range.
    """
    arr = np.sort(as_vector(x, "sample"))
    n = int(arr.size)
    if n < 3:
        raise InsufficientObservationsError("Shapiro-Wilk test requires at least 3 observations")
    if n > SW_MAX_OBSERVATIONS:
        logger.warning("Shapiro-Wilk p-value is approximate for n > %d (n=%d)", SW_MAX_OBSERVATIONS, n)

    ss = float(np.sum((arr - arr.mean()) ** 2))
    if ss <= 0.0:
        raise ZeroVarianceError("Sample has zero variance")

    a = _shapiro_wilk_coefficients(n)
    w = float(np.dot(a, arr)) ** 2 / ss
    w = min(w, 1.0)
    return {"statistic": w, "p_value": _shapiro_wilk_p_value(w, n)}


def kolmogorov_smirnov_test(x, alpha: float = DEFAULT_ALPHA) -> HypothesisTestResult:
    outcome = Outcome.capture(kolmogorov_smirnov_statistic, x)
    return HypothesisTestResult.from_outcome(KOLMOGOROV_SMIRNOV, outcome, alpha)


def jarque_bera_test(x, alpha: float = DEFAULT_ALPHA) -> HypothesisTestResult:
    outcome = Outcome.capture(jarque_bera_statistic, x)
    return HypothesisTestResult.from_outcome(JARQUE_BERA, outcome, alpha)


def shapiro_wilk_test(x, alpha: float = DEFAULT_ALPHA) -> HypothesisTestResult:
    outcome = Outcome.capture(shapiro_wilk_statistic, x)
    return HypothesisTestResult.from_outcome(SHAPIRO_WILK, outcome, alpha)
