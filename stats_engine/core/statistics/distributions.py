"""stats_engine.core.statistics.distributions

Distribution helpers (no SciPy).

Implemented:
- Standard normal CDF via the Abramowitz-Stegun 26.2.17 rational approximation
- Standard normal PPF via stdlib ``statistics.NormalDist``
- Gamma function: exact for integers and half-integers, Stirling series otherwise
- Beta function and the regularized incomplete beta I_x(a, b)
- Chi-square CDF/SF via the regularized incomplete gamma
- F CDF/SF via the incomplete beta
- Kolmogorov limiting distribution (upper tail)

Chi-square:
  If X ~ ChiSquare(df), then X = 2 * Gamma(a=df/2, scale=1).
  CDF is regularized lower incomplete gamma P(a, x/2).

F:
  If X ~ F(d1, d2), P(X <= x) = I_{d1 x / (d1 x + d2)}(d1/2, d2/2).

References (algorithms):
- Abramowitz & Stegun, Handbook of Mathematical Functions, 26.2.17
- Numerical Recipes / Cephes style continued fractions (modified Lentz)

Accuracy target is an absolute error well below 1e-3 for test statistics
in the range 0..50, which is what the residual diagnostics need to make
accept/reject decisions.
"""

from __future__ import annotations

import math
from statistics import NormalDist
from typing import Tuple


# ----------------------------
# Normal
# ----------------------------

_NORMAL = NormalDist()

_AS_P = 0.2316419
_AS_B = (0.319381530, -0.356563782, 1.781477937, -1.821255978, 1.330274429)
_INV_SQRT_2PI = 0.3989422804014327


def normal_cdf(z: float) -> float:
    """Standard normal CDF (A&S 26.2.17, |error| < 7.5e-8)."""
    if z < -10.0:
        return 0.0
    if z > 10.0:
        return 1.0
    t = 1.0 / (1.0 + _AS_P * abs(z))
    b1, b2, b3, b4, b5 = _AS_B
    poly = t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))
    tail = _INV_SQRT_2PI * math.exp(-0.5 * z * z) * poly
    return 1.0 - tail if z >= 0.0 else tail


def normal_ppf(p: float) -> float:
    """Standard normal quantile (inverse CDF).

    Args:
        p: probability in (0, 1)

    Returns:
        z such that P(Z <= z) = p
    """
    if not (0.0 < p < 1.0):
        raise ValueError("p must be in (0,1)")
    return float(_NORMAL.inv_cdf(p))


# ----------------------------
# Gamma / Beta
# ----------------------------

_HALF_LOG_2PI = 0.5 * math.log(2.0 * math.pi)


def _stirling_log_gamma(z: float) -> float:
    """log Gamma(z) by the Stirling series; accurate for z >= 10."""
    z2 = z * z
    series = 1.0 / (12.0 * z) - 1.0 / (360.0 * z * z2) + 1.0 / (1260.0 * z * z2 * z2)
    return (z - 0.5) * math.log(z) - z + _HALF_LOG_2PI + series


def gamma_function(z: float) -> float:
    """Gamma function.

    Exact products for positive integers and half-integers; Stirling series
    with an upward recurrence shift for other arguments, and the reflection
    formula below 0.5. Non-positive integers are poles and return inf.
    """
    if z <= 0.0 and float(z).is_integer():
        return math.inf

    if z > 0.0 and float(z).is_integer():
        if z > 171.0:
            return math.inf
        return float(math.factorial(int(z) - 1))

    if z > 0.0 and float(2.0 * z).is_integer():
        if z > 171.0:
            return math.inf
        # Gamma(n + 1/2) = sqrt(pi) * prod_{k=0}^{n-1} (k + 1/2)
        result = math.sqrt(math.pi)
        x = 0.5
        while x < z:
            result *= x
            x += 1.0
        return result

    if z < 0.5:
        return math.pi / (math.sin(math.pi * z) * gamma_function(1.0 - z))

    shift = 1.0
    x = z
    while x < 10.0:
        shift *= x
        x += 1.0
    try:
        return math.exp(_stirling_log_gamma(x)) / shift
    except OverflowError:
        return math.inf


def beta_function(a: float, b: float) -> float:
    """Beta function B(a, b) = Gamma(a) Gamma(b) / Gamma(a + b)."""
    if a <= 0.0 or b <= 0.0:
        raise ValueError("a and b must be positive")
    return math.exp(math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b))


_DEF_EPS = 1e-14
_DEF_MAX_IT = 2000
_TINY = 1e-300


def _beta_continued_fraction(a: float, b: float, x: float,
                             eps: float = _DEF_EPS, max_it: int = _DEF_MAX_IT) -> float:
    """Continued fraction for I_x(a, b) (modified Lentz)."""
    qab = a + b
    qap = a + 1.0
    qam = a - 1.0
    c = 1.0
    d = 1.0 - qab * x / qap
    if abs(d) < _TINY:
        d = _TINY
    d = 1.0 / d
    h = d

    for m in range(1, max_it + 1):
        m2 = 2 * m
        # Even step
        aa = m * (b - m) * x / ((qam + m2) * (a + m2))
        d = 1.0 + aa * d
        if abs(d) < _TINY:
            d = _TINY
        c = 1.0 + aa / c
        if abs(c) < _TINY:
            c = _TINY
        d = 1.0 / d
        h *= d * c
        # Odd step
        aa = -(a + m) * (qab + m) * x / ((a + m2) * (qap + m2))
        d = 1.0 + aa * d
        if abs(d) < _TINY:
            d = _TINY
        c = 1.0 + aa / c
        if abs(c) < _TINY:
            c = _TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < eps:
            break

    return h


def incomplete_beta(x: float, a: float, b: float) -> float:
    """Regularized incomplete beta I_x(a, b).

    Args:
        x: upper integration limit in [0, 1]
        a, b: shape parameters (> 0)

    Returns:
        I_x(a, b) in [0, 1]
    """
    if a <= 0.0 or b <= 0.0:
        raise ValueError("a and b must be positive")
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0

    log_front = (
        math.lgamma(a + b) - math.lgamma(a) - math.lgamma(b)
        + a * math.log(x) + b * math.log1p(-x)
    )
    front = math.exp(log_front)

    # The continued fraction converges fastest below the mean; use symmetry above it.
    if x < (a + 1.0) / (a + b + 2.0):
        value = front * _beta_continued_fraction(a, b, x) / a
    else:
        value = 1.0 - front * _beta_continued_fraction(b, a, 1.0 - x) / b

    return min(1.0, max(0.0, value))


# ----------------------------
# Incomplete gamma (regularized)
# ----------------------------

def _gammainc_reg(a: float, x: float, eps: float = _DEF_EPS, max_it: int = _DEF_MAX_IT) -> Tuple[float, float]:
    """Regularized incomplete gamma pair (P(a, x), Q(a, x)).

    Uses:
      - series expansion for x < a+1 (P computed directly)
      - continued fraction for x >= a+1 (Q computed directly)

    Computing the smaller tail directly keeps upper-tail p-values accurate
    when they are tiny.
    """
    if a <= 0.0:
        raise ValueError("a must be positive")
    if x <= 0.0:
        return 0.0, 1.0

    # Common factor e^{-x} x^a / Gamma(a), in logs for stability.
    log_front = -x + a * math.log(x) - math.lgamma(a)

    if x < a + 1.0:
        ap = a
        summ = 1.0 / a
        delt = summ
        for _ in range(max_it):
            ap += 1.0
            delt *= x / ap
            summ += delt
            if abs(delt) < abs(summ) * eps:
                break
        p = min(1.0, max(0.0, summ * math.exp(log_front)))
        return p, 1.0 - p

    b = x + 1.0 - a
    c = 1.0 / _TINY
    d = 1.0 / max(b, _TINY)
    h = d

    for i in range(1, max_it + 1):
        an = -float(i) * (float(i) - a)
        b += 2.0
        d = an * d + b
        if abs(d) < _TINY:
            d = _TINY
        c = b + an / c
        if abs(c) < _TINY:
            c = _TINY
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < eps:
            break

    q = min(1.0, max(0.0, h * math.exp(log_front)))
    return 1.0 - q, q


def gammainc_lower_reg(a: float, x: float) -> float:
    """Regularized lower incomplete gamma P(a, x) in [0, 1]."""
    return _gammainc_reg(a, x)[0]


# ----------------------------
# Chi-square
# ----------------------------


def chi2_cdf(x: float, df: float) -> float:
    """CDF of chi-square distribution.

    Args:
        x: value (>=0)
        df: degrees of freedom (>0)

    Returns:
        P(X <= x)
    """
    if df <= 0:
        raise ValueError("df must be positive")
    if x <= 0.0:
        return 0.0
    return _gammainc_reg(0.5 * float(df), 0.5 * float(x))[0]


def chi2_sf(x: float, df: float) -> float:
    """Upper tail P(X > x) of the chi-square distribution."""
    if df <= 0:
        raise ValueError("df must be positive")
    if x <= 0.0:
        return 1.0
    return _gammainc_reg(0.5 * float(df), 0.5 * float(x))[1]


# ----------------------------
# F
# ----------------------------


def f_cdf(x: float, d1: float, d2: float) -> float:
    """CDF of the F distribution with (d1, d2) degrees of freedom."""
    if d1 <= 0 or d2 <= 0:
        raise ValueError("degrees of freedom must be positive")
    if x <= 0.0:
        return 0.0
    if math.isinf(x):
        return 1.0
    u = d1 * x / (d1 * x + d2)
    return incomplete_beta(u, 0.5 * d1, 0.5 * d2)


def f_sf(x: float, d1: float, d2: float) -> float:
    """Upper tail P(X > x) of the F distribution."""
    if d1 <= 0 or d2 <= 0:
        raise ValueError("degrees of freedom must be positive")
    if x <= 0.0:
        return 1.0
    if math.isinf(x):
        return 0.0
    # 1 - I_u(d1/2, d2/2) = I_{1-u}(d2/2, d1/2)
    w = d2 / (d2 + d1 * x)
    return incomplete_beta(w, 0.5 * d2, 0.5 * d1)


# ----------------------------
# Kolmogorov
# ----------------------------

_KS_TERM_EPS = 1e-10
_KS_MAX_TERMS = 100


def kolmogorov_sf(lam: float) -> float:
    """Upper tail of the Kolmogorov limiting distribution.

        Q(lam) = 2 * sum_{k>=1} (-1)^(k-1) exp(-2 k^2 lam^2)

    Terms are added until one falls below 1e-10 in magnitude or 100 terms
    have been used. A series that fails to converge (very small lam) means
    the statistic carries no evidence, so 1.0 is returned.
    """
    if lam <= 0.0:
        return 1.0

    total = 0.0
    sign = 1.0
    for k in range(1, _KS_MAX_TERMS + 1):
        term = sign * math.exp(-2.0 * k * k * lam * lam)
        total += term
        if abs(term) < _KS_TERM_EPS:
            return min(1.0, max(0.0, 2.0 * total))
        sign = -sign

    return 1.0
