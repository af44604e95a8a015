"""stats_engine.core.statistics.descriptive

Moment statistics shared by the diagnostic tests.

Two estimator families are kept apart on purpose:
- population (biased) moments: divide by n, used inside the Jarque-Bera
  statistic
- bias-corrected sample skewness G1 and excess kurtosis G2: reported only
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from ..errors import InputError, InsufficientObservationsError, ZeroVarianceError


def as_vector(x, name: str = "data") -> np.ndarray:
    """Copy ``x`` into a 1D float array."""
    arr = np.array(x, dtype=float, copy=True).ravel()
    if arr.size == 0:
        raise InputError(f"{name} is empty")
    return arr


def population_moments(x) -> Tuple[float, float]:
    """Population skewness and (non-excess) kurtosis, divisor n.

    Returns:
        (skewness, kurtosis), where kurtosis is 3 for a normal sample
    """
    arr = as_vector(x)
    sd = float(np.std(arr))
    if sd <= 0.0:
        raise ZeroVarianceError("Data have zero variance")
    z = (arr - arr.mean()) / sd
    return float(np.mean(z ** 3)), float(np.mean(z ** 4))


def sample_skewness(x) -> float:
    """Bias-corrected sample skewness G1 = n M3 / ((n-1)(n-2) s^3)."""
    arr = as_vector(x)
    n = arr.size
    if n < 3:
        raise InsufficientObservationsError("Skewness requires at least 3 observations")
    dev = arr - arr.mean()
    s = math.sqrt(float(np.sum(dev ** 2)) / (n - 1))
    if s <= 0.0:
        raise ZeroVarianceError("Data have zero variance")
    m3 = float(np.sum(dev ** 3))
    return n * m3 / ((n - 1) * (n - 2) * s ** 3)


def sample_excess_kurtosis(x) -> float:
    """Bias-corrected excess kurtosis G2.

        G2 = (n (n+1) M4 - 3 M2^2 (n-1)) / ((n-1)(n-2)(n-3) s^4)
    """
    arr = as_vector(x)
    n = arr.size
    if n < 4:
        raise InsufficientObservationsError("Kurtosis requires at least 4 observations")
    dev = arr - arr.mean()
    m2 = float(np.sum(dev ** 2))
    m4 = float(np.sum(dev ** 4))
    s = math.sqrt(m2 / (n - 1))
    if s <= 0.0:
        raise ZeroVarianceError("Data have zero variance")
    numerator = n * (n + 1) * m4 - 3.0 * m2 * m2 * (n - 1)
    return numerator / ((n - 1) * (n - 2) * (n - 3) * s ** 4)


def skewness_standard_error(n: int) -> float:
    if n < 3:
        raise InsufficientObservationsError("Skewness SE requires at least 3 observations")
    return math.sqrt((6.0 * n * (n - 1)) / ((n - 2) * (n + 1) * (n + 3)))


def kurtosis_standard_error(n: int) -> float:
    if n < 4:
        raise InsufficientObservationsError("Kurtosis SE requires at least 4 observations")
    se_skew = skewness_standard_error(n)
    return math.sqrt(4.0 * (n * n - 1) * se_skew ** 2 / ((n - 3) * (n + 5)))
