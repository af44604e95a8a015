"""stats_engine.core.statistics.goodness_of_fit

One-sample chi-square goodness-of-fit test on a categorical variable.

Categories are either the distinct valid values of the data, or every
integer in a specified [lower, upper] range (values are floored and those
outside the range are not counted). Expected counts are equal across
categories or proportional to user-supplied values, scaled to N.

    chi2 = sum_k (O_k - E_k)^2 / E_k,  df = k - 1
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import numpy as np

from .distributions import chi2_sf
from ..errors import InputError
from ..models.options import GoodnessOfFitOptions
from ..models.variable import MissingValueSpec, clean_values
from ..results.categorical import (
    INSUFFICIENT_EMPTY,
    INSUFFICIENT_SINGLE_CATEGORY,
    CategoryFrequencies,
    GoodnessOfFitResult,
)

logger = logging.getLogger(__name__)


def _expected_counts(n: int, k: int, options: GoodnessOfFitOptions) -> np.ndarray:
    if options.all_categories_equal:
        return np.full(k, n / k) if k else np.zeros(0)
    proportions = np.asarray(options.expected_values, dtype=float)
    if proportions.size != k:
        raise InputError(
            f"{proportions.size} expected values given for {k} categories"
        )
    return proportions / proportions.sum() * n


def chi_square_goodness_of_fit(
    data: Sequence[Any],
    options: Optional[GoodnessOfFitOptions] = None,
    missing: Optional[MissingValueSpec] = None,
) -> GoodnessOfFitResult:
    """Run the chi-square goodness-of-fit test.

    Args:
        data: raw case values
        options: range and expected-value settings
        missing: user-missing definition for the variable

    Returns:
        GoodnessOfFitResult; statistic, df and p-value are None when the
        data are insufficient (no counted cases or a single category)

    Raises:
        InputError: expected values do not match the category count
    """
    options = options or GoodnessOfFitOptions()
    values = clean_values(data, missing)

    if options.use_specified_range:
        floored = np.floor(values)
        counted = floored[(floored >= options.lower) & (floored <= options.upper)]
        categories = np.arange(options.lower, options.upper + 1, dtype=float)
    else:
        counted = values
        categories = np.unique(values)

    n = int(counted.size)
    k = int(categories.size)
    observed = [int(np.count_nonzero(counted == cat)) for cat in categories]

    if n == 0:
        # Expected counts are all zero, no proportions to validate yet.
        frequencies = CategoryFrequencies(
            categories=categories.tolist(),
            observed=observed,
            expected=[0.0] * k,
            n=0,
        )
        reasons = [INSUFFICIENT_EMPTY]
        if k == 1:
            reasons.append(INSUFFICIENT_SINGLE_CATEGORY)
        logger.info("Goodness of fit: no cases to count")
        return GoodnessOfFitResult.insufficient(frequencies, reasons, options.alpha)

    expected = _expected_counts(n, k, options)
    frequencies = CategoryFrequencies(
        categories=categories.tolist(),
        observed=observed,
        expected=expected.tolist(),
        n=n,
    )

    if k == 1:
        logger.info("Goodness of fit: single category %s", categories[0])
        return GoodnessOfFitResult.insufficient(
            frequencies, [INSUFFICIENT_SINGLE_CATEGORY], options.alpha
        )

    # Categories with no observations contribute E each.
    obs = np.asarray(observed, dtype=float)
    chi_square = float(np.sum((obs - expected) ** 2 / expected))
    df = k - 1

    return GoodnessOfFitResult(
        frequencies=frequencies,
        chi_square=chi_square,
        df=df,
        p_value=chi2_sf(chi_square, df),
        alpha=options.alpha,
    )
