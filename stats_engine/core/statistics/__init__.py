"""Statistics for the engine.

This package contains the statistical routines behind the analyses:
- Distribution functions (normal, gamma, beta, chi-square, F, Kolmogorov)
- Moment statistics (skewness, kurtosis and their standard errors)
- Residual homoscedasticity and normality tests
- Weighted percentiles and the chi-square goodness-of-fit test

No SciPy dependency is required.
"""

from .distributions import (
    normal_cdf,
    normal_ppf,
    gamma_function,
    beta_function,
    incomplete_beta,
    gammainc_lower_reg,
    chi2_cdf,
    chi2_sf,
    f_cdf,
    f_sf,
    kolmogorov_sf,
)
from .descriptive import (
    population_moments,
    sample_skewness,
    sample_excess_kurtosis,
    skewness_standard_error,
    kurtosis_standard_error,
)
from .homoscedasticity import breusch_pagan_test, white_test, goldfeld_quandt_test
from .normality import kolmogorov_smirnov_test, jarque_bera_test, shapiro_wilk_test
from .frequency import FrequencyCalculator, FrequencyDistribution, build_distribution
from .goodness_of_fit import chi_square_goodness_of_fit

__all__ = [
    "normal_cdf",
    "normal_ppf",
    "gamma_function",
    "beta_function",
    "incomplete_beta",
    "gammainc_lower_reg",
    "chi2_cdf",
    "chi2_sf",
    "f_cdf",
    "f_sf",
    "kolmogorov_sf",
    "population_moments",
    "sample_skewness",
    "sample_excess_kurtosis",
    "skewness_standard_error",
    "kurtosis_standard_error",
    "breusch_pagan_test",
    "white_test",
    "goldfeld_quandt_test",
    "kolmogorov_smirnov_test",
    "jarque_bera_test",
    "shapiro_wilk_test",
    "FrequencyCalculator",
    "FrequencyDistribution",
    "build_distribution",
    "chi_square_goodness_of_fit",
]
