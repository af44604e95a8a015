"""stats_engine.core.solver

Dense linear algebra and the closed-form OLS solver.
"""

from .matrix import (
    SINGULAR_TOLERANCE,
    transpose,
    multiply,
    multiply_vector,
    determinant,
    invert,
)
from .ols import RegressionModel, fit_ols

__all__ = [
    "SINGULAR_TOLERANCE",
    "transpose",
    "multiply",
    "multiply_vector",
    "determinant",
    "invert",
    "RegressionModel",
    "fit_ols",
]
