"""stats_engine.core.solver.ols

Closed-form ordinary least squares with an implicit intercept.

    beta = (X^T X)^{-1} X^T y

where X is the design matrix with a leading column of ones. The model is a
frozen value object; it is created per request and never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from ..errors import InputError, SingularMatrixError, UnderdeterminedError
from .matrix import SINGULAR_TOLERANCE, invert, multiply, multiply_vector, transpose


@dataclass(frozen=True)
class RegressionModel:
    """
    Result of an OLS fit.

    Attributes:
        coefficients: beta vector, intercept first
        fitted: fitted values y_hat
        residuals: y - y_hat
        sse: sum of squared residuals
        sst: total sum of squares about mean(y)
        r_squared: 1 - SSE/SST (NaN when SST is zero)
        adjusted_r_squared: 1 - (1 - R^2)(n - 1)/(n - p - 1) (NaN when undefined)
        n_observations: number of cases n
        n_predictors: number of predictors p, excluding the intercept
        design: design matrix including the intercept column
    """

    coefficients: np.ndarray
    fitted: np.ndarray
    residuals: np.ndarray
    sse: float
    sst: float
    r_squared: float
    adjusted_r_squared: float
    n_observations: int
    n_predictors: int
    design: np.ndarray

    @property
    def n_coefficients(self) -> int:
        """Number of estimated coefficients (predictors + intercept)."""
        return self.n_predictors + 1

    @property
    def residual_df(self) -> int:
        return self.n_observations - self.n_coefficients

    def to_dict(self) -> Dict[str, Any]:
        """Serialize summary values (no per-case arrays)."""
        return {
            "coefficients": [float(b) for b in self.coefficients],
            "sse": self.sse,
            "sst": self.sst,
            "r_squared": None if math.isnan(self.r_squared) else self.r_squared,
            "adjusted_r_squared": (
                None if math.isnan(self.adjusted_r_squared) else self.adjusted_r_squared
            ),
            "n_observations": self.n_observations,
            "n_predictors": self.n_predictors,
        }


def as_design_columns(X) -> np.ndarray:
    """Coerce predictors to an (n, p) float matrix; a flat vector becomes one column."""
    arr = np.array(X, dtype=float, copy=True)
    if arr.ndim == 1:
        arr = arr[:, None]
    if arr.ndim != 2:
        raise InputError(f"Predictors must be a vector or a 2D matrix, got {arr.ndim} dimensions")
    return arr


def fit_ols(y, X) -> RegressionModel:
    """Fit y on X with an intercept.

    Args:
        y: dependent values (length n)
        X: predictors, observation-major (n x p) or a single flat predictor

    Returns:
        RegressionModel

    Raises:
        InputError: empty input or length mismatch
        UnderdeterminedError: p >= n
        SingularMatrixError: X^T X is singular
    """
    y_arr = np.array(y, dtype=float, copy=True).ravel()
    x_mat = as_design_columns(X)
    n = int(y_arr.shape[0])

    if n == 0 or x_mat.shape[0] == 0:
        raise InputError("Regression requires at least one observation")
    if x_mat.shape[0] != n:
        raise InputError(
            f"Dependent has {n} values but predictors have {x_mat.shape[0]} rows"
        )

    p = int(x_mat.shape[1])
    if p >= n:
        raise UnderdeterminedError(
            f"More variables ({p}) than observations ({n}); cannot perform regression"
        )

    design = np.hstack([np.ones((n, 1)), x_mat])
    design_t = transpose(design)
    xtx = multiply(design_t, design)

    # Cheap pre-check before inversion: a vanishing diagonal means a zero column.
    if np.any(np.abs(np.diag(xtx)) < SINGULAR_TOLERANCE):
        raise SingularMatrixError(
            "Near-singular matrix detected. Check for multicollinearity in your data."
        )

    xtx_inv = invert(xtx)
    beta = multiply_vector(xtx_inv, multiply_vector(design_t, y_arr))

    fitted = design @ beta
    residuals = y_arr - fitted
    sse = float(np.sum(residuals ** 2))
    sst = float(np.sum((y_arr - y_arr.mean()) ** 2))

    r2 = 1.0 - sse / sst if sst > 0.0 else math.nan
    denom = n - p - 1
    adj_r2 = 1.0 - (1.0 - r2) * (n - 1) / denom if denom > 0 else math.nan

    return RegressionModel(
        coefficients=beta,
        fitted=fitted,
        residuals=residuals,
        sse=sse,
        sst=sst,
        r_squared=float(r2),
        adjusted_r_squared=float(adj_r2),
        n_observations=n,
        n_predictors=p,
        design=design,
    )
