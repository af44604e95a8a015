"""stats_engine.core.solver.matrix

Small dense-matrix helpers used by the OLS solver.

Inversion strategy:
- 1x1, 2x2, 3x3: closed form (determinant + adjugate)
- larger: Gauss-Jordan elimination with partial pivoting

A matrix is treated as singular when its determinant (closed-form case) or
any selected pivot (elimination case) is below SINGULAR_TOLERANCE in
absolute value. All functions return new arrays; inputs are never modified.
"""

from __future__ import annotations

import numpy as np

from ..errors import InputError, SingularMatrixError

SINGULAR_TOLERANCE = 1e-10


def _as_matrix(a, name: str) -> np.ndarray:
    arr = np.array(a, dtype=float, copy=True)
    if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InputError(f"{name} must be a non-empty 2D matrix, got shape {arr.shape}")
    return arr


def _as_square(a, name: str = "matrix") -> np.ndarray:
    arr = _as_matrix(a, name)
    if arr.shape[0] != arr.shape[1]:
        raise InputError(f"{name} must be square, got shape {arr.shape}")
    return arr


def transpose(m) -> np.ndarray:
    """Return the transpose of ``m`` as a new array."""
    return _as_matrix(m, "matrix").T.copy()


def multiply(a, b) -> np.ndarray:
    """Matrix product A @ B with shape checking."""
    A = _as_matrix(a, "A")
    B = _as_matrix(b, "B")
    if A.shape[1] != B.shape[0]:
        raise InputError(f"Cannot multiply {A.shape} by {B.shape}")
    return A @ B


def multiply_vector(a, v) -> np.ndarray:
    """Matrix-vector product A @ v with shape checking."""
    A = _as_matrix(a, "A")
    vec = np.array(v, dtype=float, copy=True).ravel()
    if A.shape[1] != vec.shape[0]:
        raise InputError(f"Cannot multiply {A.shape} matrix by vector of length {vec.shape[0]}")
    return A @ vec


def determinant(a) -> float:
    """Closed-form determinant for 1x1, 2x2 and 3x3 matrices."""
    A = _as_square(a)
    n = A.shape[0]
    if n == 1:
        return float(A[0, 0])
    if n == 2:
        return float(A[0, 0] * A[1, 1] - A[0, 1] * A[1, 0])
    if n == 3:
        return float(
            A[0, 0] * (A[1, 1] * A[2, 2] - A[1, 2] * A[2, 1])
            - A[0, 1] * (A[1, 0] * A[2, 2] - A[1, 2] * A[2, 0])
            + A[0, 2] * (A[1, 0] * A[2, 1] - A[1, 1] * A[2, 0])
        )
    raise InputError("Closed-form determinant is only available up to 3x3")


def _adjugate_3x3(A: np.ndarray) -> np.ndarray:
    return np.array([
        [
            A[1, 1] * A[2, 2] - A[1, 2] * A[2, 1],
            -(A[0, 1] * A[2, 2] - A[0, 2] * A[2, 1]),
            A[0, 1] * A[1, 2] - A[0, 2] * A[1, 1],
        ],
        [
            -(A[1, 0] * A[2, 2] - A[1, 2] * A[2, 0]),
            A[0, 0] * A[2, 2] - A[0, 2] * A[2, 0],
            -(A[0, 0] * A[1, 2] - A[0, 2] * A[1, 0]),
        ],
        [
            A[1, 0] * A[2, 1] - A[1, 1] * A[2, 0],
            -(A[0, 0] * A[2, 1] - A[0, 1] * A[2, 0]),
            A[0, 0] * A[1, 1] - A[0, 1] * A[1, 0],
        ],
    ], dtype=float)


def _gauss_jordan_inverse(A: np.ndarray, tol: float) -> np.ndarray:
    """Invert via Gauss-Jordan elimination on [A | I] with partial pivoting."""
    n = A.shape[0]
    aug = np.hstack([A, np.eye(n)])

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot_row, col]) < tol:
            raise SingularMatrixError("Matrix is singular and cannot be inverted")

        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]

        aug[col] /= aug[col, col]

        for row in range(n):
            if row != col:
                factor = aug[row, col]
                if factor != 0.0:
                    aug[row] -= factor * aug[col]

    return aug[:, n:].copy()


def invert(a, tol: float = SINGULAR_TOLERANCE) -> np.ndarray:
    """Invert a square matrix.

    Args:
        a: square matrix (array-like)
        tol: singularity tolerance for determinant / pivot magnitude

    Returns:
        A^{-1} as a new float array

    Raises:
        InputError: if ``a`` is not a non-empty square matrix
        SingularMatrixError: if ``a`` is singular within ``tol``
    """
    A = _as_square(a)
    n = A.shape[0]

    if n <= 3:
        det = determinant(A)
        if abs(det) < tol:
            raise SingularMatrixError("Matrix is singular and cannot be inverted")
        if n == 1:
            return np.array([[1.0 / det]])
        if n == 2:
            return np.array([
                [A[1, 1], -A[0, 1]],
                [-A[1, 0], A[0, 0]],
            ]) / det
        return _adjugate_3x3(A) / det

    return _gauss_jordan_inverse(A, tol)
