"""
Dense matrix helpers: products, determinant, inverse and linear solves.

Determinant, inverse and solve are written out as Gaussian elimination with
partial pivoting rather than delegated to numpy.linalg, so the accumulation
dtype can be chosen (float64 by default, longdouble on request).
"""

from typing import Union

import numpy as np

from ..errors import SingularMatrixError

ArrayLike = Union[np.ndarray, list]


def _as_matrix(a: ArrayLike, dtype=np.float64) -> np.ndarray:
    m = np.array(a, dtype=dtype)
    if m.ndim != 2:
        raise ValueError(f"Expected a 2D matrix, got shape {m.shape}")
    return m


def _as_square(a: ArrayLike, dtype=np.float64) -> np.ndarray:
    m = _as_matrix(a, dtype)
    if m.shape[0] != m.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {m.shape}")
    return m


def _pivot_threshold(m: np.ndarray, tol: float) -> float:
    # relative to the largest entry so scaling the matrix does not change the verdict
    return tol * np.abs(m).max() if m.size else 0.0


def zeros(rows: int, cols: int, dtype=np.float64) -> np.ndarray:
    """Create a rows x cols zero matrix."""
    return np.zeros((rows, cols), dtype=dtype)


def identity(n: int, dtype=np.float64) -> np.ndarray:
    """Create an n x n identity matrix."""
    return np.eye(n, dtype=dtype)


def matmul(a: ArrayLike, b: ArrayLike, dtype=np.float64) -> np.ndarray:
    """Multiply a (n x m) by b (m x k) -> n x k."""
    a = _as_matrix(a, dtype)
    b = _as_matrix(b, dtype)
    if a.shape[1] != b.shape[0]:
        raise ValueError(f"Cannot multiply shapes {a.shape} and {b.shape}")
    return a @ b


def determinant(a: ArrayLike, dtype=np.float64):
    """
    Determinant by elimination to upper-triangular form.

    Each row swap flips the sign; the result is the signed product of the
    pivots. A zero pivot column means the matrix is singular and 0 is
    returned (no exception).
    """
    m = _as_square(a, dtype)
    n = m.shape[0]
    det = m.dtype.type(1.0)

    for col in range(n):
        pivot = col + int(np.argmax(np.abs(m[col:, col])))
        if m[pivot, col] == 0:
            return m.dtype.type(0.0)
        if pivot != col:
            m[[col, pivot]] = m[[pivot, col]]
            det = -det
        det *= m[col, col]
        factors = m[col + 1:, col] / m[col, col]
        m[col + 1:, col:] -= np.outer(factors, m[col, col:])

    return det


def inverse(a: ArrayLike, tol: float = 1e-12, dtype=np.float64) -> np.ndarray:
    """
    Inverse by Gauss-Jordan elimination on [A | I].

    Raises
    ------
    SingularMatrixError
        If a pivot is below ``tol`` times the largest entry of ``a``.
    """
    m = _as_square(a, dtype)
    n = m.shape[0]
    threshold = _pivot_threshold(m, tol)
    aug = np.hstack([m, identity(n, dtype=m.dtype)])

    for col in range(n):
        pivot = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot, col]) <= threshold:
            raise SingularMatrixError(
                f"Matrix is singular (pivot {aug[pivot, col]!r} in column {col})",
                pivot=float(aug[pivot, col]),
            )
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]
        aug[col] /= aug[col, col]

        others = np.arange(n) != col
        aug[others] -= np.outer(aug[others, col], aug[col])

    return aug[:, n:]


def solve(a: ArrayLike, b: ArrayLike, tol: float = 1e-12, dtype=np.float64) -> np.ndarray:
    """
    Solve ``a @ x = b`` by forward elimination and back substitution.

    ``b`` may be a vector (n,) or a matrix (n, k); ``x`` has the same shape.
    """
    m = _as_square(a, dtype)
    rhs = np.array(b, dtype=dtype)
    n = m.shape[0]
    if rhs.ndim not in (1, 2) or rhs.shape[0] != n:
        raise ValueError(f"Right-hand side shape {rhs.shape} does not match matrix {m.shape}")

    vector_rhs = rhs.ndim == 1
    if vector_rhs:
        rhs = rhs[:, np.newaxis]
    threshold = _pivot_threshold(m, tol)

    for col in range(n):
        pivot = col + int(np.argmax(np.abs(m[col:, col])))
        if abs(m[pivot, col]) <= threshold:
            raise SingularMatrixError(
                f"System is singular (pivot {m[pivot, col]!r} in column {col})",
                pivot=float(m[pivot, col]),
            )
        if pivot != col:
            m[[col, pivot]] = m[[pivot, col]]
            rhs[[col, pivot]] = rhs[[pivot, col]]
        factors = m[col + 1:, col] / m[col, col]
        m[col + 1:, col:] -= np.outer(factors, m[col, col:])
        rhs[col + 1:] -= np.outer(factors, rhs[col])

    x = np.zeros_like(rhs)
    for row in range(n - 1, -1, -1):
        x[row] = (rhs[row] - m[row, row + 1:] @ x[row + 1:]) / m[row, row]

    return x[:, 0] if vector_rhs else x
