"""Dense matrix and vector kernels used by the power-iteration SVD.

Thin wrappers over NumPy that enforce the shape contracts the solver relies
on. None of them mutate their inputs.
"""

import numpy as np

from ..config import EPSILON
from ..errors import InvalidDimensionsError


def multiply(A, B):
    """
    Matrix product A @ B.

    Args:
        A: (m x p) numpy array
        B: (p x n) numpy array

    Returns:
        C: (m x n) numpy array

    Raises:
        InvalidDimensionsError: If A or B is not 2-D or the inner
            dimensions differ
    """
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)

    if A.ndim != 2 or B.ndim != 2:
        raise InvalidDimensionsError(
            f"multiply expects 2-D matrices, got shapes {A.shape} and {B.shape}"
        )
    if A.shape[1] != B.shape[0]:
        raise InvalidDimensionsError(
            f"Inner dimensions do not match: {A.shape} @ {B.shape}"
        )

    return A @ B


def transpose(A):
    """Return a transposed copy of a 2-D matrix."""
    A = np.asarray(A, dtype=float)
    if A.ndim != 2:
        raise InvalidDimensionsError(f"transpose expects a 2-D matrix, got {A.shape}")
    return A.T.copy()


def norm(v):
    """Euclidean (L2) norm of a vector."""
    v = np.asarray(v, dtype=float)
    return float(np.sqrt(np.sum(v * v)))


def normalize(v, eps=EPSILON):
    """
    Scale a vector to unit length.

    Vectors whose norm is at most `eps` are returned unchanged instead of
    being divided by a near-zero value.
    """
    v = np.asarray(v, dtype=float)
    v_norm = norm(v)
    if v_norm <= eps:
        return v
    return v / v_norm
