"""Power iteration for the dominant eigenpair of a symmetric PSD matrix."""

import logging
from typing import NamedTuple

import numpy as np

from ..config import DEFAULT_MAX_ITERATIONS, EPSILON
from ..errors import InvalidDimensionsError
from .kernels import normalize

logger = logging.getLogger(__name__)


class EigenPair(NamedTuple):
    """Dominant eigenvalue estimate and its eigenvector."""

    eigenvalue: float
    eigenvector: np.ndarray
    iterations: int
    converged: bool


def random_unit_vector(n, rng=None):
    """
    Draw a normalized starting vector with entries uniform in [-0.5, 0.5).

    Args:
        n: int - vector length
        rng: None, int seed or numpy.random.Generator

    Returns:
        v: (n,) numpy array with unit L2 norm
    """
    rng = np.random.default_rng(rng)
    return normalize(rng.random(n) - 0.5)


def power_iteration(M, max_iterations=DEFAULT_MAX_ITERATIONS, rng=None, tol=EPSILON):
    """
    Dominant eigenpair of M by repeated multiplication.

    The loop stops as soon as no component of the normalized iterate moves by
    more than `tol`, or after `max_iterations` steps. Running out of
    iterations is not an error: the current iterate is returned and
    `converged` is False.

    Args:
        M: (n x n) symmetric positive-semidefinite numpy array (e.g. A^T A)
        max_iterations: int - iteration cap (default: 100)
        rng: None, int seed or numpy.random.Generator for the start vector
        tol: float - per-component convergence threshold (default: 1e-10)

    Returns:
        EigenPair with |v^T M v| as the eigenvalue

    Raises:
        InvalidDimensionsError: If M is not a square 2-D matrix
    """
    M = np.asarray(M, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise InvalidDimensionsError(f"power_iteration expects a square matrix, got {M.shape}")

    n = M.shape[0]
    v = random_unit_vector(n, rng)

    converged = False
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        w = normalize(M @ v)

        converged = bool(np.all(np.abs(w - v) <= tol))
        v = w
        if converged:
            break

    if not converged:
        logger.debug("Power iteration stopped after %d iterations without converging", iterations)

    # Rayleigh quotient
    eigenvalue = abs(float(v @ (M @ v)))

    return EigenPair(eigenvalue, v, iterations, converged)
