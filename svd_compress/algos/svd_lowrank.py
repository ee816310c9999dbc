"""SVD-based low-rank approximation algorithms.

Implements a power-iteration SVD with deflation (the engine used for image
compression) and a LAPACK-backed truncated SVD used as a reference baseline.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional

import numpy as np
from scipy.linalg import svd as scipy_svd

from ..config import DEFAULT_MAX_ITERATIONS, EPSILON
from ..errors import InvalidDimensionsError
from .kernels import multiply, transpose
from .power_iteration import power_iteration

logger = logging.getLogger(__name__)


class SingularTriplet(NamedTuple):
    sigma: float
    u: np.ndarray
    v: np.ndarray


@dataclass(frozen=True)
class Decomposition:
    """Truncated SVD factors, ordered by decreasing singular value.

    U is (m x r), S is (r,), Vt is (r x n) with r <= min(rank, m, n).
    Unpacks like the plain `(U, S, Vt)` tuple returned by numpy.
    """

    U: np.ndarray
    S: np.ndarray
    Vt: np.ndarray

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter((self.U, self.S, self.Vt))

    def __len__(self) -> int:
        return len(self.S)

    @property
    def shape(self):
        return self.U.shape[0], self.Vt.shape[1]

    def triplets(self) -> Iterator[SingularTriplet]:
        for i in range(len(self.S)):
            yield SingularTriplet(float(self.S[i]), self.U[:, i], self.Vt[i, :])


def _as_matrix(A):
    A = np.asarray(A, dtype=float)
    if A.ndim != 2:
        raise InvalidDimensionsError(f"Expected a 2-D matrix, got shape {A.shape}")
    return A


def power_svd(A, rank, max_iterations=DEFAULT_MAX_ITERATIONS, rng=None):
    """
    Truncated SVD by power iteration with deflation.

    Each step runs power iteration on A_cur^T A_cur to get the dominant right
    singular vector v and eigenvalue lambda, sets sigma = sqrt(lambda) and
    u = A_cur v / sigma, then subtracts sigma * u v^T before looking for the
    next triplet. Stops early once lambda drops below 1e-10.

    Errors accumulate through the deflation chain, so later triplets are
    less accurate than the first few. That is acceptable for images.

    Args:
        A: (m x n) numpy array - input matrix
        rank: int - number of triplets requested, clipped to min(m, n)
        max_iterations: int - power iteration cap per triplet (default: 100)
        rng: None, int seed or numpy.random.Generator shared by all
             power iterations

    Returns:
        Decomposition with U (m x r), S (r,), Vt (r x n), r <= rank

    Raises:
        InvalidDimensionsError: If A is not 2-D
    """
    A = _as_matrix(A)
    m, n = A.shape
    rng = np.random.default_rng(rng)

    target = max(0, min(int(rank), m, n))

    us, sigmas, vs = [], [], []
    A_work = A

    for k in range(target):
        gram = multiply(transpose(A_work), A_work)
        pair = power_iteration(gram, max_iterations=max_iterations, rng=rng)

        if pair.eigenvalue < EPSILON:
            logger.debug("Early stop at triplet %d: eigenvalue %.3e below threshold", k, pair.eigenvalue)
            break

        sigma = np.sqrt(pair.eigenvalue)
        v = pair.eigenvector
        u = (A_work @ v) / sigma

        us.append(u)
        sigmas.append(sigma)
        vs.append(v)

        A_work = deflate(A_work, u, sigma, v)

    logger.debug("Extracted %d of %d requested triplets from %dx%d matrix", len(sigmas), rank, m, n)

    U = np.column_stack(us) if us else np.zeros((m, 0))
    S = np.asarray(sigmas, dtype=float)
    Vt = np.vstack(vs) if vs else np.zeros((0, n))
    return Decomposition(U, S, Vt)


def deflate(A, u, sigma, v):
    """
    Remove a singular triplet from a matrix.

    Computes A_deflated = A - sigma * u * v^T as a new array; A is left
    untouched.

    Args:
        A: (m x n) numpy array
        u: (m,) numpy array - left singular vector to remove
        sigma: float - singular value
        v: (n,) numpy array - right singular vector to remove

    Returns:
        A_deflated: (m x n) numpy array
    """
    return A - sigma * np.outer(u, v)


def reconstruct(U, S, Vt, rank: Optional[int] = None):
    """
    Rebuild the rank-k approximation sum_i S_i * U_i V_i^T.

    Args:
        U: (m x r) numpy array - left singular vectors as columns
        S: (r,) numpy array - singular values
        Vt: (r x n) numpy array - right singular vectors as rows
        rank: int - number of leading triplets to use; defaults to all and
              is clipped to len(S)

    Returns:
        A_approx: (m x n) numpy array (all zeros when no triplet is used)
    """
    U = np.asarray(U, dtype=float)
    S = np.asarray(S, dtype=float)
    Vt = np.asarray(Vt, dtype=float)

    k = len(S) if rank is None else max(0, min(int(rank), len(S)))

    return (U[:, :k] * S[:k]) @ Vt[:k, :]


def numpy_svd_lowrank(A, rank):
    """
    Low-rank approximation using LAPACK's SVD.

    The optimal truncated SVD (Eckart-Young-Mirsky). Used as the accuracy
    baseline for the power-iteration engine.

    Args:
        A: (m x n) numpy array - input matrix
        rank: int - desired rank, clipped to min(m, n)

    Returns:
        Decomposition with exactly min(rank, m, n) triplets

    Raises:
        ValueError: If rank < 1
    """
    A = _as_matrix(A)
    m, n = A.shape

    if rank < 1:
        raise ValueError(f"Rank must be at least 1, got {rank}")

    k = min(rank, m, n)

    U, S, Vt = scipy_svd(A, full_matrices=False)

    return Decomposition(U[:, :k], S[:k], Vt[:k, :])
