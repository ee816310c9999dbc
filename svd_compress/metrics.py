"""Storage and accuracy metrics for rank-k approximations."""

from typing import Tuple

import numpy as np


def compression_ratio(width: int, height: int, k: int, is_grayscale: bool) -> float:
    """
    Original-to-compressed size ratio for rank-k storage.

    Each channel stores k singular values plus k left (height) and k right
    (width) vectors, so the compressed size is k * (width + height + 1) per
    channel against width * height samples.

    Raises:
        ValueError: If k < 1
    """
    if k < 1:
        raise ValueError(f"Rank must be at least 1, got {k}")

    channels = 1 if is_grayscale else 3
    original_size = width * height * channels
    compressed_size = k * (width + height + 1) * channels
    return original_size / compressed_size


def compute_errors(A_orig: np.ndarray, A_approx: np.ndarray) -> Tuple[float, float]:
    """Compute relative Frobenius and spectral (2-norm) errors.

    The errors are computed as:
        ||A - Ak|| / ||A||
    Images of shape (H, W, C) are flattened to H x (W*C) first.
    """
    A_mat = _as_2d(A_orig)
    Ak_mat = _as_2d(A_approx)

    diff = A_mat - Ak_mat

    frob_orig = np.linalg.norm(A_mat, "fro")
    spec_orig = np.linalg.norm(A_mat, 2)

    frob_err = np.linalg.norm(diff, "fro") / frob_orig if frob_orig > 0 else 0.0
    spec_err = np.linalg.norm(diff, 2) / spec_orig if spec_orig > 0 else 0.0

    return float(frob_err), float(spec_err)


def compute_memory_usage(shape: Tuple[int, int], rank: int, channels: int = 1) -> Tuple[float, float]:
    """Memory for a float64 rank-k factorization vs the full matrix.

    Args:
        shape: (m, n) matrix dimensions
        rank: Rank k for the approximation
        channels: number of independently factorized channels

    Returns:
        Tuple of (lowrank_memory_mb, full_memory_mb)
    """
    m, n = shape

    # U (m x k) + S (k) + Vt (k x n)
    lowrank_bytes = (m * rank + rank + rank * n) * channels * 8
    full_bytes = m * n * channels * 8

    return lowrank_bytes / (1024**2), full_bytes / (1024**2)


def _as_2d(arr: np.ndarray) -> np.ndarray:
    arr = np.asarray(arr, dtype=float)
    if arr.ndim == 2:
        return arr
    elif arr.ndim == 3:
        h, w, c = arr.shape
        return arr.reshape(h, w * c)
    else:
        raise ValueError(f"Unsupported array shape: {arr.shape}")
