"""Matrix generators for testing the SVD engine.

This module provides matrices with controlled properties for tests and
benchmarks: random matrices, low-rank matrices with noise, matrices with a
prescribed spectrum, and channels loaded from images.
"""

from typing import Dict, Optional, Sequence

import numpy as np

from .channels import extract_channels, is_grayscale
from .image_io import load_image


class MatrixGenerator:
    """Generate test matrices with controlled properties."""

    @staticmethod
    def random_matrix(m: int, n: int, seed: int = 42) -> np.ndarray:
        """
        Generate random matrix with entries from N(0, 1).

        Args:
            m: number of rows
            n: number of columns
            seed: random seed for reproducibility
        """
        rng = np.random.default_rng(seed)
        return rng.standard_normal((m, n))

    @staticmethod
    def lowrank_with_noise(
        m: int,
        n: int,
        true_rank: int,
        noise_level: float,
        seed: int = 42
    ) -> np.ndarray:
        """
        Generate low-rank matrix with additive Gaussian noise.

        Creates matrix: A = U @ V + noise
        where U is (m x true_rank), V is (true_rank x n), both scaled by
        1/sqrt(true_rank) so that E[||UV||_F^2] ≈ mn.

        Args:
            m: number of rows
            n: number of columns
            true_rank: true rank of underlying signal
            noise_level: standard deviation of additive noise
                        (0.0 = no noise, 0.1 = light noise, 1.0 = heavy noise)
            seed: random seed for reproducibility

        Raises:
            ValueError: if true_rank is not in [1, min(m, n)]
            ValueError: if noise_level < 0
        """
        if true_rank < 1:
            raise ValueError(f"true_rank must be at least 1, got {true_rank}")
        if true_rank > min(m, n):
            raise ValueError(
                f"true_rank ({true_rank}) must not exceed min(m, n) = {min(m, n)}"
            )
        if noise_level < 0:
            raise ValueError(f"noise_level must be non-negative, got {noise_level}")

        rng = np.random.default_rng(seed)

        scale = 1.0 / np.sqrt(true_rank)
        U = rng.standard_normal((m, true_rank)) * scale
        V = rng.standard_normal((true_rank, n)) * scale

        A = U @ V
        if noise_level > 0:
            A = A + rng.standard_normal((m, n)) * noise_level

        return A

    @staticmethod
    def with_spectrum(m: int, n: int, singular_values: Sequence[float], seed: int = 42) -> np.ndarray:
        """
        Build A = U diag(S) V^T with random orthonormal U and V.

        The result has exactly the given singular values, which makes it a
        convenient exactly-low-rank input.

        Raises:
            ValueError: if more singular values are given than min(m, n)
        """
        S = np.asarray(singular_values, dtype=float)
        r = len(S)
        if r > min(m, n):
            raise ValueError(f"Got {r} singular values for a {m}x{n} matrix")

        rng = np.random.default_rng(seed)
        U, _ = np.linalg.qr(rng.standard_normal((m, r)))
        V, _ = np.linalg.qr(rng.standard_normal((n, r)))

        return (U * S) @ V.T

    @staticmethod
    def from_image(
        filepath: str,
        channel: int = 0,
        max_size: Optional[tuple] = None,
    ) -> np.ndarray:
        """
        Load one channel of an image file as a (height x width) matrix.

        Args:
            filepath: path to image file (supports PNG, JPG, etc.)
            channel: 0, 1 or 2 for R, G or B; grayscale images only have 0
            max_size: optional (max_width, max_height) for downscaling

        Returns:
            A: matrix with pixel values in [0, 255] (not normalized)

        Raises:
            FileNotFoundError: if image file doesn't exist
            ValueError: if image cannot be loaded or channel is out of range
        """
        pixels, width, height = load_image(filepath, max_size=max_size)
        matrices = extract_channels(pixels, width, height, grayscale=is_grayscale(pixels))

        if not 0 <= channel < len(matrices):
            raise ValueError(f"Channel {channel} not available, image has {len(matrices)}")

        return matrices[channel]

    @staticmethod
    def get_matrix_info(A: np.ndarray) -> Dict:
        """
        Get information about a matrix for logging.

        Returns:
            Dictionary with shape, dtype, min, max, mean, std and the
            numerical rank of A
        """
        return {
            'shape': A.shape,
            'dtype': A.dtype,
            'min': np.min(A),
            'max': np.max(A),
            'mean': np.mean(A),
            'std': np.std(A),
            'estimated_rank': np.linalg.matrix_rank(A),
        }
