"""
Tests for compression ratio and error metrics.
"""

import numpy as np
import pytest

from svd_compress.metrics import compression_ratio, compute_errors, compute_memory_usage


class TestCompressionRatio:

    def test_formula(self):
        assert compression_ratio(10, 10, 1, True) == pytest.approx(100 / 21)
        assert compression_ratio(640, 480, 20, False) == pytest.approx(640 * 480 / (20 * 1121))

    def test_channels_cancel_out(self):
        assert compression_ratio(64, 48, 5, True) == pytest.approx(compression_ratio(64, 48, 5, False))

    def test_strictly_decreasing_in_rank(self):
        ratios = [compression_ratio(120, 80, k, False) for k in range(1, 81)]
        assert all(a > b for a, b in zip(ratios, ratios[1:]))

    @pytest.mark.parametrize("width, height", [(3, 3), (3, 50), (100, 4), (512, 512)])
    def test_rank_one_saves_space(self, width, height):
        assert compression_ratio(width, height, 1, True) > 1

    def test_rank_zero_undefined(self):
        with pytest.raises(ValueError):
            compression_ratio(10, 10, 0, True)


class TestComputeErrors:

    def test_identical_matrices(self):
        A = np.arange(12, dtype=float).reshape(3, 4)
        assert compute_errors(A, A) == (0.0, 0.0)

    def test_relative_error(self):
        A = np.diag([3.0, 4.0])
        A_approx = np.diag([3.0, 0.0])

        frob, spec = compute_errors(A, A_approx)

        assert frob == pytest.approx(4.0 / 5.0)
        assert spec == pytest.approx(1.0)

    def test_zero_original(self):
        assert compute_errors(np.zeros((2, 2)), np.ones((2, 2))) == (0.0, 0.0)

    def test_color_images_flattened(self):
        img = np.ones((2, 3, 3))
        frob, _ = compute_errors(img, img * 0.5)
        assert frob == pytest.approx(0.5)


class TestMemoryUsage:

    def test_factor_and_full_sizes(self):
        lowrank_mb, full_mb = compute_memory_usage((1024, 512), 10)

        assert full_mb == pytest.approx(4.0)
        assert lowrank_mb == pytest.approx((1024 * 10 + 10 + 10 * 512) * 8 / 1024**2)

    def test_channels_scale_linearly(self):
        single = compute_memory_usage((100, 100), 5)
        triple = compute_memory_usage((100, 100), 5, channels=3)
        assert triple[0] == pytest.approx(3 * single[0])
