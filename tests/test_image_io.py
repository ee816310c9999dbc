"""
Tests for Pillow-backed pixel buffer I/O.
"""

import numpy as np
import pytest
from PIL import Image

from svd_compress.errors import InvalidDimensionsError
from svd_compress.image_io import fit_size, load_image, pixels_to_image, save_image


@pytest.fixture
def gradient_png(tmp_path):
    arr = np.zeros((6, 8, 3), dtype=np.uint8)
    arr[:, :, 0] = np.arange(8) * 30
    arr[:, :, 1] = np.arange(6)[:, None] * 40
    arr[:, :, 2] = 90
    path = tmp_path / "gradient.png"
    Image.fromarray(arr).save(path)
    return path


class TestFitSize:

    def test_already_fits(self):
        assert fit_size(300, 200, 500, 400) == (300, 200)

    def test_width_limited(self):
        assert fit_size(1000, 500, 500, 400) == (500, 250)

    def test_height_limited(self):
        assert fit_size(400, 800, 500, 400) == (200, 400)


class TestLoadImage:

    def test_rgba_buffer(self, gradient_png):
        pixels, width, height = load_image(gradient_png)

        assert (width, height) == (8, 6)
        assert pixels.dtype == np.uint8
        assert pixels.size == 8 * 6 * 4

        first_row = pixels.reshape(6, 8, 4)[0]
        assert first_row[:, 0].tolist() == [0, 30, 60, 90, 120, 150, 180, 210]
        assert np.all(first_row[:, 3] == 255)

    def test_downscale(self, gradient_png):
        _, width, height = load_image(gradient_png, max_size=(4, 4))
        assert (width, height) == (4, 3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "nope.png")

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ValueError):
            load_image(path)


class TestSaveImage:

    def test_round_trip(self, tmp_path):
        pixels = np.array([255, 0, 0, 255, 0, 0, 255, 255], dtype=np.uint8)
        path = save_image(pixels, 2, 1, tmp_path / "out" / "pair.png")

        loaded, width, height = load_image(path)

        assert (width, height) == (2, 1)
        np.testing.assert_array_equal(loaded, pixels)

    def test_wrong_length(self):
        with pytest.raises(InvalidDimensionsError):
            pixels_to_image(np.zeros(7, dtype=np.uint8), 2, 1)
