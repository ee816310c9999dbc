import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def _rgba(values_r, values_g=None, values_b=None, alpha=255):
    values_g = values_r if values_g is None else values_g
    values_b = values_r if values_b is None else values_b
    pixels = []
    for r, g, b in zip(values_r, values_g, values_b):
        pixels.extend([r, g, b, alpha])
    return pixels


@pytest.fixture
def make_rgba():
    """Interleave channel lists into a flat RGBA list."""
    return _rgba


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
