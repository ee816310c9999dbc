"""Bridge between interleaved RGBA pixel buffers and the SVD engine.

A grayscale image (every pixel has R, G and B within a small tolerance of
each other) is compressed as a single matrix taken from the red samples.
Colour images are split into R, G and B matrices that are compressed
independently, each with its own singular triplets.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .algos import power_svd, reconstruct
from .config import DEFAULT_MAX_ITERATIONS, GRAYSCALE_TOLERANCE, OPAQUE_ALPHA, PIXEL_STRIDE
from .errors import InvalidDimensionsError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], object]

CHANNEL_NAMES = ("red", "green", "blue")


@dataclass
class ChannelResult:
    """Reconstructed channel (flat uint8, row-major) and its spectrum."""

    data: np.ndarray
    singular_values: np.ndarray


@dataclass
class CompressionResult:
    """Output of `compress_image`.

    `pixels` is a new RGBA buffer of length width * height * 4 with alpha set
    to 255. `singular_values` holds one descending array for grayscale input
    and three (R, G, B) for colour input.
    """

    pixels: np.ndarray
    singular_values: List[np.ndarray]
    is_grayscale: bool
    width: int
    height: int
    rank: int


def _flat_samples(pixels) -> np.ndarray:
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        pixels = np.frombuffer(pixels, dtype=np.uint8)

    # int16 so channel differences cannot wrap around
    data = np.asarray(pixels).astype(np.int16, copy=False).reshape(-1)
    if data.size % PIXEL_STRIDE:
        raise InvalidDimensionsError(
            f"Pixel buffer has {data.size} samples, not a multiple of {PIXEL_STRIDE} (RGBA)"
        )
    return data


def _as_pixel_array(pixels, width: int, height: int) -> np.ndarray:
    if width < 1 or height < 1:
        raise InvalidDimensionsError(f"Image dimensions must be positive, got {width}x{height}")

    data = _flat_samples(pixels)
    expected = width * height * PIXEL_STRIDE
    if data.size != expected:
        raise InvalidDimensionsError(
            f"Pixel buffer has {data.size} samples, expected {expected} for {width}x{height} RGBA"
        )
    return data


def is_grayscale(pixels, tolerance: int = GRAYSCALE_TOLERANCE) -> bool:
    """
    True if every pixel has |R-G|, |G-B| and |R-B| all <= tolerance.

    Raises:
        InvalidDimensionsError: If the buffer length is not a multiple of 4
    """
    data = _flat_samples(pixels).reshape(-1, PIXEL_STRIDE)
    r, g, b = data[:, 0], data[:, 1], data[:, 2]

    return bool(
        np.all(np.abs(r - g) <= tolerance)
        and np.all(np.abs(g - b) <= tolerance)
        and np.all(np.abs(r - b) <= tolerance)
    )


def extract_channels(pixels, width: int, height: int, grayscale: bool) -> List[np.ndarray]:
    """
    Unpack an RGBA buffer into (height x width) float matrices.

    Returns one matrix (the red samples) for grayscale images, otherwise
    three matrices for R, G and B.
    """
    data = _as_pixel_array(pixels, width, height).reshape(height, width, PIXEL_STRIDE)
    indices = (0,) if grayscale else (0, 1, 2)
    return [data[:, :, c].astype(float) for c in indices]


def to_channel_buffer(matrix) -> np.ndarray:
    """Clamp to [0, 255], round half up and flatten row-major to uint8."""
    rounded = np.floor(np.asarray(matrix, dtype=float) + 0.5)
    return np.clip(rounded, 0, 255).astype(np.uint8).reshape(-1)


def compress_channel(matrix, k: int, max_iterations: int = DEFAULT_MAX_ITERATIONS, rng=None) -> ChannelResult:
    """Rank-k approximation of one channel matrix."""
    U, S, Vt = power_svd(matrix, k, max_iterations=max_iterations, rng=rng)
    approx = reconstruct(U, S, Vt, k)
    return ChannelResult(to_channel_buffer(approx), S)


def _notify(progress: Optional[ProgressCallback], label: str):
    logger.debug(label)
    if progress is not None:
        progress(label)


def compress_image(
    pixels,
    width: int,
    height: int,
    k: int,
    progress: Optional[ProgressCallback] = None,
    rng=None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    grayscale: Optional[bool] = None,
) -> CompressionResult:
    """
    Compress an RGBA image to rank k per channel.

    Args:
        pixels: sequence of width * height * 4 ints in [0, 255], RGBA
        width: int - image width in pixels
        height: int - image height in pixels
        k: int - number of singular triplets kept per channel
        progress: optional callable receiving a phase label before each
                  stage; exceptions it raises propagate unchanged
        rng: None, int seed or numpy.random.Generator for power iteration
        max_iterations: int - power iteration cap per triplet
        grayscale: force the single-channel (True) or per-channel (False)
                   path; None detects it with `is_grayscale`

    Returns:
        CompressionResult with the reconstructed RGBA buffer

    Raises:
        InvalidDimensionsError: If the buffer length does not match
            width * height * 4 or a dimension is not positive
    """
    data = _as_pixel_array(pixels, width, height)
    rng = np.random.default_rng(rng)
    if grayscale is None:
        grayscale = is_grayscale(data)

    output = np.empty((width * height, PIXEL_STRIDE), dtype=np.uint8)
    output[:, 3] = OPAQUE_ALPHA

    if grayscale:
        _notify(progress, "Extracting grayscale data")
        (matrix,) = extract_channels(data, width, height, grayscale=True)

        _notify(progress, "Compressing grayscale channel")
        result = compress_channel(matrix, k, max_iterations=max_iterations, rng=rng)

        _notify(progress, "Rebuilding image data")
        output[:, 0] = result.data
        output[:, 1] = result.data
        output[:, 2] = result.data
        singular_values = [result.singular_values]
    else:
        _notify(progress, "Splitting RGB channels")
        matrices = extract_channels(data, width, height, grayscale=False)

        results = []
        for name, matrix in zip(CHANNEL_NAMES, matrices):
            _notify(progress, f"Compressing {name} channel")
            results.append(compress_channel(matrix, k, max_iterations=max_iterations, rng=rng))

        _notify(progress, "Merging RGB channels")
        for c, result in enumerate(results):
            output[:, c] = result.data
        singular_values = [r.singular_values for r in results]

    return CompressionResult(
        pixels=output.reshape(-1),
        singular_values=singular_values,
        is_grayscale=grayscale,
        width=width,
        height=height,
        rank=k,
    )


def singular_value_distribution(
    pixels,
    width: int,
    height: int,
    rng=None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """
    Full spectrum of an image for energy-based rank selection.

    Runs the engine at rank min(width, height). Grayscale images return their
    single spectrum; colour images return the per-index mean over the R, G
    and B spectra, counting only channels that reached that index.
    """
    data = _as_pixel_array(pixels, width, height)
    rng = np.random.default_rng(rng)
    full_rank = min(width, height)

    spectra = [
        power_svd(matrix, full_rank, max_iterations=max_iterations, rng=rng).S
        for matrix in extract_channels(data, width, height, grayscale=is_grayscale(data))
    ]
    if len(spectra) == 1:
        return spectra[0]

    longest = max(len(s) for s in spectra)
    averaged = []
    for i in range(longest):
        values = [s[i] for s in spectra if i < len(s)]
        averaged.append(sum(values) / len(values))
    return np.asarray(averaged, dtype=float)
