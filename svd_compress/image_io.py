"""Reading and writing RGBA pixel buffers with Pillow."""

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from .config import PIXEL_STRIDE
from .errors import InvalidDimensionsError


def fit_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Shrink (width, height) to fit inside a box, keeping the aspect ratio.

    Images already inside the box are returned unchanged.
    """
    aspect = width / height
    w, h = float(width), float(height)

    if w > max_width:
        w = max_width
        h = w / aspect

    if h > max_height:
        h = max_height
        w = h * aspect

    return max(1, int(round(w))), max(1, int(round(h)))


def load_image(filepath, max_size: Optional[Tuple[int, int]] = None) -> Tuple[np.ndarray, int, int]:
    """
    Load an image file as a flat RGBA buffer.

    Args:
        filepath: path to image file (PNG, JPG, etc.)
        max_size: optional (max_width, max_height); larger images are
                  downscaled to fit, keeping their aspect ratio

    Returns:
        (pixels, width, height) with pixels a uint8 array of length
        width * height * 4

    Raises:
        FileNotFoundError: if image file doesn't exist
        ValueError: if image cannot be loaded
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Image file not found: {filepath}")

    try:
        img = Image.open(filepath)
        img.load()
    except Exception as e:
        raise ValueError(f"Failed to load image {filepath}: {e}") from e

    img = img.convert("RGBA")

    if max_size is not None:
        target = fit_size(img.width, img.height, *max_size)
        if target != img.size:
            img = img.resize(target, Image.Resampling.LANCZOS)

    pixels = np.array(img, dtype=np.uint8).reshape(-1)

    return pixels, img.width, img.height


def pixels_to_image(pixels, width: int, height: int) -> Image.Image:
    """Wrap a flat RGBA buffer in a PIL image."""
    arr = np.asarray(pixels, dtype=np.uint8)
    if arr.size != width * height * PIXEL_STRIDE:
        raise InvalidDimensionsError(
            f"Pixel buffer has {arr.size} samples, expected {width * height * PIXEL_STRIDE}"
        )
    return Image.fromarray(arr.reshape(height, width, PIXEL_STRIDE))


def save_image(pixels, width: int, height: int, filepath) -> Path:
    """Save a flat RGBA buffer; the format follows the file extension."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    pixels_to_image(pixels, width, height).save(filepath)
    return filepath
