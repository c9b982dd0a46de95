"""Per-sample point transforms.

Every operator mutates the image in place and returns it so calls can be
chained. The level-wise operators are expressed as 256-entry lookup tables.
"""

from __future__ import annotations

import numpy as np

from .codec import BmpImage
from .errors import UnsupportedFormatError

_LEVELS = np.arange(256, dtype=np.int32)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer with halves going up."""

    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def clamp8(values: np.ndarray) -> np.ndarray:
    return np.clip(values, 0, 255).astype(np.uint8)


def _apply_lut(image: BmpImage, lut: np.ndarray) -> BmpImage:
    pixels = image.buffer.pixels
    pixels[...] = lut.astype(np.uint8)[pixels]
    return image


def _require_depth(image: BmpImage, depth: int, operation: str) -> None:
    if image.bit_depth != depth:
        raise UnsupportedFormatError(
            f"{operation} requires a {depth}-bit image, got {image.bit_depth}-bit"
        )


def negative(image: BmpImage) -> BmpImage:
    return _apply_lut(image, 255 - _LEVELS)


def brightness(image: BmpImage, delta: int) -> BmpImage:
    """Add ``delta`` to every channel, saturating at 0 and 255."""

    # any shift beyond +/-255 saturates every level
    delta = max(-255, min(255, int(delta)))
    return _apply_lut(image, np.clip(_LEVELS + delta, 0, 255))


def threshold(image: BmpImage, level: int) -> BmpImage:
    """Binarise an 8-bit image: ``255`` where ``v >= level``, else ``0``."""

    _require_depth(image, 8, "threshold")
    level = max(0, min(255, int(level)))
    return _apply_lut(image, np.where(_LEVELS >= level, 255, 0))


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Weighted luma of an ``(..., 3)`` RGB array as floats."""

    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = LUMA_WEIGHTS
    return r * rgb[..., 0] + g * rgb[..., 1] + b * rgb[..., 2]


def grayscale(image: BmpImage) -> BmpImage:
    """Replace every pixel of a 24-bit image by its rounded luminance."""

    _require_depth(image, 24, "grayscale")
    pixels = image.buffer.pixels
    gray = clamp8(round_half_up(luminance(pixels)))
    pixels[...] = gray[..., np.newaxis]
    return image
