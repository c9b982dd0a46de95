"""Histogram equalization for grayscale and colour images.

Grayscale images are remapped directly. Colour images are converted to a
YUV space, the luma channel is equalized and the chroma channels are kept,
so contrast is stretched without shifting hue.
"""

from __future__ import annotations

import warnings
from typing import Optional

import numpy as np

from .codec import BmpImage
from .operators import clamp8, luminance, round_half_up


class DegenerateHistogramWarning(UserWarning):
    """Equalization was skipped because the image has a single level."""


def histogram(levels: np.ndarray) -> np.ndarray:
    """Count occurrences of each level 0..255."""

    return np.bincount(np.asarray(levels, dtype=np.intp).ravel(), minlength=256)


def cumulative_histogram(hist: np.ndarray) -> np.ndarray:
    return np.cumsum(hist, dtype=np.int64)


def equalization_table(levels: np.ndarray) -> Optional[np.ndarray]:
    """Build the 256-entry remapping table for ``levels``.

    Returns ``None`` when every sample has the same level, in which case
    there is nothing to stretch.
    """

    cdf = cumulative_histogram(histogram(levels))
    num_pixels = int(cdf[-1])
    cdf_min = int(cdf[cdf > 0].min())
    span = num_pixels - cdf_min
    if span == 0:
        return None
    scaled = round_half_up((cdf - cdf_min) * 255.0 / span)
    return np.where(cdf >= cdf_min, scaled, 0).astype(np.uint8)


def rgb_to_yuv(rgb: np.ndarray) -> np.ndarray:
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    y = luminance(rgb)
    u = -0.14713 * r - 0.28886 * g + 0.436 * b
    v = 0.615 * r - 0.51499 * g - 0.10001 * b
    return np.stack((y, u, v), axis=-1)


def yuv_to_rgb(yuv: np.ndarray) -> np.ndarray:
    y, u, v = yuv[..., 0], yuv[..., 1], yuv[..., 2]
    r = y + 1.13983 * v
    g = y - 0.39465 * u - 0.58060 * v
    b = y + 2.03211 * u
    return clamp8(round_half_up(np.stack((r, g, b), axis=-1)))


def _warn_degenerate() -> None:
    warnings.warn(
        "Image has a single intensity level; histogram equalization skipped",
        DegenerateHistogramWarning,
        stacklevel=3,
    )


def equalize_gray(image: BmpImage) -> bool:
    pixels = image.buffer.pixels
    table = equalization_table(pixels)
    if table is None:
        _warn_degenerate()
        return False
    pixels[...] = table[pixels]
    return True


def equalize_color(image: BmpImage) -> bool:
    yuv = rgb_to_yuv(image.buffer.pixels)
    levels = clamp8(round_half_up(np.clip(yuv[..., 0], 0.0, 255.0)))
    table = equalization_table(levels)
    if table is None:
        _warn_degenerate()
        return False
    yuv[..., 0] = table[levels]
    image.buffer.replace(yuv_to_rgb(yuv))
    return True


def equalize(image: BmpImage) -> bool:
    """Equalize ``image`` in place and report whether the remap was applied.

    A single-level image is left untouched and a
    :class:`DegenerateHistogramWarning` is emitted instead of an error.
    """

    if image.bit_depth == 8:
        return equalize_gray(image)
    return equalize_color(image)
