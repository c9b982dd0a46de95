"""Kernel convolution over interior pixels and the named 3x3 filters."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from .buffer import PixelBuffer
from .codec import BmpImage
from .errors import InvalidParameterError
from .operators import clamp8, round_half_up


@dataclass(frozen=True)
class Kernel:
    """An odd-sized square grid of weights."""

    weights: Tuple[Tuple[float, ...], ...]

    def __post_init__(self) -> None:
        size = len(self.weights)
        if size == 0 or any(len(row) != size for row in self.weights):
            raise InvalidParameterError("Kernel must be a non-empty square grid")
        if size % 2 == 0:
            raise InvalidParameterError(f"Kernel size must be odd, got {size}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]], scale: float = 1.0) -> "Kernel":
        return cls(tuple(tuple(float(w) * scale for w in row) for row in rows))

    @property
    def size(self) -> int:
        return len(self.weights)

    @property
    def offset(self) -> int:
        return self.size // 2

    def as_array(self) -> np.ndarray:
        return np.array(self.weights, dtype=np.float64)


def apply_kernel(buffer: PixelBuffer, kernel: Kernel) -> PixelBuffer:
    """Convolve ``buffer`` with ``kernel`` in place.

    Pixels closer than ``kernel.offset`` to an edge keep their value. Every
    interior sample is computed from a snapshot taken before the first
    write, independently for each channel.
    """

    offset = kernel.offset
    if offset <= 0:
        raise InvalidParameterError(f"Kernel of size {kernel.size} has no neighbourhood")
    size = kernel.size
    height, width = buffer.height, buffer.width
    if height < size or width < size:
        raise InvalidParameterError(
            f"Image {width}x{height} is smaller than the {size}x{size} kernel"
        )

    source = buffer.snapshot().astype(np.float64)
    weights = kernel.as_array()
    inner_h = height - 2 * offset
    inner_w = width - 2 * offset

    total = np.zeros(source[offset:offset + inner_h, offset:offset + inner_w].shape)
    for ky in range(size):
        for kx in range(size):
            weight = weights[ky, kx]
            if weight == 0.0:
                continue
            total += weight * source[ky:ky + inner_h, kx:kx + inner_w]

    result = buffer.snapshot()
    result[offset:offset + inner_h, offset:offset + inner_w] = clamp8(
        round_half_up(np.clip(total, 0.0, 255.0))
    )
    buffer.replace(result)
    return buffer


class FilterKind(enum.Enum):
    BOX = "box"
    GAUSSIAN = "gaussian"
    OUTLINE = "outline"
    EMBOSS = "emboss"
    SHARPEN = "sharpen"


PRESETS = {
    FilterKind.BOX: Kernel.from_rows([[1, 1, 1], [1, 1, 1], [1, 1, 1]], scale=1 / 9),
    FilterKind.GAUSSIAN: Kernel.from_rows([[1, 2, 1], [2, 4, 2], [1, 2, 1]], scale=1 / 16),
    FilterKind.OUTLINE: Kernel.from_rows([[-1, -1, -1], [-1, 8, -1], [-1, -1, -1]]),
    FilterKind.EMBOSS: Kernel.from_rows([[-2, -1, 0], [-1, 1, 1], [0, 1, 2]]),
    FilterKind.SHARPEN: Kernel.from_rows([[0, -1, 0], [-1, 5, -1], [0, -1, 0]]),
}


def filter_kind(value: Union[FilterKind, str]) -> FilterKind:
    if isinstance(value, FilterKind):
        return value
    try:
        return FilterKind(str(value).lower())
    except ValueError:
        names = ", ".join(kind.value for kind in FilterKind)
        raise InvalidParameterError(f"Unknown filter {value!r} (expected one of: {names})") from None


def apply_named_filter(image: BmpImage, kind: Union[FilterKind, str]) -> BmpImage:
    apply_kernel(image.buffer, PRESETS[filter_kind(kind)])
    return image
