"""Owned 2D pixel storage."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .errors import AllocationError, InvalidParameterError

Sample = Union[int, Sequence[int]]


class PixelBuffer:
    """A top-down grid of ``uint8`` samples.

    Grayscale buffers have shape ``(height, width)``; colour buffers have
    shape ``(height, width, 3)`` with channels in R, G, B order. Row 0 is the
    top of the displayed image.
    """

    def __init__(self, width: int, height: int, channels: int = 1) -> None:
        if width <= 0 or height <= 0:
            raise AllocationError(f"Invalid buffer size {width}x{height}")
        if channels not in (1, 3):
            raise AllocationError(f"Unsupported channel count: {channels}")
        shape = (height, width) if channels == 1 else (height, width, 3)
        try:
            self.pixels = np.zeros(shape, dtype=np.uint8)
        except (MemoryError, ValueError) as exc:
            raise AllocationError(f"Cannot allocate {width}x{height} buffer") from exc

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        array = np.asarray(array)
        if array.ndim == 2:
            channels = 1
        elif array.ndim == 3 and array.shape[2] == 3:
            channels = 3
        else:
            raise AllocationError(f"Unsupported pixel array shape: {array.shape}")
        buffer = cls(array.shape[1], array.shape[0], channels)
        buffer.pixels[...] = np.clip(array, 0, 255)
        return buffer

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else 3

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Pixel ({row}, {col}) outside {self.width}x{self.height} buffer"
            )

    def get(self, row: int, col: int) -> Sample:
        self._check_bounds(row, col)
        value = self.pixels[row, col]
        if self.channels == 1:
            return int(value)
        return tuple(int(v) for v in value)

    def set(self, row: int, col: int, value: Sample) -> None:
        self._check_bounds(row, col)
        self.pixels[row, col] = value

    def snapshot(self) -> np.ndarray:
        """Return an independent copy of the samples."""

        return self.pixels.copy()

    def replace(self, array: np.ndarray) -> None:
        """Swap in a transformed array of identical shape."""

        if array.shape != self.pixels.shape:
            raise InvalidParameterError(
                f"Replacement shape {array.shape} does not match {self.pixels.shape}"
            )
        self.pixels = np.ascontiguousarray(array, dtype=np.uint8)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, channels={self.channels})"
