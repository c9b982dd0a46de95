from __future__ import annotations

import struct

import numpy as np
import pytest


def build_bmp(
    pixels: np.ndarray,
    *,
    data_offset: int | None = None,
    image_size: int | None = None,
    reserved: tuple[int, int] = (0, 0),
    palette: bytes | None = None,
    padding_fill: int = 0,
    compression: int = 0,
    gap: bytes | None = None,
) -> bytes:
    """Assemble BMP bytes from a top-down ``(H, W)`` or ``(H, W, 3)`` RGB array."""

    pixels = np.asarray(pixels, dtype=np.uint8)
    height, width = pixels.shape[:2]
    bit_depth = 8 if pixels.ndim == 2 else 24
    bpp = bit_depth // 8
    stride = (width * bpp + 3) // 4 * 4
    padding = stride - width * bpp

    if bit_depth == 8 and palette is None:
        palette = bytes(c for i in range(256) for c in (i, i, i, 0))
    head_len = 54 + (len(palette) if palette else 0)
    if data_offset is None:
        data_offset = head_len

    rows = bytearray()
    for row in pixels[::-1]:
        if bit_depth == 24:
            row = row[:, ::-1]
        rows += row.tobytes() + bytes([padding_fill]) * padding

    if image_size is None:
        image_size = len(rows)

    file_header = struct.pack("<2sIHHI", b"BM", data_offset + len(rows), reserved[0], reserved[1], data_offset)
    dib_header = struct.pack(
        "<IiiHHIIiiII", 40, width, height, 1, bit_depth, compression, image_size, 2835, 2835, 0, 0
    )
    body = file_header + dib_header + (palette or b"")
    filler = (gap or b"\x00") * (data_offset - len(body))
    body += filler[: max(0, data_offset - len(body))]
    return body + bytes(rows)


@pytest.fixture
def make_bmp():
    return build_bmp


@pytest.fixture
def gray_pixels() -> np.ndarray:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(5, 7), dtype=np.uint8)


@pytest.fixture
def rgb_pixels() -> np.ndarray:
    rng = np.random.default_rng(4321)
    return rng.integers(0, 256, size=(4, 5, 3), dtype=np.uint8)
