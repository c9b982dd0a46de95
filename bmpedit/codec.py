"""Reading and writing 8-bit grayscale and 24-bit colour BMP images."""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

import numpy as np

from .buffer import PixelBuffer
from .errors import BmpError, BmpIOError, FormatError, UnsupportedFormatError
from .header import (
    HEADER_SIZE,
    PALETTE_SIZE,
    BmpHeader,
    build_header,
    parse_header,
    serialize_header,
)

logger = logging.getLogger(__name__)


@dataclass
class BmpImage:
    """An open image: header, optional palette and the pixel buffer.

    ``gap`` holds any bytes stored between the palette (or header) and the
    declared pixel data offset, such as the tail of a larger DIB header.
    """

    header: BmpHeader
    buffer: PixelBuffer
    palette: Optional[bytes] = None
    gap: bytes = b""

    @property
    def bit_depth(self) -> int:
        return self.header.bit_depth

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def pixels(self) -> np.ndarray:
        return self.buffer.pixels


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    bit_depth: int
    data_size: int

    def as_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "bit_depth": self.bit_depth,
            "data_size": self.data_size,
        }


def describe(image: BmpImage) -> ImageInfo:
    return ImageInfo(
        width=image.width,
        height=image.height,
        bit_depth=image.bit_depth,
        data_size=image.header.data_size,
    )


def format_info(info: ImageInfo) -> str:
    """Render an :class:`ImageInfo` as the multi-line report shown to users."""

    return (
        "Image Info:\n"
        f"Width: {info.width}\n"
        f"Height: {info.height}\n"
        f"Color Depth: {info.bit_depth}\n"
        f"Data Size: {info.data_size} bytes"
    )


# ---------- Decoding ----------

def read_image(fp: BinaryIO, expected_depth: int | None = None) -> BmpImage:
    """Decode a BMP from a seekable binary stream positioned at its start."""

    header = parse_header(fp.read(HEADER_SIZE), expected_depth)

    palette = None
    if header.has_palette:
        palette = fp.read(PALETTE_SIZE)
        if len(palette) != PALETTE_SIZE:
            raise FormatError(
                f"Truncated palette: expected {PALETTE_SIZE} bytes, got {len(palette)}"
            )

    channels = header.bytes_per_pixel
    buffer = PixelBuffer(header.width, header.height, channels)
    row_bytes = header.width * channels
    padding = header.row_padding

    # bytes between the header or palette and the pixel data, kept verbatim
    gap = b""
    gap_length = header.data_offset - fp.tell()
    if gap_length > 0:
        gap = fp.read(gap_length)

    fp.seek(header.data_offset)
    # File rows run bottom-to-top.
    for row in range(header.height - 1, -1, -1):
        data = fp.read(row_bytes)
        if len(data) != row_bytes:
            raise FormatError(
                f"Truncated pixel data at row {row}: expected {row_bytes} bytes, got {len(data)}"
            )
        samples = np.frombuffer(data, dtype=np.uint8)
        if channels == 3:
            samples = samples.reshape(header.width, 3)[:, ::-1]
        buffer.pixels[row] = samples
        if padding:
            fp.seek(padding, os.SEEK_CUR)

    return BmpImage(header=header, buffer=buffer, palette=palette, gap=gap)


def decode(data: bytes, expected_depth: int | None = None) -> BmpImage:
    return read_image(io.BytesIO(data), expected_depth)


def load_image(path: str | Path, expected_depth: int | None = None) -> BmpImage:
    """Load a BMP file, optionally insisting on a bit depth of 8 or 24."""

    path = Path(path)
    try:
        with path.open("rb") as fh:
            image = read_image(fh, expected_depth)
    except BmpError:
        raise
    except (OSError, ValueError) as exc:
        raise BmpIOError(f"Could not read {path}: {exc}") from exc
    logger.debug(
        "Loaded %s: %dx%d, %d-bit", path, image.width, image.height, image.bit_depth
    )
    return image


def load_image8(path: str | Path) -> BmpImage:
    return load_image(path, expected_depth=8)


def load_image24(path: str | Path) -> BmpImage:
    return load_image(path, expected_depth=24)


# ---------- Encoding ----------

def _write(fp: BinaryIO, data: bytes) -> None:
    written = fp.write(data)
    if written is not None and written != len(data):
        raise BmpIOError(f"Short write: {written} of {len(data)} bytes")


def write_image(fp: BinaryIO, image: BmpImage) -> None:
    """Encode ``image`` into a seekable binary stream."""

    header = image.header
    _write(fp, serialize_header(header))
    if header.has_palette:
        if image.palette is None or len(image.palette) != PALETTE_SIZE:
            raise FormatError("8-bit image is missing its 1024-byte palette")
        _write(fp, image.palette)
    if image.gap:
        _write(fp, image.gap)

    fp.seek(header.data_offset)
    padding_bytes = b"\x00" * header.row_padding
    pixels = image.buffer.pixels
    for row in range(header.height - 1, -1, -1):
        samples = pixels[row]
        if samples.ndim == 2:
            samples = samples[:, ::-1]
        _write(fp, np.ascontiguousarray(samples).tobytes() + padding_bytes)


def encode(image: BmpImage) -> bytes:
    stream = io.BytesIO()
    write_image(stream, image)
    return stream.getvalue()


def save_image(path: str | Path, image: BmpImage) -> None:
    """Write ``image`` to ``path``. A failed save may leave a partial file."""

    path = Path(path)
    try:
        with path.open("wb") as fh:
            write_image(fh, image)
    except BmpError:
        raise
    except (OSError, ValueError) as exc:
        raise BmpIOError(f"Could not write {path}: {exc}") from exc
    logger.debug("Saved %s (%d-bit)", path, image.bit_depth)


def _require_depth(image: BmpImage, depth: int) -> None:
    if image.bit_depth != depth:
        raise UnsupportedFormatError(
            f"Expected a {depth}-bit image, got {image.bit_depth}-bit"
        )


def save_image8(path: str | Path, image: BmpImage) -> None:
    _require_depth(image, 8)
    save_image(path, image)


def save_image24(path: str | Path, image: BmpImage) -> None:
    _require_depth(image, 24)
    save_image(path, image)


# ---------- Construction ----------

def grayscale_palette() -> bytes:
    """Linear 256-entry B, G, R, reserved palette."""

    return bytes(component for level in range(256) for component in (level, level, level, 0))


def image_from_array(array: np.ndarray) -> BmpImage:
    """Wrap a ``(H, W)`` or ``(H, W, 3)`` array in a freshly built image.

    Two-dimensional arrays become 8-bit grayscale images with a linear
    palette, three-dimensional RGB arrays become 24-bit images.
    """

    buffer = PixelBuffer.from_array(array)
    bit_depth = 8 if buffer.channels == 1 else 24
    header = build_header(buffer.width, buffer.height, bit_depth)
    palette = grayscale_palette() if bit_depth == 8 else None
    return BmpImage(header=header, buffer=buffer, palette=palette)
