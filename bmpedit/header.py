"""BMP file and info header parsing."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import FormatError, UnsupportedFormatError

FILE_HEADER_FORMAT = "<2sIHHI"
INFO_HEADER_FORMAT = "<IiiHHIIiiII"
FILE_HEADER_SIZE = struct.calcsize(FILE_HEADER_FORMAT)  # 14
INFO_HEADER_SIZE = struct.calcsize(INFO_HEADER_FORMAT)  # 40
HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_SIZE  # 54

SIGNATURE = b"BM"
PALETTE_SIZE = 256 * 4
SUPPORTED_DEPTHS = (8, 24)
DEFAULT_RESOLUTION = 2835  # 72 dpi in pixels per metre


def row_stride(width: int, bytes_per_pixel: int) -> int:
    """Return the on-disk length of one row, padded to a multiple of 4."""

    return (width * bytes_per_pixel + 3) // 4 * 4


@dataclass(frozen=True)
class BmpHeader:
    """The 54-byte BMP header.

    ``raw`` keeps the exact bytes captured at load time; serialising the
    header writes them back unchanged so reserved and unknown content
    survives a round trip.
    """

    signature: bytes
    file_size: int
    reserved1: int
    reserved2: int
    data_offset: int
    dib_size: int
    width: int
    height: int
    planes: int
    bit_depth: int
    compression: int
    image_size: int
    x_resolution: int
    y_resolution: int
    colors_used: int
    colors_important: int
    raw: bytes

    @property
    def bytes_per_pixel(self) -> int:
        return self.bit_depth // 8

    @property
    def row_stride(self) -> int:
        return row_stride(self.width, self.bytes_per_pixel)

    @property
    def row_padding(self) -> int:
        return self.row_stride - self.width * self.bytes_per_pixel

    @property
    def data_size(self) -> int:
        """Declared pixel data size, recomputed when the header stores 0."""

        if self.image_size:
            return self.image_size
        return self.row_stride * self.height

    @property
    def has_palette(self) -> bool:
        return self.bit_depth == 8


def parse_header(data: bytes, expected_depth: int | None = None) -> BmpHeader:
    """Decode and validate the first 54 bytes of ``data``."""

    if len(data) < HEADER_SIZE:
        raise FormatError(
            f"Truncated BMP header: expected {HEADER_SIZE} bytes, got {len(data)}"
        )
    raw = bytes(data[:HEADER_SIZE])
    signature, file_size, reserved1, reserved2, data_offset = struct.unpack_from(
        FILE_HEADER_FORMAT, raw, 0
    )
    if signature != SIGNATURE:
        raise FormatError(f"Not a BMP file: signature {signature!r}")

    (
        dib_size,
        width,
        height,
        planes,
        bit_depth,
        compression,
        image_size,
        x_resolution,
        y_resolution,
        colors_used,
        colors_important,
    ) = struct.unpack_from(INFO_HEADER_FORMAT, raw, FILE_HEADER_SIZE)

    if bit_depth not in SUPPORTED_DEPTHS:
        raise UnsupportedFormatError(f"Unsupported bit depth: {bit_depth}")
    if expected_depth is not None and bit_depth != expected_depth:
        raise UnsupportedFormatError(
            f"Unsupported bit depth: expected {expected_depth}, got {bit_depth}"
        )
    if compression != 0:
        raise UnsupportedFormatError(
            f"Unsupported compression: {compression} (only uncompressed images are handled)"
        )
    if width <= 0:
        raise UnsupportedFormatError(f"Unsupported width: {width}")
    if height <= 0:
        raise UnsupportedFormatError(
            f"Unsupported height: {height} (top-down bitmaps are not handled)"
        )

    return BmpHeader(
        signature=signature,
        file_size=file_size,
        reserved1=reserved1,
        reserved2=reserved2,
        data_offset=data_offset,
        dib_size=dib_size,
        width=width,
        height=height,
        planes=planes,
        bit_depth=bit_depth,
        compression=compression,
        image_size=image_size,
        x_resolution=x_resolution,
        y_resolution=y_resolution,
        colors_used=colors_used,
        colors_important=colors_important,
        raw=raw,
    )


def serialize_header(header: BmpHeader) -> bytes:
    return header.raw


def build_header(width: int, height: int, bit_depth: int) -> BmpHeader:
    """Synthesise a standard header for a new ``width`` x ``height`` image."""

    if bit_depth not in SUPPORTED_DEPTHS:
        raise UnsupportedFormatError(f"Unsupported bit depth: {bit_depth}")

    bytes_per_pixel = bit_depth // 8
    pixel_data_size = row_stride(width, bytes_per_pixel) * height
    palette_size = PALETTE_SIZE if bit_depth == 8 else 0
    colors = 256 if bit_depth == 8 else 0
    data_offset = HEADER_SIZE + palette_size

    file_header = struct.pack(
        FILE_HEADER_FORMAT,
        SIGNATURE,
        data_offset + pixel_data_size,
        0,
        0,
        data_offset,
    )
    dib_header = struct.pack(
        INFO_HEADER_FORMAT,
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        bit_depth,
        0,
        pixel_data_size,
        DEFAULT_RESOLUTION,
        DEFAULT_RESOLUTION,
        colors,
        colors,
    )
    return parse_header(file_header + dib_header, expected_depth=bit_depth)
