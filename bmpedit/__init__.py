"""Decode, edit and re-encode 8-bit grayscale and 24-bit colour BMP images."""

from .buffer import PixelBuffer
from .codec import (
    BmpImage,
    ImageInfo,
    decode,
    describe,
    encode,
    image_from_array,
    load_image,
    load_image8,
    load_image24,
    save_image,
    save_image8,
    save_image24,
)
from .convolution import FilterKind, Kernel, apply_kernel, apply_named_filter
from .equalize import DegenerateHistogramWarning, equalize
from .errors import (
    AllocationError,
    BmpError,
    BmpIOError,
    FormatError,
    InvalidParameterError,
    UnsupportedFormatError,
)
from .header import BmpHeader, parse_header, serialize_header
from .operators import brightness, grayscale, negative, threshold

__all__ = [
    "PixelBuffer",
    "BmpImage",
    "ImageInfo",
    "decode",
    "describe",
    "encode",
    "image_from_array",
    "load_image",
    "load_image8",
    "load_image24",
    "save_image",
    "save_image8",
    "save_image24",
    "FilterKind",
    "Kernel",
    "apply_kernel",
    "apply_named_filter",
    "DegenerateHistogramWarning",
    "equalize",
    "AllocationError",
    "BmpError",
    "BmpIOError",
    "FormatError",
    "InvalidParameterError",
    "UnsupportedFormatError",
    "BmpHeader",
    "parse_header",
    "serialize_header",
    "brightness",
    "grayscale",
    "negative",
    "threshold",
]
