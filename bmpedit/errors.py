"""Exception hierarchy for BMP decoding, encoding and transforms."""

from __future__ import annotations


class BmpError(Exception):
    """Base class for every error raised by :mod:`bmpedit`."""


class BmpIOError(BmpError, OSError):
    """A file could not be opened, read or written."""


class FormatError(BmpError, ValueError):
    """The data is not a well-formed BMP (bad signature, truncated data)."""


class UnsupportedFormatError(BmpError, ValueError):
    """The BMP is valid but uses a layout this package does not handle."""


class AllocationError(BmpError, MemoryError):
    """A pixel buffer could not be sized or allocated."""


class InvalidParameterError(BmpError, ValueError):
    """An operation argument is out of range for the image or kernel."""
