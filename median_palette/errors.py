# median_palette/errors.py
"""
Exception types raised by median_palette.

All library errors derive from PaletteError so callers can catch one type.
The stdlib bases (ValueError, OSError, RuntimeError) are kept so generic
handlers still match.
"""

from __future__ import annotations


class PaletteError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(PaletteError, ValueError):
    """An argument is outside its accepted range or has the wrong shape."""


class NotReadableError(PaletteError, OSError):
    """The image source could not be located, fetched or decoded."""


class NotSupportedError(PaletteError):
    """The image source type or requested output format is not supported."""


class BlankImageError(PaletteError):
    """No useful pixels remained after the alpha and white filters."""


class QuantizationError(PaletteError, RuntimeError):
    """Internal invariant of the median-cut quantizer was violated."""


__all__ = [
    "PaletteError",
    "InvalidArgumentError",
    "NotReadableError",
    "NotSupportedError",
    "BlankImageError",
    "QuantizationError",
]
