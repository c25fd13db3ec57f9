# median_palette/__init__.py
"""
median_palette package.

Purpose:
  Extract a small representative colour palette from an image with modified
  median-cut quantization (MMCQ). See median_palette.cli for the command line.

Public API:
  get_palette   : palette of up to N colours, most representative first.
  get_color     : dominant colour.
  Color         : colour value object with rgb/hex/int/array formats.
  quantize      : histogram -> palette, for callers that build their own histogram.
  bucket        : colour bucket index packing.
  histogram     : Histogram and build_histogram.
  vbox          : VBox colour-space box.
  median_cut    : median-cut splitter.
  errors        : exception types (PaletteError and subclasses).

Quick start:
  from median_palette import get_palette, get_color
  get_palette("photo.jpg", color_count=6, quality=5, output_format="hex")
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import bucket
from . import constants
from . import core_types
from . import errors
from . import histogram
from . import vbox
from . import median_cut
from . import quantize as quantize_module

from .color import Color  # noqa: E402,F401
from .core_types import Area, Axis, PixelColor, PixelSource  # noqa: E402,F401
from .errors import (  # noqa: E402,F401
    BlankImageError,
    InvalidArgumentError,
    NotReadableError,
    NotSupportedError,
    PaletteError,
    QuantizationError,
)
from .histogram import Histogram, build_histogram  # noqa: E402,F401
from .image_io import ArrayPixelSource, load_pixel_source  # noqa: E402,F401
from .quantize import ColorMap, quantize  # noqa: E402,F401
from .thief import get_color, get_palette  # noqa: E402,F401
from .vbox import VBox  # noqa: E402,F401

__all__ = [
    "__version__",
    "bucket",
    "constants",
    "core_types",
    "errors",
    "histogram",
    "vbox",
    "median_cut",
    "quantize_module",
    "get_palette",
    "get_color",
    "Color",
    "Area",
    "Axis",
    "PixelColor",
    "PixelSource",
    "Histogram",
    "build_histogram",
    "ArrayPixelSource",
    "load_pixel_source",
    "ColorMap",
    "quantize",
    "VBox",
    "BlankImageError",
    "InvalidArgumentError",
    "NotReadableError",
    "NotSupportedError",
    "PaletteError",
    "QuantizationError",
]
