# median_palette/thief.py
from __future__ import annotations

"""
Public entry points.

  get_palette(source, color_count=10, quality=10, area=None, output_format="array", debug=False)
    -> list of colours, most representative first
  get_color(source, quality=10, area=None, output_format="array", debug=False)
    -> the dominant colour, or None

`quality` is the sampling stride: 1 reads every pixel, 10 every tenth.
`area` restricts sampling to a rectangle: Area, {'x','y','w','h'} or (x, y[, w, h]).
Arguments are validated before the image is touched.
"""

import time
from typing import Any, List, Optional

from .color import OUTPUT_FORMATS, Color, FormattedColor
from .constants import (
    DEFAULT_COLOR_COUNT,
    DEFAULT_QUALITY,
    DOMINANT_PALETTE_SIZE,
    MAX_COLORS,
    MIN_COLORS,
)
from .core_types import Area, AreaLike
from .errors import InvalidArgumentError, NotSupportedError
from .histogram import build_histogram
from .image_io import load_pixel_source
from .quantize import quantize
from .utils import debug_log, format_seconds_compact


def _validate_arguments(
    color_count: int, quality: int, area: AreaLike, output_format: str
) -> Optional[Area]:
    if not MIN_COLORS <= int(color_count) <= MAX_COLORS:
        raise InvalidArgumentError(
            f"The number of palette colors must be between {MIN_COLORS} and {MAX_COLORS} inclusive."
        )
    if int(quality) < 1:
        raise InvalidArgumentError(
            "The quality argument must be an integer greater than or equal to one."
        )
    if output_format.lower() not in OUTPUT_FORMATS:
        raise NotSupportedError(f"Color format ({output_format}) is not supported.")
    return Area.coerce(area)


def get_palette(
    source: Any,
    color_count: int = DEFAULT_COLOR_COUNT,
    quality: int = DEFAULT_QUALITY,
    area: AreaLike = None,
    output_format: str = "array",
    *,
    debug: bool = False,
) -> List[FormattedColor]:
    """
    Cluster the image's colours into a palette of `color_count` entries.

    Fewer colours come back only when the sampled pixels occupy fewer than
    `color_count` distinct 5-bit buckets.

    Raises:
      InvalidArgumentError: color_count outside [2, 256], quality < 1, bad area.
      NotSupportedError: unknown output_format or source type.
      NotReadableError: the source could not be read or decoded.
      BlankImageError: the image is blank, white or fully transparent.
    """
    rect = _validate_arguments(color_count, quality, area, output_format)

    t0 = time.perf_counter()
    pixels = load_pixel_source(source)
    histogram, useful = build_histogram(pixels, quality, rect, debug=debug)
    palette = quantize(useful, int(color_count), histogram, debug=debug)
    if debug:
        debug_log(
            f"palette of {len(palette)} in {format_seconds_compact(time.perf_counter() - t0)}"
        )
    return [Color.from_rgb(rgb).format(output_format) for rgb in palette]


def get_color(
    source: Any,
    quality: int = DEFAULT_QUALITY,
    area: AreaLike = None,
    output_format: str = "array",
    *,
    debug: bool = False,
) -> Optional[FormattedColor]:
    """Dominant colour: the first entry of a small palette, or None if it is empty."""
    palette = get_palette(
        source, DOMINANT_PALETTE_SIZE, quality, area, output_format, debug=debug
    )
    return palette[0] if palette else None


__all__ = ["get_palette", "get_color"]
