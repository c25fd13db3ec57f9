# median_palette/histogram.py
from __future__ import annotations

"""
Colour histogram over 5-bit RGB buckets.

Exports:
  Histogram                     : dense, read-only bucket -> pixel count table
  build_histogram(source, quality=10, area=None, debug=False) -> (Histogram, useful_pixels)

Notes:
  - Pixels are visited at offsets 0, quality, 2*quality, ... across the sampled
    rectangle in row-major order, wrapping by the rectangle width.
  - A pixel is skipped when alpha > THRESHOLD_ALPHA (0..127 scale) or when all
    three channels exceed THRESHOLD_WHITE.
  - Sources exposing rgba127() are sampled in one vectorised pass; any other
    PixelSource is read pixel by pixel through pixel_color_at().
"""

import time
from typing import Dict, Iterator, Mapping, Optional, Tuple

import numpy as np

from .bucket import color_index, color_index_array, colors_from_index_array
from .constants import (
    BUCKETS_PER_AXIS,
    DEFAULT_QUALITY,
    HISTOGRAM_SIZE,
    SIGBITS,
    THRESHOLD_ALPHA,
    THRESHOLD_WHITE,
)
from .core_types import Area, AreaLike, BucketCounts, PixelSource
from .errors import BlankImageError, InvalidArgumentError
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


class Histogram:
    """
    Pixel counts per colour bucket, stored densely.

    The backing array is frozen on construction; every VBox derived from a
    histogram shares it without copying.
    """

    __slots__ = ("_counts", "_cube", "_populated")

    def __init__(self, counts: np.ndarray) -> None:
        arr = np.array(counts, dtype=np.int64, copy=True).reshape(-1)
        if arr.shape[0] != HISTOGRAM_SIZE:
            raise InvalidArgumentError(
                f"histogram must have {HISTOGRAM_SIZE} buckets, got {arr.shape[0]}"
            )
        if np.any(arr < 0):
            raise InvalidArgumentError("histogram counts must be non-negative")
        arr.setflags(write=False)
        self._counts: BucketCounts = arr
        self._cube = arr.reshape(BUCKETS_PER_AXIS, BUCKETS_PER_AXIS, BUCKETS_PER_AXIS)
        self._populated: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    @classmethod
    def from_mapping(cls, buckets: Mapping[int, int]) -> "Histogram":
        """Build from a sparse {bucket_index: count} mapping."""
        counts = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
        for index, count in buckets.items():
            if not 0 <= int(index) < HISTOGRAM_SIZE:
                raise InvalidArgumentError(f"bucket index {index} out of range")
            counts[int(index)] += int(count)
        return cls(counts)

    @classmethod
    def from_colors(cls, colors: Mapping[Tuple[int, int, int], int]) -> "Histogram":
        """Build from {(r, g, b) 8-bit: count}; colours sharing a bucket are summed."""
        return cls.from_mapping(
            _merge_counts((color_index(r, g, b), n) for (r, g, b), n in colors.items())
        )

    # views

    @property
    def counts(self) -> BucketCounts:
        """Flat read-only (HISTOGRAM_SIZE,) array."""
        return self._counts

    @property
    def cube(self) -> np.ndarray:
        """Read-only (32, 32, 32) view indexed as [r, g, b] bucket coordinates."""
        return self._cube

    def populated(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(indices, coords (N,3), counts) of non-empty buckets, ascending by index."""
        if self._populated is None:
            indices = np.flatnonzero(self._counts)
            self._populated = (
                indices,
                colors_from_index_array(indices, SIGBITS),
                self._counts[indices],
            )
        return self._populated

    def bounds(self) -> Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]:
        """Per-axis (min, max) bucket coordinate over non-empty buckets."""
        if self.is_empty():
            raise InvalidArgumentError("empty histogram has no bounds")
        _idx, coords, _n = self.populated()
        lo = coords.min(axis=0)
        hi = coords.max(axis=0)
        return (
            (int(lo[0]), int(hi[0])),
            (int(lo[1]), int(hi[1])),
            (int(lo[2]), int(hi[2])),
        )

    def total(self) -> int:
        return int(self._counts.sum())

    def is_empty(self) -> bool:
        return not np.any(self._counts)

    def to_dict(self) -> Dict[int, int]:
        indices, _coords, counts = self.populated()
        return {int(i): int(n) for i, n in zip(indices.tolist(), counts.tolist())}

    def __getitem__(self, index: int) -> int:
        return int(self._counts[index])

    def __len__(self) -> int:
        """Number of populated buckets."""
        return int(self.populated()[0].shape[0])

    def __iter__(self) -> Iterator[int]:
        return iter(self.populated()[0].tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Histogram):
            return NotImplemented
        return bool(np.array_equal(self._counts, other._counts))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Histogram(buckets={len(self)}, pixels={self.total()})"


def _merge_counts(pairs) -> Dict[int, int]:
    out: Dict[int, int] = {}
    for index, n in pairs:
        out[index] = out.get(index, 0) + int(n)
    return out


def _validate_quality(quality: int) -> int:
    if int(quality) < 1:
        raise InvalidArgumentError(
            "The quality argument must be an integer greater than or equal to one."
        )
    return int(quality)


def _sample_array(
    rgba127: np.ndarray, x0: int, y0: int, width: int, height: int, quality: int
) -> Tuple[np.ndarray, int]:
    offsets = np.arange(0, width * height, quality, dtype=np.int64)
    xs = x0 + offsets % width
    ys = y0 + offsets // width
    px = rgba127[ys, xs].astype(np.int64, copy=False)

    opaque = px[:, 3] <= THRESHOLD_ALPHA
    white = np.all(px[:, :3] > THRESHOLD_WHITE, axis=1)
    keep = opaque & ~white

    idx = color_index_array(px[keep, :3], SIGBITS)
    counts = np.bincount(idx, minlength=HISTOGRAM_SIZE).astype(np.int64, copy=False)
    return counts, int(np.count_nonzero(keep))


def _sample_pixels(
    source: PixelSource, x0: int, y0: int, width: int, height: int, quality: int
) -> Tuple[np.ndarray, int]:
    counts = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
    useful = 0
    for offset in range(0, width * height, quality):
        color = source.pixel_color_at(x0 + offset % width, y0 + offset // width)
        if color.alpha > THRESHOLD_ALPHA:
            continue
        if (
            color.red > THRESHOLD_WHITE
            and color.green > THRESHOLD_WHITE
            and color.blue > THRESHOLD_WHITE
        ):
            continue
        useful += 1
        counts[color_index(color.red, color.green, color.blue, SIGBITS)] += 1
    return counts, useful


def build_histogram(
    source: PixelSource,
    quality: int = DEFAULT_QUALITY,
    area: AreaLike = None,
    *,
    debug: bool = False,
) -> Tuple[Histogram, int]:
    """
    Sample `source` and count useful pixels per bucket.

    Returns:
      (histogram, useful_pixel_count)

    Raises:
      InvalidArgumentError: quality < 1 or area outside the image.
      BlankImageError: every sampled pixel was transparent or white.
    """
    quality = _validate_quality(quality)
    image_w, image_h = int(source.width()), int(source.height())
    rect = Area.coerce(area) or Area()
    x0, y0, width, height = rect.resolve(image_w, image_h)

    t0 = time.perf_counter()
    rgba127 = getattr(source, "rgba127", None)
    if callable(rgba127):
        counts, useful = _sample_array(rgba127(), x0, y0, width, height, quality)
    else:
        counts, useful = _sample_pixels(source, x0, y0, width, height, quality)

    if useful == 0:
        raise BlankImageError(
            "Unable to compute the color palette of a blank or transparent image."
        )

    histogram = Histogram(counts)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Area", f"{width}x{height}+{x0}+{y0}"),
                    ("Quality", quality),
                    ("Useful pixels", useful),
                    ("Buckets", len(histogram)),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return histogram, useful


__all__ = ["Histogram", "build_histogram"]
