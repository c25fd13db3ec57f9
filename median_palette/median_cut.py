# median_palette/median_cut.py
from __future__ import annotations

"""
Median-cut splitter.

Exports:
  sum_colors(axis, histogram, vbox) -> (total, partial_sum)
  do_cut(axis, vbox, partial_sum, total) -> (low, high) | None
  median_cut_apply(histogram, vbox) -> [VBox] | [VBox, VBox] | None

Notes:
  partial_sum is indexed by absolute bucket coordinate along the cut axis:
  partial_sum[c] is the population of the box on the low side of c, inclusive.
  A cut at d2 keeps [lo, d2] in the low child and [d2 + 1, hi] in the high one,
  so a valid d2 lies in [lo, hi - 1] with 0 < partial_sum[d2] < total.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import BUCKETS_PER_AXIS
from .core_types import Axis
from .histogram import Histogram
from .vbox import VBox


def sum_colors(axis: Axis, histogram: Histogram, vbox: VBox) -> Tuple[int, np.ndarray]:
    """
    Cumulative population along `axis`, summed over the other two axis ranges.

    Returns (total, partial_sum) with partial_sum of length BUCKETS_PER_AXIS:
    zero below the box, the running sum inside it, `total` above it.
    """
    lo, hi = vbox.bounds(axis)
    region = histogram.cube[
        vbox.r1 : vbox.r2 + 1, vbox.g1 : vbox.g2 + 1, vbox.b1 : vbox.b2 + 1
    ]
    other = tuple(a for a in range(3) if a != axis)
    running = np.cumsum(region.sum(axis=other), dtype=np.int64)
    total = int(running[-1])

    partial_sum = np.zeros(BUCKETS_PER_AXIS, dtype=np.int64)
    partial_sum[lo : hi + 1] = running
    partial_sum[hi + 1 :] = total
    return total, partial_sum


def do_cut(
    axis: Axis, vbox: VBox, partial_sum: Sequence[int], total: int
) -> Optional[Tuple[VBox, VBox]]:
    """
    Cut `vbox` on `axis` near the median slice.

    The cut plane is biased into the larger side of the median slice, then
    nudged so that neither child ends up without pixels. Returns None when no
    such cut exists on this axis (all pixels sit in a single slice).
    """
    lo, hi = vbox.bounds(axis)
    if hi <= lo or total <= 0:
        return None
    sums = np.asarray(partial_sum, dtype=np.int64)

    half = total / 2
    crossing = np.flatnonzero(sums[lo : hi + 1] > half)
    if crossing.size == 0:
        return None
    i = lo + int(crossing[0])

    left = i - lo
    right = hi - i
    if left <= right:
        d2 = min(hi - 1, int(i + right / 2))
    else:
        d2 = max(lo, int(i - 1 - left / 2))

    # never leave the low child empty
    while d2 < hi - 1 and sums[d2] == 0:
        d2 += 1
    # never leave the high child empty
    while d2 > lo and sums[d2] >= total and sums[d2 - 1] > 0:
        d2 -= 1

    if not 0 < sums[d2] < total:
        return None

    low = vbox.copy()
    high = vbox.copy()
    low.set_bounds(axis, lo, d2)
    high.set_bounds(axis, d2 + 1, hi)
    return low, high


def _axes_by_extent(vbox: VBox) -> List[Axis]:
    first = vbox.longest_axis()
    rest = sorted(
        (a for a in Axis if a != first),
        key=lambda a: -(vbox.bounds(a)[1] - vbox.bounds(a)[0]),
    )
    return [first, *rest]


def median_cut_apply(histogram: Histogram, vbox: VBox) -> Optional[List[VBox]]:
    """
    Split `vbox` in two.

    Returns:
      None         : the box holds no pixels.
      [copy]       : the box holds a single populated bucket and cannot be split.
      [low, high]  : both children hold pixels; volumes and counts add up to the parent.

    The longest axis is tried first. When all of its pixels sit in one slice
    the remaining axes are tried, widest first.
    """
    if not vbox.count():
        return None
    if vbox.count() == 1 or vbox.populated_buckets() < 2:
        return [vbox.copy()]

    for axis in _axes_by_extent(vbox):
        total, partial_sum = sum_colors(axis, histogram, vbox)
        children = do_cut(axis, vbox, partial_sum, total)
        if children is not None:
            return list(children)
    return None


__all__ = ["sum_colors", "do_cut", "median_cut_apply"]
