# median_palette/quantize.py
from __future__ import annotations

"""
Modified median-cut quantization (MMCQ).

Exports:
  population_key(vbox), population_volume_key(vbox)
  quantize_iter(queue, target, histogram, debug=False) -> int
  quantize_to_color_map(num_pixels, max_colors, histogram, debug=False) -> ColorMap
  quantize(num_pixels, max_colors, histogram, debug=False) -> list[RGBTuple]
  ColorMap

Pipeline:
  histogram -> VBox over the populated buckets
  phase 1: split by population until FRACT_BY_POPULATIONS * max_colors boxes
  phase 2: rebuild the queue keyed by population * volume, split to max_colors
  leaves -> averaged colours, largest population * volume first

Palette size:
  Exactly max_colors colours whenever the histogram has at least max_colors
  populated buckets. With fewer populated buckets every bucket becomes its own
  box and the palette is that long instead ("undershoot"); nothing is padded.
"""

import math
from typing import List, Optional, Sequence, Tuple

from .constants import FRACT_BY_POPULATIONS, MAX_COLORS, MAX_ITERATIONS, MIN_COLORS
from .core_types import RGBTuple
from .errors import InvalidArgumentError, QuantizationError
from .histogram import Histogram
from .median_cut import median_cut_apply
from .pqueue import PQueue
from .utils import debug_log, key_value_pairs_to_string, warn
from .vbox import VBox


def population_key(vbox: VBox) -> int:
    return vbox.count()


def population_volume_key(vbox: VBox) -> int:
    return vbox.count() * vbox.volume()


def quantize_iter(
    queue: PQueue[VBox],
    target: float,
    histogram: Histogram,
    *,
    debug: bool = False,
) -> int:
    """
    Split the top box of `queue` until it holds at least `target` boxes.

    Boxes that cannot be split (empty, or a single populated bucket) are set
    aside for the rest of the call and pushed back before returning, so they
    are not popped again and again. Each pop counts as one iteration; the loop
    stops after MAX_ITERATIONS or when nothing splittable is left.

    Returns:
      Number of iterations used.

    Raises:
      QuantizationError: the splitter returned nothing for a non-empty box.
    """
    n_colors = len(queue)
    n_iterations = 0
    settled: List[VBox] = []

    while n_colors < target:
        if n_iterations >= MAX_ITERATIONS:
            if debug:
                warn(f"iteration cap reached ({MAX_ITERATIONS}) at {n_colors} boxes")
            break
        if not len(queue):
            if debug:
                debug_log(f"no splittable box left at {n_colors} boxes")
            break

        n_iterations += 1
        vbox = queue.pop()
        if not vbox.count():
            settled.append(vbox)
            continue

        children = median_cut_apply(histogram, vbox)
        if not children:
            raise QuantizationError(f"median cut produced no boxes for {vbox!r}")
        if len(children) == 1:
            settled.append(children[0])
            continue

        queue.push(children[0])
        queue.push(children[1])
        n_colors += 1

    for vbox in settled:
        queue.push(vbox)
    return n_iterations


def _validate(num_pixels: int, max_colors: int, histogram: Histogram) -> None:
    if num_pixels <= 0:
        raise InvalidArgumentError("Zero usable pixels found in image.")
    if not MIN_COLORS <= max_colors <= MAX_COLORS:
        raise InvalidArgumentError(
            f"The maxColors parameter must be between {MIN_COLORS} and {MAX_COLORS} inclusive."
        )
    if histogram.is_empty():
        raise InvalidArgumentError("Image produced an empty histogram.")


def _run_phases(
    max_colors: int, histogram: Histogram, debug: bool
) -> PQueue[VBox]:
    queue: PQueue[VBox] = PQueue(population_key, [VBox.from_histogram(histogram)])

    first_target = FRACT_BY_POPULATIONS * max_colors
    it1 = quantize_iter(queue, first_target, histogram, debug=debug)

    queue = PQueue(population_volume_key, queue.contents())
    it2 = quantize_iter(queue, max_colors, histogram, debug=debug)

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Phase 1 target", math.ceil(first_target)),
                    ("Phase 1 iterations", it1),
                    ("Phase 2 target", max_colors),
                    ("Phase 2 iterations", it2),
                    ("Boxes", len(queue)),
                ]
            )
        )
        if len(queue) < max_colors:
            warn(
                f"palette undershoot: {len(queue)} of {max_colors} colours "
                f"({len(histogram)} populated buckets)"
            )
    return queue


class ColorMap:
    """
    Final boxes with their average colours, largest population * volume first.

    map() snaps an 8-bit colour onto the palette: the colour of the first box
    containing it, else the nearest palette colour.
    """

    def __init__(self, vboxes: Sequence[VBox]) -> None:
        ordered = sorted(vboxes, key=population_volume_key)
        ordered.reverse()
        self._entries: List[Tuple[VBox, RGBTuple]] = [(v, v.avg()) for v in ordered]

    @property
    def vboxes(self) -> List[VBox]:
        return [v for v, _c in self._entries]

    def palette(self) -> List[RGBTuple]:
        return [c for _v, c in self._entries]

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def map(self, color: Sequence[int]) -> Optional[RGBTuple]:
        for vbox, avg in self._entries:
            if vbox.contains(color):
                return avg
        return self.nearest(color)

    def nearest(self, color: Sequence[int]) -> Optional[RGBTuple]:
        best: Optional[RGBTuple] = None
        best_d2: Optional[int] = None
        for _vbox, avg in self._entries:
            d2 = (
                (int(color[0]) - avg[0]) ** 2
                + (int(color[1]) - avg[1]) ** 2
                + (int(color[2]) - avg[2]) ** 2
            )
            if best_d2 is None or d2 < best_d2:
                best, best_d2 = avg, d2
        return best


def quantize_to_color_map(
    num_pixels: int, max_colors: int, histogram: Histogram, *, debug: bool = False
) -> ColorMap:
    _validate(num_pixels, max_colors, histogram)
    queue = _run_phases(max_colors, histogram, debug)
    return ColorMap(queue.contents())


def quantize(
    num_pixels: int, max_colors: int, histogram: Histogram, *, debug: bool = False
) -> List[RGBTuple]:
    """
    Reduce `histogram` to at most `max_colors` representative colours.

    Raises:
      InvalidArgumentError: num_pixels <= 0, max_colors outside [2, 256], or
        an empty histogram.
    """
    return quantize_to_color_map(
        num_pixels, max_colors, histogram, debug=debug
    ).palette()


__all__ = [
    "population_key",
    "population_volume_key",
    "quantize_iter",
    "quantize_to_color_map",
    "quantize",
    "ColorMap",
]
