# median_palette/vbox.py
from __future__ import annotations

"""
VBox: an axis-aligned box of 5-bit colour buckets over a shared histogram.

Bounds are inclusive bucket coordinates per axis. volume(), count() and avg()
are cached and dropped whenever set_bounds() changes the box; in practice a
box is only reshaped right after copy(), before anything reads it.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import BUCKETS_PER_AXIS, RSHIFT
from .core_types import Axis, RGBTuple
from .errors import InvalidArgumentError
from .histogram import Histogram


class VBox:
    __slots__ = ("_lo", "_hi", "histogram", "_volume", "_count", "_avg")

    def __init__(
        self,
        r1: int,
        r2: int,
        g1: int,
        g2: int,
        b1: int,
        b2: int,
        histogram: Histogram,
    ) -> None:
        self._lo: List[int] = [int(r1), int(g1), int(b1)]
        self._hi: List[int] = [int(r2), int(g2), int(b2)]
        for axis in Axis:
            self._check_range(axis, self._lo[axis], self._hi[axis])
        self.histogram = histogram
        self._volume: Optional[int] = None
        self._count: Optional[int] = None
        self._avg: Optional[RGBTuple] = None

    @staticmethod
    def _check_range(axis: Axis, lo: int, hi: int) -> None:
        if not 0 <= lo <= hi < BUCKETS_PER_AXIS:
            raise InvalidArgumentError(
                f"invalid {axis.label} range [{lo}, {hi}] for a VBox"
            )

    # bounds

    @property
    def r1(self) -> int:
        return self._lo[Axis.RED]

    @property
    def r2(self) -> int:
        return self._hi[Axis.RED]

    @property
    def g1(self) -> int:
        return self._lo[Axis.GREEN]

    @property
    def g2(self) -> int:
        return self._hi[Axis.GREEN]

    @property
    def b1(self) -> int:
        return self._lo[Axis.BLUE]

    @property
    def b2(self) -> int:
        return self._hi[Axis.BLUE]

    def bounds(self, axis: Axis) -> Tuple[int, int]:
        """Inclusive (lo, hi) on one axis."""
        return self._lo[axis], self._hi[axis]

    def set_bounds(self, axis: Axis, lo: int, hi: int) -> None:
        """Reshape one axis and drop cached volume/count/avg."""
        self._check_range(axis, int(lo), int(hi))
        self._lo[axis] = int(lo)
        self._hi[axis] = int(hi)
        self._volume = None
        self._count = None
        self._avg = None

    def as_tuple(self) -> Tuple[int, int, int, int, int, int]:
        """(r1, r2, g1, g2, b1, b2)."""
        return (self.r1, self.r2, self.g1, self.g2, self.b1, self.b2)

    def _slices(self) -> Tuple[slice, slice, slice]:
        return tuple(slice(lo, hi + 1) for lo, hi in zip(self._lo, self._hi))  # type: ignore[return-value]

    def region(self) -> np.ndarray:
        """Read-only view of the histogram cube restricted to this box."""
        return self.histogram.cube[self._slices()]

    # derived values

    def volume(self) -> int:
        if self._volume is None:
            self._volume = (
                (self.r2 - self.r1 + 1) * (self.g2 - self.g1 + 1) * (self.b2 - self.b1 + 1)
            )
        return self._volume

    def count(self) -> int:
        """Pixels in the box; walks whichever is smaller, the box or the populated buckets."""
        if self._count is None:
            _indices, coords, counts = self.histogram.populated()
            if self.volume() > coords.shape[0]:
                lo = np.asarray(self._lo)
                hi = np.asarray(self._hi)
                inside = np.all((coords >= lo) & (coords <= hi), axis=1)
                self._count = int(counts[inside].sum())
            else:
                self._count = int(self.region().sum())
        return self._count

    def populated_buckets(self) -> int:
        """Number of non-empty buckets inside the box."""
        return int(np.count_nonzero(self.region()))

    def avg(self) -> RGBTuple:
        """
        Population-weighted centre colour in 8-bit RGB.

        Each bucket contributes its midpoint ((c + 0.5) * 2**RSHIFT). An empty
        box falls back to its geometric centre, clamped to 255.
        """
        if self._avg is None:
            mult = 1 << RSHIFT
            region = self.region()
            ntot = int(region.sum())
            if ntot:
                sums = []
                for axis in Axis:
                    other = tuple(a for a in range(3) if a != axis)
                    per_slice = region.sum(axis=other)
                    centres = (np.arange(self._lo[axis], self._hi[axis] + 1) + 0.5) * mult
                    sums.append(float(np.dot(per_slice, centres)))
                self._avg = (
                    int(sums[0] / ntot),
                    int(sums[1] / ntot),
                    int(sums[2] / ntot),
                )
            else:
                self._avg = (
                    min(int(mult * (self.r1 + self.r2 + 1) / 2), 255),
                    min(int(mult * (self.g1 + self.g2 + 1) / 2), 255),
                    min(int(mult * (self.b1 + self.b2 + 1) / 2), 255),
                )
        return self._avg

    def copy(self) -> "VBox":
        """Same bounds and histogram reference, fresh caches."""
        return VBox(*self.as_tuple(), self.histogram)

    def contains(self, rgb: Sequence[int], shift: int = RSHIFT) -> bool:
        """True when rgb >> shift lands inside the box (shift=0 for bucket coordinates)."""
        for axis in Axis:
            bucket = int(rgb[axis]) >> shift
            if not self._lo[axis] <= bucket <= self._hi[axis]:
                return False
        return True

    def longest_axis(self) -> Axis:
        """Axis with the widest extent; ties go to red, then green."""
        best = Axis.RED
        for axis in (Axis.GREEN, Axis.BLUE):
            if self._hi[axis] - self._lo[axis] > self._hi[best] - self._lo[best]:
                best = axis
        return best

    @classmethod
    def from_histogram(cls, histogram: Histogram) -> "VBox":
        """Smallest box enclosing every populated bucket."""
        (r1, r2), (g1, g2), (b1, b2) = histogram.bounds()
        return cls(r1, r2, g1, g2, b1, b2, histogram)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VBox):
            return NotImplemented
        return self.as_tuple() == other.as_tuple() and self.histogram is other.histogram

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        r1, r2, g1, g2, b1, b2 = self.as_tuple()
        return f"VBox(r={r1}..{r2}, g={g1}..{g2}, b={b1}..{b2})"


__all__ = ["VBox"]
