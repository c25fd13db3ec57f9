# median_palette/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import enum
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidArgumentError

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)
BucketCounts = NDArray[np.int64]  # (2 ** (3 * SIGBITS),)

AreaLike = Union["Area", Mapping[str, Optional[int]], Sequence[int], None]


class Axis(enum.IntEnum):
    """Colour-space axis of a VBox; the value indexes (r, g, b) triples."""

    RED = 0
    GREEN = 1
    BLUE = 2

    @property
    def label(self) -> str:
        return "rgb"[self.value]

    @classmethod
    def from_label(cls, label: str) -> "Axis":
        key = label.strip().lower()
        for axis in cls:
            if key in (axis.label, axis.name.lower()):
                return axis
        raise InvalidArgumentError(f"unknown colour axis {label!r}")


# Value objects


@dataclass(frozen=True)
class PixelColor:
    """One pixel as read from a source. Alpha is 0 (opaque) .. 127 (transparent)."""

    red: int
    green: int
    blue: int
    alpha: int = 0

    @property
    def rgb(self) -> RGBTuple:
        return (self.red, self.green, self.blue)


@dataclass(frozen=True)
class Area:
    """
    Rectangular sampling area in pixel coordinates.

    width/height default to the image extent minus the origin.
    """

    x: int = 0
    y: int = 0
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def coerce(cls, value: AreaLike) -> Optional["Area"]:
        """Accept an Area, a {'x','y','w','h'} mapping, an (x, y[, w, h]) sequence or None."""
        if value is None or isinstance(value, Area):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"x", "y", "w", "h"}
            if unknown:
                raise InvalidArgumentError(f"unknown area keys: {sorted(unknown)}")
            return cls(
                x=int(value.get("x") or 0),
                y=int(value.get("y") or 0),
                width=None if value.get("w") is None else int(value["w"]),  # type: ignore[arg-type]
                height=None if value.get("h") is None else int(value["h"]),  # type: ignore[arg-type]
            )
        parts = list(value)
        if len(parts) not in (2, 4):
            raise InvalidArgumentError("area must be (x, y) or (x, y, w, h)")
        if len(parts) == 2:
            return cls(int(parts[0]), int(parts[1]))
        return cls(int(parts[0]), int(parts[1]), int(parts[2]), int(parts[3]))

    def resolve(self, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
        """Return concrete (x, y, width, height); raise if it leaves the image."""
        x, y = int(self.x), int(self.y)
        width = image_width - x if self.width is None else int(self.width)
        height = image_height - y if self.height is None else int(self.height)
        if x < 0 or y < 0:
            raise InvalidArgumentError("Area origin must be non-negative.")
        if width <= 0 or height <= 0:
            raise InvalidArgumentError("Area width and height must be positive.")
        if x + width > image_width or y + height > image_height:
            raise InvalidArgumentError("Area is out of image bounds.")
        return x, y, width, height


# Collaborator protocol


@runtime_checkable
class PixelSource(Protocol):
    """Anything that can report its size and the colour of a pixel."""

    def width(self) -> int: ...

    def height(self) -> int: ...

    def pixel_color_at(self, x: int, y: int) -> PixelColor: ...


# Small helpers


def assert_u8_image(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] not in (3, 4):
        raise InvalidArgumentError("expected uint8 (H,W,3/4) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "BucketCounts",
    "AreaLike",
    "Axis",
    # value objects
    "PixelColor",
    "Area",
    # protocols
    "PixelSource",
    # helpers
    "assert_u8_image",
]
