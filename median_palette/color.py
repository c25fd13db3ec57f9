# median_palette/color.py
from __future__ import annotations

"""
Colour value object and the output formats offered by get_palette().

Formats:
  'array' : [r, g, b]              (default)
  'rgb'   : 'rgb(r, g, b)'
  'hex'   : '#rrggbb'
  'int'   : 0xRRGGBB as an int
  'obj'   : the Color itself
"""

from dataclasses import dataclass
from typing import List, Sequence, Union

from .core_types import HexStr, RGBTuple
from .errors import InvalidArgumentError, NotSupportedError

FormattedColor = Union[List[int], str, int, "Color"]

OUTPUT_FORMATS = ("array", "rgb", "hex", "int", "obj")


@dataclass(frozen=True)
class Color:
    red: int = 0
    green: int = 0
    blue: int = 0

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0 <= int(value) <= 255:
                raise InvalidArgumentError(f"{name} must be in [0, 255], got {value}")

    @classmethod
    def from_rgb(cls, rgb: Sequence[int]) -> "Color":
        return cls(int(rgb[0]), int(rgb[1]), int(rgb[2]))

    @classmethod
    def from_int(cls, value: int) -> "Color":
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @classmethod
    def from_hex(cls, hex_str: str) -> "Color":
        """Parse '#rgb', '#rrggbb', 'rgb' or 'rrggbb' (case-insensitive)."""
        s = hex_str.strip().lower().lstrip("#")
        if len(s) == 3:
            s = "".join(ch * 2 for ch in s)
        if len(s) != 6:
            raise InvalidArgumentError("hex must be 'rrggbb' or 'rgb'")
        try:
            return cls(int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
        except ValueError:
            raise InvalidArgumentError(f"invalid hex colour {hex_str!r}") from None

    @property
    def rgb(self) -> RGBTuple:
        return (self.red, self.green, self.blue)

    def to_int(self) -> int:
        return (self.red << 16) + (self.green << 8) + self.blue

    def to_hex(self, prefix: str = "") -> HexStr:
        return f"{prefix}{self.red:02x}{self.green:02x}{self.blue:02x}"

    def to_array(self) -> List[int]:
        return [self.red, self.green, self.blue]

    def to_rgb_string(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"

    def format(self, kind: str) -> FormattedColor:
        k = kind.lower()
        if k == "rgb":
            return self.to_rgb_string()
        if k == "hex":
            return self.to_hex("#")
        if k == "int":
            return self.to_int()
        if k == "array":
            return self.to_array()
        if k == "obj":
            return self
        raise NotSupportedError(f"Color format ({kind}) is not supported.")

    def __str__(self) -> str:
        return self.to_hex("#")


__all__ = ["Color", "FormattedColor", "OUTPUT_FORMATS"]
