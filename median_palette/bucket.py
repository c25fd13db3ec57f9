# median_palette/bucket.py
from __future__ import annotations

"""
Colour bucket index: pack an RGB triple into one integer and back.

Exports:
  color_index(r, g, b, sig_bits=SIGBITS) -> int
  colors_from_index(index, sig_bits=SIGBITS) -> RGBTuple
  color_index_array(rgb, sig_bits=SIGBITS) -> NDArray[int64]
  colors_from_index_array(indices, sig_bits=SIGBITS) -> NDArray[int64] (N,3)

Notes:
  Channels are always truncated to `sig_bits` significant bits before packing,
  so 8-bit values and bucket coordinates shifted back to 8 bits give the same key.
  With sig_bits=8 the key is the usual 0xRRGGBB integer.
"""

import numpy as np
from numpy.typing import NDArray

from .constants import SIGBITS
from .core_types import RGBTuple
from .errors import InvalidArgumentError


def _check_sig_bits(sig_bits: int) -> int:
    if not 1 <= sig_bits <= 8:
        raise InvalidArgumentError(f"sig_bits must be in [1, 8], got {sig_bits}")
    return sig_bits


def color_index(red: int, green: int, blue: int, sig_bits: int = SIGBITS) -> int:
    """Pack 8-bit channels into `(r << 2n) | (g << n) | b` with n = sig_bits."""
    shift = 8 - _check_sig_bits(sig_bits)
    return (
        ((red >> shift) << (2 * sig_bits))
        | ((green >> shift) << sig_bits)
        | (blue >> shift)
    )


def colors_from_index(index: int, sig_bits: int = SIGBITS) -> RGBTuple:
    """Inverse of color_index; returns the truncated (sig_bits-wide) channels."""
    mask = (1 << _check_sig_bits(sig_bits)) - 1
    return (
        (index >> (2 * sig_bits)) & mask,
        (index >> sig_bits) & mask,
        index & mask,
    )


def color_index_array(rgb: np.ndarray, sig_bits: int = SIGBITS) -> NDArray[np.int64]:
    """Vectorised color_index over the last axis of an (..., 3) array."""
    shift = 8 - _check_sig_bits(sig_bits)
    v = np.asarray(rgb, dtype=np.int64) >> shift
    return (v[..., 0] << (2 * sig_bits)) | (v[..., 1] << sig_bits) | v[..., 2]


def colors_from_index_array(
    indices: np.ndarray, sig_bits: int = SIGBITS
) -> NDArray[np.int64]:
    """Vectorised colors_from_index; returns an (N, 3) int64 array."""
    mask = (1 << _check_sig_bits(sig_bits)) - 1
    idx = np.asarray(indices, dtype=np.int64)
    return np.stack(
        [(idx >> (2 * sig_bits)) & mask, (idx >> sig_bits) & mask, idx & mask],
        axis=-1,
    )


__all__ = [
    "color_index",
    "colors_from_index",
    "color_index_array",
    "colors_from_index_array",
]
