"""
Tunables for the median-cut quantizer.

- Histogram precision (SIGBITS, RSHIFT)
- Pixel filters (THRESHOLD_ALPHA, THRESHOLD_WHITE)
- Iteration control (MAX_ITERATIONS, FRACT_BY_POPULATIONS)
- Public API defaults and bounds
"""
from __future__ import annotations

# =========================
# Histogram precision
# =========================
SIGBITS: int = 5  # significant bits kept per channel
RSHIFT: int = 8 - SIGBITS  # 8-bit value >> RSHIFT -> bucket coordinate
BUCKETS_PER_AXIS: int = 1 << SIGBITS
HISTOGRAM_SIZE: int = 1 << (3 * SIGBITS)  # 32768 for SIGBITS=5

# =========================
# Pixel filters
# =========================
# Alpha on the 0..127 opaque->transparent scale; larger values are skipped.
ALPHA_TRANSPARENT: int = 127
THRESHOLD_ALPHA: int = 62
# Pixels with all three channels above this are treated as background white.
THRESHOLD_WHITE: int = 250

# =========================
# Iteration control
# =========================
MAX_ITERATIONS: int = 1000
# Share of the requested colours produced by the population-sorted phase.
FRACT_BY_POPULATIONS: float = 0.75

# =========================
# API defaults / bounds
# =========================
MIN_COLORS: int = 2
MAX_COLORS: int = 256
DEFAULT_COLOR_COUNT: int = 10
DEFAULT_QUALITY: int = 10
# get_color() asks for a small palette and keeps the first entry.
DOMINANT_PALETTE_SIZE: int = 5

URL_TIMEOUT_SECONDS: float = 10.0

__all__ = [
    "SIGBITS",
    "RSHIFT",
    "BUCKETS_PER_AXIS",
    "HISTOGRAM_SIZE",
    "ALPHA_TRANSPARENT",
    "THRESHOLD_ALPHA",
    "THRESHOLD_WHITE",
    "MAX_ITERATIONS",
    "FRACT_BY_POPULATIONS",
    "MIN_COLORS",
    "MAX_COLORS",
    "DEFAULT_COLOR_COUNT",
    "DEFAULT_QUALITY",
    "DOMINANT_PALETTE_SIZE",
    "URL_TIMEOUT_SECONDS",
]
