"""
Shared fixtures: small synthetic images built in memory.
"""
import io

import numpy as np
import pytest
from PIL import Image


def rgba_array(rgb, alpha=255):
    """(H,W,3) uint8 -> (H,W,4) with a constant or per-pixel alpha."""
    rgb = np.asarray(rgb, dtype=np.uint8)
    a = np.broadcast_to(np.asarray(alpha, dtype=np.uint8), rgb.shape[:2])
    return np.concatenate([rgb, a[..., None]], axis=-1)


def png_bytes(rgba):
    buf = io.BytesIO()
    Image.fromarray(np.asarray(rgba, dtype=np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def gradient_rgba():
    """64x64: red follows x, green follows y, blue fixed. 1024 populated buckets."""
    ys, xs = np.mgrid[0:64, 0:64]
    rgb = np.stack(
        [xs * 4, ys * 4, np.full_like(xs, 128)], axis=-1
    ).astype(np.uint8)
    return rgba_array(rgb)


@pytest.fixture
def rgbw_rgba():
    """2x2 red, green, blue, white."""
    rgb = np.array(
        [[[255, 0, 0], [0, 255, 0]], [[0, 0, 255], [255, 255, 255]]], dtype=np.uint8
    )
    return rgba_array(rgb)


@pytest.fixture
def white_rgba():
    return rgba_array(np.full((16, 16, 3), 255, dtype=np.uint8))


@pytest.fixture
def transparent_rgba():
    rgb = np.zeros((16, 16, 3), dtype=np.uint8)
    rgb[..., 0] = 200
    return rgba_array(rgb, alpha=0)


@pytest.fixture
def single_color_rgba():
    rgb = np.zeros((20, 20, 3), dtype=np.uint8)
    rgb[...] = (180, 228, 28)
    return rgba_array(rgb)


@pytest.fixture
def halves_rgba():
    """32x16: left half red, right half blue."""
    rgb = np.zeros((16, 32, 3), dtype=np.uint8)
    rgb[:, :16] = (220, 20, 20)
    rgb[:, 16:] = (20, 20, 220)
    return rgba_array(rgb)


@pytest.fixture
def gradient_png(tmp_path, gradient_rgba):
    path = tmp_path / "gradient.png"
    path.write_bytes(png_bytes(gradient_rgba))
    return path
