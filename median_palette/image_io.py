# median_palette/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Union

import numpy as np
import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import ALPHA_TRANSPARENT, URL_TIMEOUT_SECONDS
from .core_types import PixelColor, PixelSource, assert_u8_image
from .errors import InvalidArgumentError, NotReadableError, NotSupportedError

"""
Image loading (RGBA in sRGB) and the array-backed pixel source.

Accepted sources for load_pixel_source():
  - any PixelSource (returned unchanged)
  - PIL.Image.Image
  - uint8 numpy array, (H,W,3) or (H,W,4) with 0..255 alpha
  - pathlib.Path or path string
  - bytes / bytearray holding an encoded image
  - http(s) URL string (fetched with requests)

Alpha is converted once, here, from Pillow's 0 (transparent)..255 (opaque)
to the 0 (opaque)..127 (transparent) scale the histogram filters use.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

ImageSource = Union[PixelSource, Image.Image, np.ndarray, Path, str, bytes, bytearray]


def alpha_to_127(alpha: np.ndarray) -> np.ndarray:
    """0..255 opaque-high alpha -> 0..127 opaque-low alpha."""
    a = np.asarray(alpha, dtype=np.float64)
    return (ALPHA_TRANSPARENT - np.rint(a / 255.0 * ALPHA_TRANSPARENT)).astype(np.uint8)


class ArrayPixelSource:
    """PixelSource over an (H, W, 4) uint8 RGBA array with 0..255 alpha."""

    def __init__(self, rgba: np.ndarray) -> None:
        arr = assert_u8_image(np.asarray(rgba))
        if arr.shape[-1] == 3:
            opaque = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, opaque], axis=-1)
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidArgumentError("image has no pixels")
        self._rgba = np.ascontiguousarray(arr)
        self._rgba127: Optional[np.ndarray] = None

    def width(self) -> int:
        return int(self._rgba.shape[1])

    def height(self) -> int:
        return int(self._rgba.shape[0])

    def pixel_color_at(self, x: int, y: int) -> PixelColor:
        r, g, b, a = (int(v) for v in self._rgba127_view()[y, x])
        return PixelColor(r, g, b, a)

    def rgba127(self) -> np.ndarray:
        """(H, W, 4) array whose alpha channel is on the 0..127 scale."""
        return self._rgba127_view()

    def _rgba127_view(self) -> np.ndarray:
        if self._rgba127 is None:
            out = self._rgba.copy()
            out[..., 3] = alpha_to_127(self._rgba[..., 3])
            out.setflags(write=False)
            self._rgba127 = out
        return self._rgba127

    @classmethod
    def from_image(cls, im: Image.Image) -> "ArrayPixelSource":
        return cls(np.array(_convert_to_srgb_rgba(im), dtype=np.uint8))


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (OSError, ValueError, ImageCms.PyCMSError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def _open_encoded(data: bytes, label: str) -> ArrayPixelSource:
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return ArrayPixelSource.from_image(im)
    except UnidentifiedImageError as exc:
        raise NotReadableError(f"Unable to decode image from {label}.") from exc
    except OSError as exc:
        raise NotReadableError(f"Unable to read image from {label} ({exc}).") from exc


def load_image_path(path: Path) -> ArrayPixelSource:
    if not path.is_file():
        raise NotReadableError(f"Unable to read image from path ({path}).")
    try:
        with Image.open(path) as im:
            im.load()
            return ArrayPixelSource.from_image(im)
    except UnidentifiedImageError as exc:
        raise NotReadableError(f"Unsupported or corrupt image file ({path}).") from exc
    except OSError as exc:
        raise NotReadableError(f"Unable to decode image from file ({path}).") from exc


def load_image_url(url: str, timeout: float = URL_TIMEOUT_SECONDS) -> ArrayPixelSource:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise NotReadableError(f"Unable to load image from url ({url}).") from exc
    return _open_encoded(response.content, f"url ({url})")


def is_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def load_pixel_source(source: ImageSource) -> PixelSource:
    """Turn any accepted image source into a PixelSource."""
    if isinstance(source, ArrayPixelSource):
        return source
    if isinstance(source, Image.Image):
        return ArrayPixelSource.from_image(source)
    if isinstance(source, np.ndarray):
        return ArrayPixelSource(source)
    if isinstance(source, (bytes, bytearray)):
        return _open_encoded(bytes(source), "binary data")
    if isinstance(source, Path):
        return load_image_path(source)
    if isinstance(source, str):
        if is_url(source):
            return load_image_url(source)
        return load_image_path(Path(source))
    if isinstance(source, PixelSource):
        return source
    raise NotSupportedError(
        f"Image source of type {type(source).__name__} is not supported."
    )


__all__ = [
    "ImageSource",
    "ArrayPixelSource",
    "alpha_to_127",
    "load_image_path",
    "load_image_url",
    "load_pixel_source",
    "is_url",
]
