"""
RGBA pixel buffer helpers for Sprite Slicer.

Thin layer over Pillow and numpy that every slicing stage goes through:
decoding to RGBA, numpy views of the channels, canvas allocation,
crop-and-scale, and PNG encoding.

Functions:
    decode_image: Decode a file, path or byte string into an RGBA image
    ensure_rgba: Validate a PIL Image and convert it to RGBA
    to_rgba_array / from_rgba_array: numpy round trip of RGBA pixels
    new_canvas: Allocate a fully transparent RGBA drawing surface
    new_clip_mask: Allocate an empty 8-bit polygon clip mask
    crop_and_scale: Cut a rect out of an image and resize it
    sample_pixel: Read one RGBA pixel
    encode_png: Encode an image to PNG bytes
"""

import io
from pathlib import Path
from typing import Any, Tuple, Union

import numpy as np

from SS_Libs.constants import DEFAULT_OUTPUT_FORMAT, RESAMPLE_BILINEAR, RESAMPLE_NEAREST
from SS_Libs.ImageEditingLib.errors import SurfaceAcquisitionError
from SS_Libs.ImageEditingLib.image_models import RgbaColor
from SS_Libs.pillow_compat import Image

_RESAMPLE_FILTERS = {
    RESAMPLE_BILINEAR: Image.Resampling.BILINEAR,
    RESAMPLE_NEAREST: Image.Resampling.NEAREST,
}


def decode_image(source: Union[str, Path, bytes, Any]) -> Any:
    """
    Decode an image into an RGBA PIL Image.

    Args:
        source: Path, raw encoded bytes, or a binary file object

    Returns:
        RGBA PIL Image with pixel data fully loaded

    Raises:
        Whatever Pillow raises for unreadable or unsupported data
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    with Image.open(source) as img:
        img.load()
        return img.convert("RGBA")


def ensure_rgba(image: Any) -> Any:
    """
    Return `image` in RGBA mode.

    Raises:
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "mode") or not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")
    if image.mode != "RGBA":
        return image.convert("RGBA")
    return image


def to_rgba_array(image: Any) -> np.ndarray:
    """Copy the pixels of `image` into a (height, width, 4) uint8 array."""
    return np.array(ensure_rgba(image), dtype=np.uint8)


def from_rgba_array(array: np.ndarray) -> Any:
    """Build an RGBA PIL Image from a (height, width, 4) uint8 array."""
    if array.ndim != 3 or array.shape[2] != 4:
        raise ValueError(f"Expected (height, width, 4) array, got shape {array.shape}")
    return Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))


def new_canvas(width: int, height: int) -> Any:
    """
    Allocate a fully transparent RGBA canvas.

    Raises:
        SurfaceAcquisitionError: If Pillow cannot allocate the surface
    """
    try:
        return Image.new("RGBA", (int(width), int(height)), (0, 0, 0, 0))
    except (MemoryError, ValueError) as exc:
        raise SurfaceAcquisitionError(
            f"Could not allocate {width}x{height} canvas: {exc}"
        ) from exc


def new_clip_mask(width: int, height: int) -> Any:
    """
    Allocate an empty 8-bit clip mask (0 = outside, 255 = inside).

    Raises:
        SurfaceAcquisitionError: If Pillow cannot allocate the mask
    """
    try:
        return Image.new("L", (int(width), int(height)), 0)
    except (MemoryError, ValueError) as exc:
        raise SurfaceAcquisitionError(
            f"Could not allocate {width}x{height} clip mask: {exc}"
        ) from exc


def resample_filter(name: str) -> Any:
    try:
        return _RESAMPLE_FILTERS[name]
    except KeyError:
        raise ValueError(
            f"Unsupported resample mode: {name}. Use one of {sorted(_RESAMPLE_FILTERS)}"
        ) from None


def crop_and_scale(
    image: Any,
    box: Tuple[int, int, int, int],
    size: Tuple[int, int],
    resample: str = RESAMPLE_BILINEAR,
) -> Any:
    """
    Crop `box` (x, y, width, height) out of `image` and resize it to `size`.

    Areas of the box outside the image come back fully transparent.
    No resampling happens when the crop already has the requested size.
    """
    x, y, width, height = box
    cropped = ensure_rgba(image).crop((x, y, x + width, y + height))
    if cropped.size == tuple(size):
        return cropped
    return cropped.resize(tuple(size), resample_filter(resample))


def sample_pixel(image: Any, x: int, y: int) -> RgbaColor:
    return tuple(ensure_rgba(image).getpixel((x, y)))


def encode_png(image: Any) -> bytes:
    buffer = io.BytesIO()
    ensure_rgba(image).save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    return buffer.getvalue()
