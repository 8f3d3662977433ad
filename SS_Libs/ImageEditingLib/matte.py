"""
Alpha matting for Sprite Slicer.

Functions:
    apply_mask: Make every pixel of a SelectionMask transparent (new image)
    chroma_key: Make pixels close to a background color transparent (in place)
    resolve_background_color: Pick the chroma key for a source image
"""

from typing import Any, Optional

import numpy as np

from SS_Libs.constants import DEFAULT_COLOR_TOLERANCE
from SS_Libs.ImageEditingLib.errors import DimensionMismatchError
from SS_Libs.ImageEditingLib.image_models import RgbColor, SelectionMask
from SS_Libs.ImageEditingLib.pixel_buffer import (
    ensure_rgba,
    from_rgba_array,
    sample_pixel,
    to_rgba_array,
)
from SS_Libs.pillow_compat import Image


def apply_mask(image: Any, mask: SelectionMask) -> Any:
    """
    Zero the alpha of every selected pixel.

    Color channels are left untouched so the operation is idempotent.

    Args:
        image: PIL Image the mask was computed against
        mask: SelectionMask of the same size

    Returns:
        New RGBA PIL Image; the input is not modified

    Raises:
        DimensionMismatchError: If mask and image sizes differ
    """
    pixels = to_rgba_array(image)
    height, width = pixels.shape[:2]
    if mask.size != (width, height):
        raise DimensionMismatchError(
            f"Mask is {mask.width}x{mask.height} but image is {width}x{height}"
        )

    pixels[:, :, 3][mask.bits] = 0
    return from_rgba_array(pixels)


def chroma_key(
    image: Any,
    bg_color: RgbColor,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
) -> int:
    """
    Make pixels matching `bg_color` transparent, modifying `image` in place.

    Only pixels with alpha > 0 are tested; already transparent pixels keep
    whatever stale RGB they carry and are never reconsidered.

    Args:
        image: RGBA PIL Image (e.g. a freshly composited frame)
        bg_color: Color to remove
        tolerance: Maximum Manhattan RGB distance counted as a match

    Returns:
        Number of pixels made transparent

    Raises:
        TypeError: If image is not a PIL Image
        ValueError: If image is not RGBA or tolerance is negative
    """
    if not hasattr(image, "mode"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")
    if image.mode != "RGBA":
        raise ValueError(f"chroma_key works in place on RGBA images, got {image.mode}")
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")

    pixels = np.asarray(image, dtype=np.uint8)
    rgb = pixels[:, :, :3].astype(np.int16)
    alpha = pixels[:, :, 3].copy()

    distance = (
        np.abs(rgb[:, :, 0] - bg_color.r)
        + np.abs(rgb[:, :, 1] - bg_color.g)
        + np.abs(rgb[:, :, 2] - bg_color.b)
    )
    hits = (alpha > 0) & (distance <= tolerance)
    keyed = int(np.count_nonzero(hits))
    if keyed:
        alpha[hits] = 0
        image.putalpha(Image.fromarray(alpha))
    return keyed


def resolve_background_color(
    image: Any,
    background_color: Optional[RgbColor] = None,
) -> RgbColor:
    """
    Return the explicit color, or the top-left pixel of the source image.

    Always sample the unmodified source sheet, never a crop of it.
    """
    if background_color is not None:
        return RgbColor.parse(background_color)
    img = ensure_rgba(image)
    if img.width == 0 or img.height == 0:
        raise ValueError("Cannot sample a background color from an empty image")
    return RgbColor.from_rgba(sample_pixel(img, 0, 0))
