"""
Magic-wand selection for Sprite Slicer.

Grows a region from a seed pixel across 4-connected neighbours whose RGB
color stays within a Manhattan distance of the seed color. The resulting
SelectionMask is consumed by `matte.apply_mask` to erase a background area.
"""

import logging
import math
from typing import Any, Optional

import numpy as np

from SS_Libs.constants import DEFAULT_COLOR_TOLERANCE
from SS_Libs.ImageEditingLib.image_models import SelectionMask
from SS_Libs.ImageEditingLib.pixel_buffer import to_rgba_array

logger = logging.getLogger(__name__)


def flood_fill(
    image: Any,
    x: float,
    y: float,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
) -> Optional[SelectionMask]:
    """
    Select the region connected to (x, y) with a similar color.

    A neighbour joins the selection when it is not fully transparent and the
    sum of its absolute RGB differences to the seed pixel is <= tolerance.

    Args:
        image: PIL Image (converted to RGBA)
        x, y: Seed coordinates; fractional values are floored
        tolerance: Maximum Manhattan RGB distance (0-765 is meaningful)

    Returns:
        SelectionMask sized like the image, or None when the seed is out of
        bounds or fully transparent

    Raises:
        TypeError: If image is not a PIL Image
        ValueError: If tolerance is negative
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")

    pixels = to_rgba_array(image)
    height, width = pixels.shape[:2]

    seed_x = math.floor(x)
    seed_y = math.floor(y)
    if not (0 <= seed_x < width and 0 <= seed_y < height):
        return None

    seed_r, seed_g, seed_b, seed_a = (int(v) for v in pixels[seed_y, seed_x])
    if seed_a == 0:
        return None

    rgb = pixels[:, :, :3].astype(np.int16)
    distance = (
        np.abs(rgb[:, :, 0] - seed_r)
        + np.abs(rgb[:, :, 1] - seed_g)
        + np.abs(rgb[:, :, 2] - seed_b)
    )
    candidate = ((pixels[:, :, 3] > 0) & (distance <= tolerance)).ravel().tolist()

    selected = bytearray(width * height)
    start = seed_y * width + seed_x
    selected[start] = 1
    stack = [start]

    while stack:
        idx = stack.pop()
        px = idx % width

        if px + 1 < width:
            n = idx + 1
            if not selected[n] and candidate[n]:
                selected[n] = 1
                stack.append(n)
        if px > 0:
            n = idx - 1
            if not selected[n] and candidate[n]:
                selected[n] = 1
                stack.append(n)
        if idx + width < width * height:
            n = idx + width
            if not selected[n] and candidate[n]:
                selected[n] = 1
                stack.append(n)
        if idx >= width:
            n = idx - width
            if not selected[n] and candidate[n]:
                selected[n] = 1
                stack.append(n)

    bits = np.frombuffer(bytes(selected), dtype=np.uint8).reshape(height, width).astype(bool)
    mask = SelectionMask(width=width, height=height, bits=bits)
    logger.debug(
        f"Flood fill from ({seed_x}, {seed_y}) selected {mask.count} pixels "
        f"(tolerance {tolerance})"
    )
    return mask
