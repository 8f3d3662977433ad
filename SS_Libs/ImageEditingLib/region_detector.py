"""
Automatic sprite detection for Sprite Slicer.

Finds the opaque "islands" of a sprite sheet with a 4-connected
connected-component pass over the alpha channel and returns their bounding
rects in reading order.

Example:
    >>> sheet = decode_image("walk_cycle.png")
    >>> rects = detect_sprites(sheet)
    >>> [(r.x, r.y, r.width, r.height) for r in rects]
    [(2, 3, 30, 41), (40, 1, 31, 43), ...]
"""

import logging
from functools import cmp_to_key
from typing import Any, List

import numpy as np

from SS_Libs.constants import ALPHA_THRESHOLD, ROW_TOLERANCE
from SS_Libs.ImageEditingLib.image_models import Rect
from SS_Libs.ImageEditingLib.pixel_buffer import ensure_rgba

logger = logging.getLogger(__name__)


def detect_sprites(
    image: Any,
    alpha_threshold: int = ALPHA_THRESHOLD,
    row_tolerance: int = ROW_TOLERANCE,
) -> List[Rect]:
    """
    Detect connected opaque regions and return their bounding rects.

    Pixels are scanned row by row; every unvisited pixel whose alpha is above
    `alpha_threshold` starts a flood fill over its 4-connected neighbours
    that also pass the threshold.

    Args:
        image: PIL Image (converted to RGBA)
        alpha_threshold: Alpha values (0-255) above this are opaque
        row_tolerance: Regions whose top edges differ by at most this many
                       pixels are treated as one row and ordered by x

    Returns:
        Rects in reading order, empty if nothing is opaque

    Raises:
        TypeError: If image is not a PIL Image
        ValueError: If alpha_threshold is outside 0-255
    """
    if not (0 <= alpha_threshold <= 255):
        raise ValueError(f"alpha_threshold must be 0-255, got {alpha_threshold}")

    img = ensure_rgba(image)
    width, height = img.size
    if width == 0 or height == 0:
        return []

    alpha = np.asarray(img.getchannel("A"), dtype=np.uint8)
    opaque_flat = (alpha > alpha_threshold).ravel()
    opaque = opaque_flat.tolist()
    visited = bytearray(width * height)
    rects: List[Rect] = []

    # Only opaque pixels can start a component; flatnonzero keeps row-major order
    for start in np.flatnonzero(opaque_flat).tolist():
        if visited[start]:
            continue
        rects.append(_fill_component(start, width, height, opaque, visited))

    logger.debug(f"Detected {len(rects)} regions in {width}x{height} image")
    return sort_reading_order(rects, row_tolerance)


def _fill_component(
    start: int,
    width: int,
    height: int,
    opaque: List[bool],
    visited: bytearray,
) -> Rect:
    min_x = max_x = start % width
    min_y = max_y = start // width
    visited[start] = 1
    stack = [start]

    while stack:
        idx = stack.pop()
        x = idx % width
        y = idx // width

        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

        if x + 1 < width:
            n = idx + 1
            if not visited[n] and opaque[n]:
                visited[n] = 1
                stack.append(n)
        if x > 0:
            n = idx - 1
            if not visited[n] and opaque[n]:
                visited[n] = 1
                stack.append(n)
        if y + 1 < height:
            n = idx + width
            if not visited[n] and opaque[n]:
                visited[n] = 1
                stack.append(n)
        if y > 0:
            n = idx - width
            if not visited[n] and opaque[n]:
                visited[n] = 1
                stack.append(n)

    return Rect(
        x=max(0, min_x),
        y=max(0, min_y),
        width=min(width - min_x, max_x - min_x + 1),
        height=min(height - min_y, max_y - min_y + 1),
    )


def sort_reading_order(rects: List[Rect], row_tolerance: int = ROW_TOLERANCE) -> List[Rect]:
    """
    Sort rects top-left to bottom-right.

    Two rects whose y differs by more than `row_tolerance` are ordered by y;
    otherwise they share a row and are ordered by x.
    """
    def compare(a: Rect, b: Rect) -> int:
        row_diff = a.y - b.y
        if abs(row_diff) > row_tolerance:
            return row_diff
        return a.x - b.x

    return sorted(rects, key=cmp_to_key(compare))
