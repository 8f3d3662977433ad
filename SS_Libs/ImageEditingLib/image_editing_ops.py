"""
Editing operations for Sprite Slicer.

This module provides the helpers an editor front end needs around the core
pipeline: turning a free-hand lasso into a rect, hit-testing rects, erasing a
wand selection, and writing frames out.

Functions:
    rect_from_path: Bounding rect (with path) of a lasso stroke
    find_rect_at_point: Index of the top-most rect under a point
    remove_rect_at_point: Copy of a rect list without the rect under a point
    erase_region: Flood-select a region and make it transparent
    encode_frames: PNG-encode frames keyed by file name
    save_frames: Batch save frames to disk
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from SS_Libs.constants import (
    DEFAULT_COLOR_TOLERANCE,
    DEFAULT_OUTPUT_FORMAT,
    FRAME_FILE_EXTENSION,
    FRAME_FILE_PREFIX,
    MIN_LASSO_POINTS,
    MIN_LASSO_SIZE,
)
from SS_Libs.ImageEditingLib.flood_selector import flood_fill
from SS_Libs.ImageEditingLib.image_models import Point, ProcessedFrame, Rect
from SS_Libs.ImageEditingLib.matte import apply_mask
from SS_Libs.ImageEditingLib.pixel_buffer import ensure_rgba

PointLike = Union[Point, Tuple[float, float]]


def _as_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    return Point(float(value[0]), float(value[1]))


def rect_from_path(
    points: Sequence[PointLike],
    min_size: int = MIN_LASSO_SIZE,
) -> Optional[Rect]:
    """
    Build the rect enclosing a lasso stroke.

    Args:
        points: Stroke points in image coordinates
        min_size: Strokes whose bounding box is not larger than this on
                  both axes are rejected

    Returns:
        Rect with the stroke attached as its path, or None for strokes with
        fewer than three points or a box that is too small
    """
    if len(points) < MIN_LASSO_POINTS:
        return None

    path = tuple(_as_point(p) for p in points)
    min_x = min(p.x for p in path)
    max_x = max(p.x for p in path)
    min_y = min(p.y for p in path)
    max_y = max(p.y for p in path)

    width = math.ceil(max_x - min_x)
    height = math.ceil(max_y - min_y)
    if width <= min_size or height <= min_size:
        return None

    return Rect(
        x=math.floor(min_x),
        y=math.floor(min_y),
        width=width,
        height=height,
        path=path,
    )


def find_rect_at_point(rects: Sequence[Rect], x: float, y: float) -> Optional[int]:
    """
    Return the index of the last (top-most) rect containing (x, y), or None.
    """
    for index in range(len(rects) - 1, -1, -1):
        if rects[index].contains_point(x, y):
            return index
    return None


def remove_rect_at_point(rects: Sequence[Rect], x: float, y: float) -> List[Rect]:
    """Return a copy of `rects` without the top-most rect under (x, y)."""
    index = find_rect_at_point(rects, x, y)
    return [rect for i, rect in enumerate(rects) if i != index]


def erase_region(
    image: Any,
    x: float,
    y: float,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
) -> Any:
    """
    Magic-wand erase: make the region connected to (x, y) transparent.

    Returns:
        New RGBA image; an unchanged copy when the seed is invalid
    """
    source = ensure_rgba(image)
    mask = flood_fill(source, x, y, tolerance)
    if mask is None:
        return source.copy()
    return apply_mask(source, mask)


def frame_file_name(frame: ProcessedFrame, prefix: str = FRAME_FILE_PREFIX) -> str:
    return f"{prefix}{frame.id}{FRAME_FILE_EXTENSION}"


def encode_frames(
    frames: Sequence[ProcessedFrame],
    prefix: str = FRAME_FILE_PREFIX,
) -> Dict[str, bytes]:
    """
    PNG-encode frames for packaging.

    Returns:
        Mapping of "frame_<id>.png" to PNG bytes, in frame order
    """
    return {frame_file_name(frame, prefix): frame.to_png_bytes() for frame in frames}


def save_frames(
    frames: Sequence[ProcessedFrame],
    output_dir: Path,
    prefix: str = FRAME_FILE_PREFIX,
) -> int:
    """
    Save frames to disk in PNG format.

    Each frame is saved as '<prefix><id>.png'.

    Args:
        frames: Frames to save
        output_dir: Existing directory to write into
        prefix: File name prefix

    Returns:
        The number of frames saved

    Raises:
        OSError: If directory cannot be accessed or files cannot be written
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    saved_count = 0
    for frame in frames:
        save_path = output_dir / frame_file_name(frame, prefix)
        frame.image.save(save_path, format=DEFAULT_OUTPUT_FORMAT)
        saved_count += 1
    return saved_count
