"""
Grid slicing for Sprite Slicer.

Splits a sheet into rows x cols equally sized cells and composites each cell
with the same rules as FrameCompositor.
"""

from typing import Any, List, Optional

from SS_Libs.constants import DEFAULT_COLOR_TOLERANCE, RESAMPLE_BILINEAR
from SS_Libs.ImageEditingLib.frame_compositor import FrameCompositor
from SS_Libs.ImageEditingLib.image_models import (
    OutputSizePolicy,
    ProcessedFrame,
    Rect,
    RgbColor,
)
from SS_Libs.ImageEditingLib.pixel_buffer import ensure_rgba


def build_grid_rects(width: int, height: int, rows: int, cols: int) -> List[Rect]:
    """
    Build the cell rects of a rows x cols grid, row by row.

    Cells are floor(width / cols) x floor(height / rows); leftover pixels on
    the right and bottom edges are ignored.

    Returns:
        The cell rects, or an empty list if a cell would be zero-sized

    Raises:
        ValueError: If rows or cols is < 1
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"rows and cols must be >= 1, got {rows}x{cols}")

    cell_width = width // cols
    cell_height = height // rows
    if cell_width == 0 or cell_height == 0:
        return []

    return [
        Rect(c * cell_width, r * cell_height, cell_width, cell_height)
        for r in range(rows)
        for c in range(cols)
    ]


def slice_grid(
    image: Any,
    rows: int,
    cols: int,
    remove_background: bool = False,
    background_color: Optional[RgbColor] = None,
    output_size: Optional[OutputSizePolicy] = None,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
    resample: str = RESAMPLE_BILINEAR,
) -> List[ProcessedFrame]:
    """
    Slice `image` into rows x cols frames.

    Args:
        image: Source sheet (PIL Image)
        rows, cols: Grid dimensions (>= 1)
        remove_background: Color-key the background out of each frame
        background_color: Color to key; None samples the sheet's (0, 0)
        output_size: Sizing policy (None = auto, i.e. the cell size)
        tolerance: Manhattan RGB tolerance of the color key
        resample: "bilinear" or "nearest"

    Returns:
        Frames in row-major order; empty when the grid is finer than the image
    """
    source = ensure_rgba(image)
    rects = build_grid_rects(source.width, source.height, rows, cols)
    if not rects:
        return []

    compositor = FrameCompositor(
        output_size=output_size,
        remove_background=remove_background,
        background_color=background_color,
        tolerance=tolerance,
        resample=resample,
    )
    return compositor.composite(source, rects)
