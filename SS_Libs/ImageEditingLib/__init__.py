"""
ImageEditingLib - Core sprite slicing functionality

This module provides the pixel-level pipeline of Sprite Slicer:
region detection, wand selection, matting and frame compositing.
"""

from SS_Libs.ImageEditingLib.errors import DimensionMismatchError, SurfaceAcquisitionError
from SS_Libs.ImageEditingLib.image_models import (
    OutputSizePolicy,
    Point,
    ProcessedFrame,
    Rect,
    RgbaColor,
    RgbColor,
    SelectionMask,
)
from SS_Libs.ImageEditingLib.pixel_buffer import decode_image, encode_png
from SS_Libs.ImageEditingLib.region_detector import detect_sprites, sort_reading_order
from SS_Libs.ImageEditingLib.flood_selector import flood_fill
from SS_Libs.ImageEditingLib.matte import apply_mask, chroma_key, resolve_background_color
from SS_Libs.ImageEditingLib.frame_compositor import (
    FrameCompositor,
    FramePlacement,
    composite_frames,
)
from SS_Libs.ImageEditingLib.grid_slicer import build_grid_rects, slice_grid
from SS_Libs.ImageEditingLib.image_editing_ops import (
    rect_from_path,
    find_rect_at_point,
    remove_rect_at_point,
    erase_region,
    encode_frames,
    save_frames,
)

__all__ = [
    "DimensionMismatchError",
    "SurfaceAcquisitionError",
    "OutputSizePolicy",
    "Point",
    "ProcessedFrame",
    "Rect",
    "RgbaColor",
    "RgbColor",
    "SelectionMask",
    "decode_image",
    "encode_png",
    "detect_sprites",
    "sort_reading_order",
    "flood_fill",
    "apply_mask",
    "chroma_key",
    "resolve_background_color",
    "FrameCompositor",
    "FramePlacement",
    "composite_frames",
    "build_grid_rects",
    "slice_grid",
    "rect_from_path",
    "find_rect_at_point",
    "remove_rect_at_point",
    "erase_region",
    "encode_frames",
    "save_frames",
]
