"""
Frame Compositor.

Cuts rects out of a source sheet and draws each one centered on a uniform,
fully transparent canvas. Supports custom output sizes (uniform scale to fit),
free-hand lasso clipping and color-key background removal.

Example:
    >>> sheet = decode_image("sheet.png")
    >>> rects = detect_sprites(sheet)
    >>> compositor = FrameCompositor(
    ...     output_size=OutputSizePolicy.custom(64, 64),
    ...     remove_background=True,
    ... )
    >>> frames = compositor.composite(sheet, rects)
    >>> frames[0].image.size
    (64, 64)
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from SS_Libs.constants import DEFAULT_COLOR_TOLERANCE, RESAMPLE_BILINEAR
from SS_Libs.ImageEditingLib.image_models import (
    OutputSizePolicy,
    ProcessedFrame,
    Rect,
    RgbColor,
)
from SS_Libs.ImageEditingLib.matte import chroma_key, resolve_background_color
from SS_Libs.ImageEditingLib.pixel_buffer import (
    crop_and_scale,
    ensure_rgba,
    new_canvas,
    new_clip_mask,
    resample_filter,
)
from SS_Libs.pillow_compat import Image, ImageDraw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FramePlacement:
    """Where a rect lands on the output canvas.

    Attributes:
        scale: Uniform scale factor applied to the rect
        draw_width, draw_height: Scaled size of the rect content
        dest_x, dest_y: Top-left corner of the content on the canvas
    """
    scale: float
    draw_width: float
    draw_height: float
    dest_x: float
    dest_y: float

    def pixel_box(self) -> Tuple[int, int, int, int]:
        """Integer (left, top, width, height) used when pasting pixels."""
        width = max(1, int(round(self.draw_width)))
        height = max(1, int(round(self.draw_height)))
        return math.floor(self.dest_x), math.floor(self.dest_y), width, height


class FrameCompositor:
    """Turns a list of rects into uniformly sized frames."""

    def __init__(
        self,
        output_size: Optional[OutputSizePolicy] = None,
        remove_background: bool = False,
        background_color: Optional[RgbColor] = None,
        tolerance: float = DEFAULT_COLOR_TOLERANCE,
        resample: str = RESAMPLE_BILINEAR,
    ):
        """
        Args:
            output_size: Sizing policy (None = auto)
            remove_background: Color-key the background out of each frame
            background_color: Color to key; None samples the sheet's (0, 0)
            tolerance: Manhattan RGB tolerance of the color key
            resample: "bilinear" (smooth) or "nearest" (pixel art)

        Raises:
            ValueError: If tolerance is negative or resample unknown
        """
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        resample_filter(resample)

        self.output_size = output_size or OutputSizePolicy.auto()
        self.remove_background = bool(remove_background)
        self.background_color = (
            RgbColor.parse(background_color) if background_color is not None else None
        )
        self.tolerance = tolerance
        self.resample = resample

    def final_size(self, rects: Sequence[Rect]) -> Tuple[int, int]:
        """
        Output canvas size shared by every frame of the batch.

        Auto sizing takes the largest width and the largest height
        independently, so the canvas may match no single rect's aspect ratio.
        """
        if self.output_size.is_custom:
            return self.output_size.width, self.output_size.height

        final_width = max((rect.width for rect in rects), default=0)
        final_height = max((rect.height for rect in rects), default=0)
        return max(1, final_width), max(1, final_height)

    @staticmethod
    def compute_placement(
        rect: Rect,
        final_width: int,
        final_height: int,
        fit: bool,
    ) -> FramePlacement:
        """
        Scale and center `rect` on a final_width x final_height canvas.

        Args:
            rect: Source region (must not be degenerate when fit is True)
            final_width, final_height: Canvas size
            fit: Scale uniformly to fit the canvas (custom size policy)

        Returns:
            FramePlacement with the arithmetic (unrounded) geometry
        """
        scale = 1.0
        if fit:
            scale = min(final_width / rect.width, final_height / rect.height)

        draw_width = rect.width * scale
        draw_height = rect.height * scale
        return FramePlacement(
            scale=scale,
            draw_width=draw_width,
            draw_height=draw_height,
            dest_x=(final_width - draw_width) / 2,
            dest_y=(final_height - draw_height) / 2,
        )

    @staticmethod
    def map_path(rect: Rect, placement: FramePlacement) -> List[Tuple[float, float]]:
        """Map the rect's image-space lasso path to canvas coordinates."""
        return [
            (
                (point.x - rect.x) * placement.scale + placement.dest_x,
                (point.y - rect.y) * placement.scale + placement.dest_y,
            )
            for point in rect.path or ()
        ]

    def composite(self, image: Any, rects: Sequence[Rect]) -> List[ProcessedFrame]:
        """
        Render one frame per rect, in the order given.

        Args:
            image: Source sheet (PIL Image, converted to RGBA)
            rects: Regions to extract; may carry lasso paths

        Returns:
            Frames with ids 0..len(rects)-1

        Raises:
            TypeError: If image is not a PIL Image
            SurfaceAcquisitionError: If a canvas cannot be allocated; no
                frames are returned in that case
        """
        source = ensure_rgba(image)
        rects = list(rects)
        final_width, final_height = self.final_size(rects)

        bg_color = None
        if self.remove_background:
            bg_color = resolve_background_color(source, self.background_color)

        frames: List[ProcessedFrame] = []
        for index, rect in enumerate(rects):
            canvas = self._render(source, rect, final_width, final_height, bg_color)
            frames.append(ProcessedFrame(id=index, image=canvas, source_rect=rect))

        logger.info(
            f"Composited {len(frames)} frames at {final_width}x{final_height}"
            f" ({self.output_size.mode} size)"
        )
        return frames

    def _render(
        self,
        source: Any,
        rect: Rect,
        final_width: int,
        final_height: int,
        bg_color: Optional[RgbColor],
    ) -> Any:
        canvas = new_canvas(final_width, final_height)
        if rect.is_degenerate:
            logger.debug(f"Rect {rect.to_dict()} is empty, emitting blank frame")
            return canvas

        placement = self.compute_placement(
            rect, final_width, final_height, fit=self.output_size.is_custom
        )
        left, top, draw_width, draw_height = placement.pixel_box()
        content = crop_and_scale(
            source,
            (rect.x, rect.y, rect.width, rect.height),
            (draw_width, draw_height),
            self.resample,
        )

        if rect.has_path:
            layer = new_canvas(final_width, final_height)
            layer.paste(content, (left, top))
            # ImageDraw fills polygons scanline by scanline (even-odd rule)
            clip = new_clip_mask(final_width, final_height)
            ImageDraw.Draw(clip).polygon(self.map_path(rect, placement), fill=255)
            canvas = Image.composite(layer, canvas, clip)
        else:
            canvas.paste(content, (left, top))

        if bg_color is not None:
            chroma_key(canvas, bg_color, self.tolerance)

        logger.debug(
            f"Placed {rect.width}x{rect.height} rect at ({left}, {top}) "
            f"scale {placement.scale:.3f}"
        )
        return canvas


def composite_frames(
    image: Any,
    rects: Sequence[Rect],
    remove_background: bool = False,
    background_color: Optional[RgbColor] = None,
    output_size: Optional[OutputSizePolicy] = None,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
    resample: str = RESAMPLE_BILINEAR,
) -> List[ProcessedFrame]:
    """
    Extract `rects` from `image` as uniformly sized frames.

    Convenience wrapper around FrameCompositor.composite; see there.
    """
    compositor = FrameCompositor(
        output_size=output_size,
        remove_background=remove_background,
        background_color=background_color,
        tolerance=tolerance,
        resample=resample,
    )
    return compositor.composite(image, rects)
