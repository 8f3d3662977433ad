"""
Unit tests for grid_slicer module.

Tests grid rect arithmetic and grid slicing through the compositor.
"""

import pytest
from PIL import Image

from SS_Libs.ImageEditingLib.grid_slicer import build_grid_rects, slice_grid
from SS_Libs.ImageEditingLib.image_models import OutputSizePolicy, Rect, RgbColor

from conftest import BLUE, GREEN, MAGENTA, RED, opaque_count


class TestBuildGridRects:
    """Tests for build_grid_rects function."""

    def test_row_major_cells(self):
        rects = build_grid_rects(4, 4, rows=2, cols=2)

        assert rects == [
            Rect(0, 0, 2, 2),
            Rect(2, 0, 2, 2),
            Rect(0, 2, 2, 2),
            Rect(2, 2, 2, 2),
        ]

    def test_remainder_pixels_are_ignored(self):
        rects = build_grid_rects(7, 5, rows=2, cols=3)

        assert len(rects) == 6
        assert all((r.width, r.height) == (2, 2) for r in rects)
        assert rects[-1] == Rect(4, 2, 2, 2)

    def test_zero_sized_cell_gives_empty_list(self):
        assert build_grid_rects(4, 4, rows=5, cols=1) == []
        assert build_grid_rects(4, 4, rows=1, cols=9) == []

    def test_rows_or_cols_below_one_raise(self):
        with pytest.raises(ValueError):
            build_grid_rects(4, 4, rows=0, cols=2)
        with pytest.raises(ValueError):
            build_grid_rects(4, 4, rows=2, cols=-1)


class TestSliceGrid:
    """Tests for slice_grid function."""

    def test_2x2_grid_on_4x4_image(self, quad_sheet):
        frames = slice_grid(quad_sheet, rows=2, cols=2)

        assert [f.id for f in frames] == [0, 1, 2, 3]
        assert all(f.image.size == (2, 2) for f in frames)
        assert [(f.source_rect.x, f.source_rect.y) for f in frames] == [
            (0, 0), (2, 0), (0, 2), (2, 2),
        ]
        assert [f.image.getpixel((0, 0)) for f in frames] == [RED, GREEN, BLUE, MAGENTA]

    def test_degenerate_grid_returns_empty(self, quad_sheet):
        assert slice_grid(quad_sheet, rows=8, cols=2) == []

    def test_invalid_grid_raises(self, quad_sheet):
        with pytest.raises(ValueError):
            slice_grid(quad_sheet, rows=0, cols=1)

    def test_custom_size_scales_cells(self):
        sheet = Image.new("RGBA", (4, 2), RED)

        frames = slice_grid(sheet, rows=1, cols=2, output_size=OutputSizePolicy.custom(6, 3))

        assert len(frames) == 2
        assert frames[0].image.size == (6, 3)
        # 2x2 cell scaled by 1.5 to 3x3, centered horizontally
        assert frames[0].image.getchannel("A").getbbox() == (1, 0, 4, 3)

    def test_background_removal_uses_sheet_corner(self, quad_sheet):
        frames = slice_grid(quad_sheet, rows=2, cols=2, remove_background=True)

        # top-left pixel is red, so only the red cell disappears
        assert [opaque_count(f.image) for f in frames] == [0, 4, 4, 4]

    def test_explicit_background_color(self, quad_sheet):
        frames = slice_grid(
            quad_sheet, rows=2, cols=2,
            remove_background=True, background_color=RgbColor(0, 0, 255),
        )

        assert [opaque_count(f.image) for f in frames] == [4, 4, 0, 4]
