"""
Unit tests for region_detector module.

Tests connected-component detection over the alpha channel and the
reading-order sort of the resulting rects.
"""

import pytest
from PIL import Image

from SS_Libs.ImageEditingLib.image_models import Rect
from SS_Libs.ImageEditingLib.region_detector import detect_sprites, sort_reading_order

from conftest import BLUE, RED


class TestDetectSprites:
    """Tests for detect_sprites function."""

    def test_single_blob_gives_tight_rect(self, blank_sheet):
        """Should return exactly one rect hugging the blob."""
        sheet = blank_sheet(20, 20)
        sheet.paste(RED, (5, 6, 10, 11))

        rects = detect_sprites(sheet)

        assert rects == [Rect(5, 6, 5, 5)]
        assert rects[0].path is None

    def test_single_pixel_gives_1x1_rect(self, blank_sheet):
        sheet = blank_sheet(8, 8)
        sheet.putpixel((3, 4), RED)

        assert detect_sprites(sheet) == [Rect(3, 4, 1, 1)]

    def test_transparent_image_gives_no_rects(self, blank_sheet):
        assert detect_sprites(blank_sheet(16, 16)) == []

    def test_alpha_at_threshold_is_not_opaque(self):
        """Alpha of exactly 10 is below the opacity threshold."""
        sheet = Image.new("RGBA", (6, 6), (255, 255, 255, 10))

        assert detect_sprites(sheet) == []

    def test_alpha_just_above_threshold_is_opaque(self):
        sheet = Image.new("RGBA", (6, 6), (255, 255, 255, 11))

        assert detect_sprites(sheet) == [Rect(0, 0, 6, 6)]

    def test_diagonal_pixels_are_separate_regions(self, blank_sheet):
        """Components use 4-connectivity, so diagonal neighbours split."""
        sheet = blank_sheet(4, 4)
        sheet.putpixel((0, 0), RED)
        sheet.putpixel((1, 1), RED)

        rects = detect_sprites(sheet)

        assert rects == [Rect(0, 0, 1, 1), Rect(1, 1, 1, 1)]

    def test_irregular_shape_bounding_box(self, blank_sheet):
        """An L-shaped blob is enclosed by its full bounding box."""
        sheet = blank_sheet(12, 12)
        sheet.paste(RED, (2, 2, 4, 10))   # vertical bar
        sheet.paste(RED, (2, 8, 9, 10))   # foot

        assert detect_sprites(sheet) == [Rect(2, 2, 7, 8)]

    def test_same_row_ordered_by_x(self, blank_sheet):
        """Blobs whose tops differ by <= 10px are ordered left to right."""
        sheet = blank_sheet(50, 30)
        sheet.paste(RED, (30, 5, 34, 9))   # found first by the scan
        sheet.paste(BLUE, (2, 12, 6, 16))  # 7px lower, further left

        rects = detect_sprites(sheet)

        assert [r.x for r in rects] == [2, 30]

    def test_different_rows_ordered_by_y(self, blank_sheet):
        """Blobs whose tops differ by > 10px are ordered top to bottom."""
        sheet = blank_sheet(50, 50)
        sheet.paste(RED, (2, 30, 6, 34))
        sheet.paste(BLUE, (30, 2, 34, 6))

        rects = detect_sprites(sheet)

        assert [(r.x, r.y) for r in rects] == [(30, 2), (2, 30)]

    def test_non_rgba_input_is_converted(self):
        sheet = Image.new("LA", (5, 5), (0, 0))
        sheet.putpixel((2, 2), (200, 255))

        assert detect_sprites(sheet) == [Rect(2, 2, 1, 1)]

    def test_deterministic(self, two_sprite_sheet):
        assert detect_sprites(two_sprite_sheet) == detect_sprites(two_sprite_sheet)

    def test_invalid_threshold_raises(self, blank_sheet):
        with pytest.raises(ValueError):
            detect_sprites(blank_sheet(), alpha_threshold=300)

    def test_non_image_raises_type_error(self):
        with pytest.raises(TypeError):
            detect_sprites("not an image")


class TestSortReadingOrder:
    """Tests for sort_reading_order function."""

    def test_row_tolerance_parameter(self):
        rects = [Rect(20, 0, 2, 2), Rect(0, 4, 2, 2)]

        assert sort_reading_order(rects, row_tolerance=10)[0].x == 0
        assert sort_reading_order(rects, row_tolerance=3)[0].x == 20

    def test_returns_new_list(self):
        rects = [Rect(5, 50, 1, 1), Rect(0, 0, 1, 1)]

        result = sort_reading_order(rects)

        assert result == [Rect(0, 0, 1, 1), Rect(5, 50, 1, 1)]
        assert rects[0] == Rect(5, 50, 1, 1)
