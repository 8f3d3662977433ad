"""
Pytest configuration and shared fixtures for Sprite Slicer tests.

This module provides small in-memory sprite sheets used across
multiple test modules.
"""

import numpy as np
import pytest
from PIL import Image


TRANSPARENT = (0, 0, 0, 0)
RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
MAGENTA = (255, 0, 255, 255)


def opaque_count(image):
    """Number of pixels with alpha > 0."""
    return int(np.count_nonzero(np.asarray(image.getchannel("A"))))


@pytest.fixture
def blank_sheet():
    """
    Provide a factory for fully transparent RGBA sheets.

    Returns:
        Callable (width, height) -> PIL Image
    """
    def _make(width=20, height=20):
        return Image.new("RGBA", (width, height), TRANSPARENT)
    return _make


@pytest.fixture
def two_sprite_sheet():
    """
    A 40x20 transparent sheet with a 5x5 red block at (2, 3)
    and a 6x4 blue block at (20, 5).
    """
    sheet = Image.new("RGBA", (40, 20), TRANSPARENT)
    sheet.paste(RED, (2, 3, 7, 8))
    sheet.paste(BLUE, (20, 5, 26, 9))
    return sheet


@pytest.fixture
def quad_sheet():
    """
    A 4x4 sheet whose 2x2 quadrants are red, green, blue and magenta
    (top-left, top-right, bottom-left, bottom-right).
    """
    sheet = Image.new("RGBA", (4, 4), TRANSPARENT)
    sheet.paste(RED, (0, 0, 2, 2))
    sheet.paste(GREEN, (2, 0, 4, 2))
    sheet.paste(BLUE, (0, 2, 2, 4))
    sheet.paste(MAGENTA, (2, 2, 4, 4))
    return sheet
