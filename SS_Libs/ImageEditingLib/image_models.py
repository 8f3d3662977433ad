"""
Image slicing data models for Sprite Slicer.

This module defines the core data structures passed between the detection,
selection and compositing stages.

Classes:
    RgbColor: An opaque RGB color used as a chroma key
    Point: A floating point coordinate in image space
    Rect: An integer region of the source image, optionally with a lasso path
    SelectionMask: Boolean membership map produced by the flood selector
    OutputSizePolicy: How output frame dimensions are chosen
    ProcessedFrame: One normalized output frame

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np

from SS_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    MIN_LASSO_POINTS,
    SIZE_POLICY_AUTO,
    SIZE_POLICY_CUSTOM,
)

RgbaColor = Tuple[int, int, int, int]


@dataclass(frozen=True)
class RgbColor:
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in ("r", "g", "b"):
            value = getattr(self, channel)
            if not (0 <= int(value) <= 255):
                raise ValueError(f"{channel} must be 0-255, got {value}")
            object.__setattr__(self, channel, int(value))

    @classmethod
    def from_rgba(cls, color: Iterable[int]) -> "RgbColor":
        r, g, b = tuple(color)[:3]
        return cls(r, g, b)

    @classmethod
    def parse(cls, value: Any) -> "RgbColor":
        """
        Build a color from a hex string, an "r,g,b" string, a dict or a sequence.

        Args:
            value: "#ff00ff", "ff00ff", "255,0,255", {"r": 255, "g": 0, "b": 255}
                   or (255, 0, 255)

        Returns:
            The parsed RgbColor

        Raises:
            ValueError: If the value cannot be interpreted as a color
        """
        if isinstance(value, RgbColor):
            return value
        if isinstance(value, dict):
            return cls.from_dict(value)
        if isinstance(value, str):
            text = value.strip()
            if "," in text:
                parts = [part.strip() for part in text.split(",")]
                if len(parts) != 3:
                    raise ValueError(f"Expected 'r,g,b', got {value!r}")
                try:
                    return cls(*(int(part) for part in parts))
                except ValueError as exc:
                    raise ValueError(f"Invalid color component in {value!r}") from exc
            text = text.lstrip("#")
            if len(text) != 6:
                raise ValueError(f"Expected '#rrggbb', got {value!r}")
            try:
                return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
            except ValueError as exc:
                raise ValueError(f"Invalid hex color {value!r}") from exc
        if isinstance(value, (tuple, list)) and len(value) >= 3:
            return cls.from_rgba(value)
        raise ValueError(f"Cannot parse color from {value!r}")

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_dict(self) -> Dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RgbColor":
        try:
            return cls(int(data["r"]), int(data["g"]), int(data["b"]))
        except KeyError as exc:
            raise ValueError(f"Color dict is missing channel {exc}") from exc


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """A region of the source image.

    Attributes:
        x, y: Top-left corner in image pixels
        width, height: Size in pixels (>= 0)
        path: Optional closed polygon (>= 3 points) in image coordinates,
              used to clip the region to a free-hand lasso
    """
    x: int
    y: int
    width: int
    height: int
    path: Optional[Tuple[Point, ...]] = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect width/height must be >= 0, got {self.width}x{self.height}"
            )
        if self.path is not None:
            points = tuple(
                p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))
                for p in self.path
            )
            if len(points) < MIN_LASSO_POINTS:
                raise ValueError(
                    f"Rect path needs at least {MIN_LASSO_POINTS} points, got {len(points)}"
                )
            object.__setattr__(self, "path", points)

    @property
    def has_path(self) -> bool:
        return self.path is not None

    @property
    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains_point(self, x: float, y: float) -> bool:
        """Closed-bounds hit test (edges count as inside)."""
        return (
            self.x <= x <= self.x + self.width
            and self.y <= y <= self.y + self.height
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        if self.path is not None:
            data["path"] = [{"x": p.x, "y": p.y} for p in self.path]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        path = data.get("path")
        points = None
        if path:
            points = tuple(Point(float(p["x"]), float(p["y"])) for p in path)
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
            path=points,
        )


@dataclass(frozen=True, eq=False)
class SelectionMask:
    """Pixels selected by a flood fill.

    Attributes:
        width, height: Size of the image the mask was computed against
        bits: Boolean array of shape (height, width); True = selected
    """
    width: int
    height: int
    bits: np.ndarray

    def __post_init__(self):
        if self.bits.shape != (self.height, self.width):
            raise ValueError(
                f"Mask bits shape {self.bits.shape} does not match "
                f"{self.width}x{self.height}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def count(self) -> int:
        return int(np.count_nonzero(self.bits))

    @property
    def data(self) -> np.ndarray:
        """Flat row-major 0/1 view with width*height entries."""
        return self.bits.astype(np.uint8).ravel()

    def is_selected(self, x: int, y: int) -> bool:
        return bool(self.bits[y, x])


@dataclass(frozen=True)
class OutputSizePolicy:
    """How the size of every output frame is chosen.

    "auto" uses the largest rect width and height of the batch;
    "custom" forces width x height and scales each rect to fit.
    """
    mode: str = SIZE_POLICY_AUTO
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self):
        if self.mode not in (SIZE_POLICY_AUTO, SIZE_POLICY_CUSTOM):
            raise ValueError(f"Unsupported size policy: {self.mode}")
        if self.mode == SIZE_POLICY_CUSTOM:
            if self.width is None or self.height is None:
                raise ValueError("Custom size policy needs width and height")
            if self.width < 1 or self.height < 1:
                raise ValueError(
                    f"Custom size must be >= 1x1, got {self.width}x{self.height}"
                )

    @classmethod
    def auto(cls) -> "OutputSizePolicy":
        return cls(SIZE_POLICY_AUTO)

    @classmethod
    def custom(cls, width: int, height: int) -> "OutputSizePolicy":
        return cls(SIZE_POLICY_CUSTOM, int(width), int(height))

    @property
    def is_custom(self) -> bool:
        return self.mode == SIZE_POLICY_CUSTOM


@dataclass(frozen=True, eq=False)
class ProcessedFrame:
    """One normalized output frame.

    Attributes:
        id: Position of the frame in its batch (0-based, dense)
        image: RGBA PIL Image of the final frame size
        source_rect: The rect of the source image this frame was cut from
    """
    id: int
    image: Any = field(repr=False)
    source_rect: Optional[Rect] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
        return buffer.getvalue()
