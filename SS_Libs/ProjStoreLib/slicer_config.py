"""
Slicer configuration storage for Sprite Slicer.

This module defines the settings a slicing run is driven by and persists them
as small JSON files.

The config file schema includes:
- Schema version
- Slicing mode (grid, smart, manual) and grid dimensions
- Background removal settings
- Output size settings

Classes:
    SlicerConfig: Validated slicing settings

Functions:
    save_config: Write a SlicerConfig to a JSON file
    load_config: Read a SlicerConfig from a JSON file
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from SS_Libs.constants import (
    DEFAULT_COLOR_TOLERANCE,
    DEFAULT_CUSTOM_SIZE,
    FIELD_BACKGROUND_COLOR,
    FIELD_COLS,
    FIELD_CUSTOM_HEIGHT,
    FIELD_CUSTOM_WIDTH,
    FIELD_MODE,
    FIELD_REMOVE_BACKGROUND,
    FIELD_RESAMPLE,
    FIELD_ROWS,
    FIELD_SCHEMA_VERSION,
    FIELD_TOLERANCE,
    FIELD_USE_CUSTOM_SIZE,
    MODE_GRID,
    RESAMPLE_BILINEAR,
    RESAMPLE_MODES,
    SCHEMA_VERSION,
    SLICE_MODES,
)
from SS_Libs.ImageEditingLib.image_models import OutputSizePolicy, RgbColor


@dataclass
class SlicerConfig:
    """Settings for one slicing run.

    Attributes:
        mode: 'grid', 'smart' (auto-detect) or 'manual' (caller rects)
        rows, cols: Grid dimensions, used in grid mode (>= 1)
        remove_background: Color-key the background out of every frame
        background_color: Color to key; None samples the sheet's top-left pixel
        use_custom_size: Force every frame to custom_width x custom_height
        custom_width, custom_height: Custom frame size (>= 1)
        tolerance: Manhattan RGB tolerance of the color key
        resample: 'bilinear' or 'nearest' scaling filter
    """
    mode: str = MODE_GRID
    rows: int = 1
    cols: int = 1
    remove_background: bool = False
    background_color: Optional[RgbColor] = None
    use_custom_size: bool = False
    custom_width: int = DEFAULT_CUSTOM_SIZE
    custom_height: int = DEFAULT_CUSTOM_SIZE
    tolerance: float = DEFAULT_COLOR_TOLERANCE
    resample: str = RESAMPLE_BILINEAR

    def __post_init__(self):
        """Validate configuration values."""
        self.mode = str(self.mode).strip().lower()
        if self.mode not in SLICE_MODES:
            raise ValueError(f"mode must be one of {SLICE_MODES}, got {self.mode!r}")

        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"rows and cols must be >= 1, got {self.rows}x{self.cols}")

        if self.custom_width < 1 or self.custom_height < 1:
            raise ValueError(
                f"custom size must be >= 1x1, got {self.custom_width}x{self.custom_height}"
            )

        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")

        if self.resample not in RESAMPLE_MODES:
            raise ValueError(f"resample must be one of {RESAMPLE_MODES}, got {self.resample!r}")

        if self.background_color is not None:
            self.background_color = RgbColor.parse(self.background_color)

    def output_size_policy(self) -> OutputSizePolicy:
        if self.use_custom_size:
            return OutputSizePolicy.custom(self.custom_width, self.custom_height)
        return OutputSizePolicy.auto()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
            FIELD_MODE: self.mode,
            FIELD_ROWS: self.rows,
            FIELD_COLS: self.cols,
            FIELD_REMOVE_BACKGROUND: self.remove_background,
            FIELD_BACKGROUND_COLOR: (
                self.background_color.to_dict() if self.background_color else None
            ),
            FIELD_USE_CUSTOM_SIZE: self.use_custom_size,
            FIELD_CUSTOM_WIDTH: self.custom_width,
            FIELD_CUSTOM_HEIGHT: self.custom_height,
            FIELD_TOLERANCE: self.tolerance,
            FIELD_RESAMPLE: self.resample,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlicerConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {
            k: v
            for k, v in data.items()
            if k in cls.__dataclass_fields__
        }
        try:
            for key in (FIELD_ROWS, FIELD_COLS, FIELD_CUSTOM_WIDTH, FIELD_CUSTOM_HEIGHT):
                if key in filtered:
                    filtered[key] = int(filtered[key])
            if FIELD_TOLERANCE in filtered:
                filtered[FIELD_TOLERANCE] = float(filtered[FIELD_TOLERANCE])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid numeric field in slicer config: {exc}") from exc

        for key in (FIELD_REMOVE_BACKGROUND, FIELD_USE_CUSTOM_SIZE):
            if key in filtered:
                filtered[key] = _as_bool(key, filtered[key])

        return cls(**filtered)


_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off")


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Invalid boolean for {key} in slicer config: {value!r}")
    return bool(value)


def save_config(config: SlicerConfig, path: Path) -> Path:
    """
    Save a slicer config as JSON.

    Args:
        config: Config to save
        path: Destination file; parent directories are created

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return path


def load_config(path: Path) -> SlicerConfig:
    """
    Load a slicer config from JSON.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON, not a JSON object, was
                    written by a newer schema, or holds invalid values
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config file is not valid JSON: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    version = data.get(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise ValueError(f"Unsupported config schema version {version!r} in {path}")

    return SlicerConfig.from_dict(data)
