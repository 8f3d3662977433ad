"""
Constants and configuration values for Sprite Slicer.

This module centralizes the thresholds, tolerances and file naming
defaults used throughout the slicing pipeline.
"""

# Region detection
ALPHA_THRESHOLD = 10  # pixels with alpha above this count as opaque
ROW_TOLERANCE = 10  # max vertical offset (px) for two regions to share a row

# Color matching
DEFAULT_COLOR_TOLERANCE = 30

# Slicing modes
MODE_GRID = "grid"
MODE_SMART = "smart"
MODE_MANUAL = "manual"
SLICE_MODES = (MODE_GRID, MODE_SMART, MODE_MANUAL)

# Output sizing
SIZE_POLICY_AUTO = "auto"
SIZE_POLICY_CUSTOM = "custom"
DEFAULT_CUSTOM_SIZE = 64

# Resampling filters accepted by the compositor
RESAMPLE_BILINEAR = "bilinear"
RESAMPLE_NEAREST = "nearest"
RESAMPLE_MODES = (RESAMPLE_BILINEAR, RESAMPLE_NEAREST)

# Manual lasso
MIN_LASSO_POINTS = 3
MIN_LASSO_SIZE = 2  # rects must be strictly larger than this on both axes

# File naming
FRAME_FILE_PREFIX = "frame_"
DEFAULT_OUTPUT_FORMAT = "PNG"
FRAME_FILE_EXTENSION = ".png"

# Config file
SCHEMA_VERSION = 1

# Config field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_MODE = "mode"
FIELD_ROWS = "rows"
FIELD_COLS = "cols"
FIELD_REMOVE_BACKGROUND = "remove_background"
FIELD_BACKGROUND_COLOR = "background_color"
FIELD_USE_CUSTOM_SIZE = "use_custom_size"
FIELD_CUSTOM_WIDTH = "custom_width"
FIELD_CUSTOM_HEIGHT = "custom_height"
FIELD_TOLERANCE = "tolerance"
FIELD_RESAMPLE = "resample"
