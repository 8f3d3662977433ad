"""
ProjStoreLib - Slicer configuration and mode dispatch

This module handles persistence of slicer settings and runs a slicing
pass in grid, smart or manual mode.
"""

from SS_Libs.ProjStoreLib.slicer_config import SlicerConfig, load_config, save_config
from SS_Libs.ProjStoreLib.mode_executors import (
    ModeExecutorRegistry,
    SliceResult,
    get_default_registry,
    process_sprite_sheet,
    register_default_executors,
)

__all__ = [
    "SlicerConfig",
    "load_config",
    "save_config",
    "ModeExecutorRegistry",
    "SliceResult",
    "get_default_registry",
    "process_sprite_sheet",
    "register_default_executors",
]
