"""
Single import point for Pillow (which provides the `PIL` namespace).

The slicing modules need the `Image` and `ImageDraw` modules. Loading them here
keeps every other module on one import line and gives a clear error message
when Pillow is missing from the environment.
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow (PIL) is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _import("PIL.Image")
ImageDraw = _import("PIL.ImageDraw")
