"""
SS_Libs - Sprite Slicer Library Modules

This package contains core functionality for the Sprite Slicer project,
organized into specialized sub-packages:

- ImageEditingLib: Region detection, wand selection, matting and frame compositing
- ProjStoreLib: Slicer configuration persistence and slicing-mode dispatch
"""

__version__ = "0.1.0"
