#!/usr/bin/env python3
"""
sprite_slicer.py

Slice a sprite sheet into uniformly sized PNG frames.

Modes:
- grid:   split the sheet into --rows x --cols equal cells
- smart:  detect opaque sprites on a transparent sheet
- manual: extract the rects listed in a JSON file (--rects)

Dependencies:
- Pillow
- numpy
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from SS_Libs.constants import MODE_MANUAL, RESAMPLE_NEAREST
from SS_Libs.ImageEditingLib.image_editing_ops import save_frames
from SS_Libs.ImageEditingLib.image_models import Rect, RgbColor
from SS_Libs.ImageEditingLib.pixel_buffer import decode_image
from SS_Libs.ProjStoreLib.mode_executors import get_default_registry, process_sprite_sheet
from SS_Libs.ProjStoreLib.slicer_config import SlicerConfig, load_config


def parse_size(text: str) -> Tuple[int, int]:
    """Parse 'WxH' into (width, height)."""
    parts = text.lower().split("x")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {text!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {text!r}") from None
    if width < 1 or height < 1:
        raise argparse.ArgumentTypeError(f"Size must be at least 1x1, got {text!r}")
    return width, height


def parse_color(text: str) -> RgbColor:
    try:
        return RgbColor.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def load_rects(path: Path) -> List[Rect]:
    """Read a JSON list of {x, y, width, height[, path]} objects."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Rects file must contain a JSON list: {path}")
    return [Rect.from_dict(item) for item in data]


def build_parser() -> argparse.ArgumentParser:
    registry = get_default_registry()
    modes = "\n".join(
        f"  {mode:<8}{registry.describe(mode)}" for mode in registry.list_modes()
    )
    ap = argparse.ArgumentParser(
        description="Slice a sprite sheet into uniformly sized PNG frames.",
        epilog=f"modes:\n{modes}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("sheet", type=Path, help="Sprite sheet image")
    ap.add_argument("-o", "--out", type=Path, required=True,
                    help="Output directory for frame_<id>.png files")
    ap.add_argument("--config", type=Path, default=None,
                    help="Saved slicer config (JSON); flags below override it")
    ap.add_argument("--mode", choices=registry.list_modes(), default=None)
    ap.add_argument("--rows", type=int, default=None)
    ap.add_argument("--cols", type=int, default=None)
    ap.add_argument("--remove-background", action=argparse.BooleanOptionalAction, default=None,
                    help="Color-key the background out of every frame")
    ap.add_argument("--background-color", type=parse_color, default=None,
                    help="Color to remove ('#rrggbb' or 'r,g,b'); default: top-left pixel")
    ap.add_argument("--tolerance", type=float, default=None,
                    help="Manhattan RGB tolerance of the color key")
    ap.add_argument("--size", type=parse_size, default=None,
                    help="Force every frame to WIDTHxHEIGHT (scaled to fit)")
    ap.add_argument("--nearest", action="store_true",
                    help="Nearest-neighbour scaling for pixel art")
    ap.add_argument("--rects", type=Path, default=None,
                    help="JSON list of rects for manual mode")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    return ap


def config_from_args(args: argparse.Namespace) -> SlicerConfig:
    """Merge a saved config (if any) with explicit command-line flags."""
    base = load_config(args.config) if args.config else SlicerConfig()
    data = base.to_dict()

    for key in ("mode", "rows", "cols", "remove_background", "tolerance"):
        value = getattr(args, key)
        if value is not None:
            data[key] = value
    if args.background_color is not None:
        data["background_color"] = args.background_color.to_dict()
    if args.size is not None:
        data["use_custom_size"] = True
        data["custom_width"], data["custom_height"] = args.size
    if args.nearest:
        data["resample"] = RESAMPLE_NEAREST

    return SlicerConfig.from_dict(data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = config_from_args(args)
    if args.rects and config.mode != MODE_MANUAL:
        parser.error(f"--rects only applies to manual mode (mode is {config.mode!r})")
    manual_rects = load_rects(args.rects) if args.rects else None

    sheet = decode_image(args.sheet)
    result = process_sprite_sheet(sheet, config, manual_rects)

    args.out.mkdir(parents=True, exist_ok=True)
    saved = save_frames(result.frames, args.out)

    print(f"Sheet: {args.sheet} ({sheet.width}x{sheet.height})")
    print(f"Mode: {config.mode} | Regions: {len(result.rects)} | Saved: {saved} | Out: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
