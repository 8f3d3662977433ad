"""
Slicing mode dispatch for Sprite Slicer.

Each slicing mode (grid, smart, manual) is a function that turns a sheet and a
SlicerConfig into a SliceResult. The functions are looked up by name in a
ModeExecutorRegistry so the CLI can list the available modes and
process_sprite_sheet can run the one named in the config.

Classes:
    SliceResult: Rects used and frames produced by a slicing pass
    ModeExecutorRegistry: Mode name -> executor lookup

Functions:
    get_default_registry: Shared registry with the built-in modes (singleton)
    register_default_executors: Register the grid, smart and manual modes
    process_sprite_sheet: Slice a sheet according to a SlicerConfig
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging

from SS_Libs.constants import MODE_GRID, MODE_MANUAL, MODE_SMART
from SS_Libs.ImageEditingLib.frame_compositor import FrameCompositor
from SS_Libs.ImageEditingLib.grid_slicer import build_grid_rects
from SS_Libs.ImageEditingLib.image_models import ProcessedFrame, Rect
from SS_Libs.ImageEditingLib.pixel_buffer import ensure_rgba
from SS_Libs.ImageEditingLib.region_detector import detect_sprites
from SS_Libs.ProjStoreLib.slicer_config import SlicerConfig

logger = logging.getLogger(__name__)


@dataclass
class SliceResult:
    """Outcome of a slicing pass.

    Attributes:
        rects: The regions that were extracted (detected, grid or manual)
        frames: One frame per rect, index-aligned with rects
    """
    rects: List[Rect] = field(default_factory=list)
    frames: List[ProcessedFrame] = field(default_factory=list)


# (image, config, manual_rects) -> SliceResult
ModeExecutor = Callable[[Any, SlicerConfig, Sequence[Rect]], SliceResult]


class ModeExecutorRegistry:
    """Slicing modes by name, each with a one-line description."""

    def __init__(self):
        self._executors: Dict[str, ModeExecutor] = {}
        self._descriptions: Dict[str, str] = {}

    def register(self, mode: str, executor: ModeExecutor, description: str = "") -> None:
        """
        Add a slicing mode.

        Args:
            mode: Mode name; matched case-insensitively
            executor: Callable accepting (image, config, manual_rects)
            description: Help text shown by the CLI

        Raises:
            ValueError: If mode is empty or executor is not callable
            RuntimeError: If a mode of that name already exists
        """
        mode = str(mode).strip().lower()
        if not mode:
            raise ValueError("mode cannot be empty")
        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")
        if mode in self._executors:
            raise RuntimeError(f"Slicing mode '{mode}' is already registered")

        self._executors[mode] = executor
        self._descriptions[mode] = str(description)
        logger.debug(f"Registered slicing mode: {mode}")

    def has_executor(self, mode: str) -> bool:
        return str(mode).strip().lower() in self._executors

    def get_executor(self, mode: str) -> ModeExecutor:
        """
        Raises:
            KeyError: If mode is not registered; the message lists known modes
        """
        mode = str(mode).strip().lower()
        if mode not in self._executors:
            raise KeyError(
                f"Unknown slicing mode '{mode}'. "
                f"Known modes: {', '.join(self.list_modes())}"
            )
        return self._executors[mode]

    def describe(self, mode: str) -> str:
        self.get_executor(mode)
        return self._descriptions[str(mode).strip().lower()]

    def list_modes(self) -> List[str]:
        return sorted(self._executors)

    def execute(
        self,
        mode: str,
        image: Any,
        config: SlicerConfig,
        manual_rects: Sequence[Rect] = (),
    ) -> SliceResult:
        return self.get_executor(mode)(image, config, manual_rects)


def _compositor_for(config: SlicerConfig) -> FrameCompositor:
    return FrameCompositor(
        output_size=config.output_size_policy(),
        remove_background=config.remove_background,
        background_color=config.background_color,
        tolerance=config.tolerance,
        resample=config.resample,
    )


def execute_grid_mode(
    image: Any,
    config: SlicerConfig,
    manual_rects: Sequence[Rect] = (),
) -> SliceResult:
    """Slice the sheet into config.rows x config.cols cells."""
    source = ensure_rgba(image)
    rects = build_grid_rects(source.width, source.height, config.rows, config.cols)
    if not rects:
        return SliceResult()
    return SliceResult(rects=rects, frames=_compositor_for(config).composite(source, rects))


def execute_smart_mode(
    image: Any,
    config: SlicerConfig,
    manual_rects: Sequence[Rect] = (),
) -> SliceResult:
    """Detect opaque islands and extract one frame per island."""
    source = ensure_rgba(image)
    rects = detect_sprites(source)
    if not rects:
        return SliceResult()
    return SliceResult(rects=rects, frames=_compositor_for(config).composite(source, rects))


def execute_manual_mode(
    image: Any,
    config: SlicerConfig,
    manual_rects: Sequence[Rect] = (),
) -> SliceResult:
    """Extract the caller-drawn rects (lasso paths included)."""
    rects = list(manual_rects)
    if not rects:
        return SliceResult()
    return SliceResult(rects=rects, frames=_compositor_for(config).composite(image, rects))


_default_registry: Optional[ModeExecutorRegistry] = None


def get_default_registry() -> ModeExecutorRegistry:
    """Return the shared registry, creating it with the built-in modes on first use."""
    global _default_registry

    if _default_registry is None:
        _default_registry = ModeExecutorRegistry()
        register_default_executors(_default_registry)

    return _default_registry


def register_default_executors(registry: ModeExecutorRegistry) -> None:
    registry.register(
        MODE_GRID,
        execute_grid_mode,
        description="split the sheet into --rows x --cols equal cells",
    )
    registry.register(
        MODE_SMART,
        execute_smart_mode,
        description="detect opaque sprites on a transparent sheet",
    )
    registry.register(
        MODE_MANUAL,
        execute_manual_mode,
        description="extract the rects listed in a JSON file (--rects)",
    )


def process_sprite_sheet(
    image: Any,
    config: SlicerConfig,
    manual_rects: Optional[Sequence[Rect]] = None,
    registry: Optional[ModeExecutorRegistry] = None,
) -> SliceResult:
    """
    Slice a sprite sheet according to `config.mode`.

    Args:
        image: Source sheet (PIL Image)
        config: Slicing settings
        manual_rects: Rects for manual mode (ignored by other modes)
        registry: Registry to dispatch through (default: shared registry)

    Returns:
        SliceResult with the rects used and the frames produced

    Raises:
        KeyError: If config.mode has no registered executor
    """
    registry = registry or get_default_registry()
    result = registry.execute(config.mode, image, config, manual_rects or ())
    logger.info(f"Mode '{config.mode}' produced {len(result.frames)} frames")
    return result
