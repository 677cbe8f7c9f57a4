from .config import GraphConfig, load_config
from .display_runtime import DisplayRuntime, PresentTick
from .frame_clock import DEFAULT_RENDER_INTERVAL_S, FrameClock
from .frame_matrix import (
    FullRewrite,
    FrameMatrix,
    PresentEvent,
    WriteBatch,
)
from .graph_runtime import GraphRunResult, GraphRuntime
from .input_loop import InputLoop
from .pointer_thread import PointerEvent, PointerEventSource, PointerThread
from .render_loop import RenderLoop

__all__ = [
    "DEFAULT_RENDER_INTERVAL_S",
    "DisplayRuntime",
    "FrameClock",
    "FrameMatrix",
    "FullRewrite",
    "GraphConfig",
    "GraphRunResult",
    "GraphRuntime",
    "InputLoop",
    "PointerEvent",
    "PointerEventSource",
    "PointerThread",
    "PresentEvent",
    "PresentTick",
    "RenderLoop",
    "WriteBatch",
    "load_config",
]
