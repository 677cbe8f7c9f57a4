from funcgraph_plot.errors import DegenerateZoomRequest, EvaluationUndefined, GraphError
from funcgraph_plot.functions import CallableFunction, FunctionEntry, FunctionEvaluator, FunctionList, demo_function
from funcgraph_plot.gesture import Dragging, GestureController, Idle
from funcgraph_plot.grid import GridRenderer, GridStyle
from funcgraph_plot.sampler import FunctionRenderer, SampledCurve, sample_function
from funcgraph_plot.scene import FrameStats, GraphScene
from funcgraph_plot.viewport import Bounds, ScreenPoint, ScreenSize, Viewport, WorldPoint

__all__ = [
    "Bounds",
    "CallableFunction",
    "DegenerateZoomRequest",
    "Dragging",
    "EvaluationUndefined",
    "FrameStats",
    "FunctionEntry",
    "FunctionEvaluator",
    "FunctionList",
    "FunctionRenderer",
    "GestureController",
    "GraphError",
    "GraphScene",
    "GridRenderer",
    "GridStyle",
    "Idle",
    "SampledCurve",
    "ScreenPoint",
    "ScreenSize",
    "Viewport",
    "WorldPoint",
    "demo_function",
    "sample_function",
]
