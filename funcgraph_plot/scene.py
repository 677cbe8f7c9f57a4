from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from funcgraph_plot.functions import FunctionList
from funcgraph_plot.grid import GridRenderer, GridStats
from funcgraph_plot.raster import new_canvas
from funcgraph_plot.raster.canvas import RGBA
from funcgraph_plot.sampler import CurveStats, FunctionRenderer
from funcgraph_plot.viewport import Bounds, Viewport


@dataclass(frozen=True)
class FrameStats:
    bounds: Bounds
    grid: GridStats
    curves: tuple[CurveStats, ...]


class GraphScene:
    """Draws one frame: background, grid, axes, then every function in list order."""

    def __init__(
        self,
        viewport: Viewport,
        functions: FunctionList,
        grid: GridRenderer | None = None,
        function_renderer: FunctionRenderer | None = None,
        background: RGBA = (255, 255, 255, 255),
    ) -> None:
        self.viewport = viewport
        self.functions = functions
        self.grid = grid or GridRenderer()
        self.function_renderer = function_renderer or FunctionRenderer()
        self.background = background
        self._last_stats: FrameStats | None = None

    @property
    def last_stats(self) -> FrameStats | None:
        return self._last_stats

    def render(self, width: int, height: int) -> np.ndarray:
        # One bounds snapshot per frame keeps grid and curves on the same transform.
        bounds = self.viewport.bounds()
        canvas = new_canvas(width, height, color=self.background)
        grid_stats = self.grid.render(canvas, bounds)
        curves = self.function_renderer.render(canvas, self.functions, bounds)
        self._last_stats = FrameStats(bounds=bounds, grid=grid_stats, curves=tuple(curves))
        return canvas
