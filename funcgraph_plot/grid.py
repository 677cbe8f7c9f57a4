from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from funcgraph_plot.raster import draw_hline, draw_segment, draw_vline, fill_polygon, fill_rect
from funcgraph_plot.raster.canvas import RGBA
from funcgraph_plot.viewport import Bounds, ScreenSize, WorldPoint, to_screen


DEFAULT_GRID_OVERSCAN = 5
DEFAULT_MAJOR_EVERY = 5
DEFAULT_ARROW_SIZE = 10


@dataclass(frozen=True)
class GridStyle:
    minor_color: RGBA = (0, 0, 0, 70)
    major_color: RGBA = (0, 0, 0, 160)
    minor_width: int = 1
    major_width: int = 2
    axis_color: RGBA = (0, 0, 0, 255)
    axis_width: int = 3
    arrow_size: int = DEFAULT_ARROW_SIZE
    overscan: int = DEFAULT_GRID_OVERSCAN
    major_every: int = DEFAULT_MAJOR_EVERY

    def __post_init__(self) -> None:
        if self.minor_width <= 0 or self.major_width <= 0 or self.axis_width <= 0:
            raise ValueError("line widths must be > 0")
        if self.major_width <= self.minor_width:
            raise ValueError("major_width must be > minor_width")
        if self.arrow_size <= 0:
            raise ValueError("arrow_size must be > 0")
        if self.overscan < 0:
            raise ValueError("overscan must be >= 0")
        if self.major_every <= 0:
            raise ValueError("major_every must be > 0")


@dataclass(frozen=True)
class GridStats:
    vertical_lines: int
    horizontal_lines: int
    vertical_saturated: bool
    horizontal_saturated: bool
    arrows: int


def grid_range(lo: float, hi: float, overscan: int = DEFAULT_GRID_OVERSCAN) -> range:
    """Integers in [floor(lo) - overscan, ceil(hi) + overscan]."""
    return range(math.floor(lo) - overscan, math.ceil(hi) + overscan + 1)


def major_range(values: range, major_every: int = DEFAULT_MAJOR_EVERY) -> range:
    first = -(-values.start // major_every) * major_every
    return range(first, values.stop, major_every)


def range_size(values: range) -> int:
    # len() overflows past sys.maxsize once the view is zoomed far out.
    return max(0, (values.stop - values.start + values.step - 1) // values.step)


def is_major(value: int, major_every: int = DEFAULT_MAJOR_EVERY) -> bool:
    return value % major_every == 0


def arrow_head(x1: float, y1: float, x2: float, y2: float, size: float) -> list[tuple[float, float]] | None:
    """Head triangle for an arrow from (x1, y1) to (x2, y2), in screen coordinates.

    The canonical rightward head `(len, 0), (len - size, -size), (len - size, size)`
    is rotated by the segment angle and moved to the start point.
    """
    dx = x2 - x1
    dy = y2 - y1
    length = math.hypot(dx, dy)
    if not math.isfinite(length) or length < 1.0:
        return None
    angle = math.atan2(dy, dx)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    canonical = ((length, 0.0), (length - size, -size), (length - size, size))
    return [(x1 + px * cos_a - py * sin_a, y1 + px * sin_a + py * cos_a) for px, py in canonical]


def draw_arrow(
    canvas: np.ndarray,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    color: RGBA,
    width: int,
    head_size: float,
) -> bool:
    head = arrow_head(x1, y1, x2, y2, head_size)
    if head is None:
        return False
    draw_segment(canvas, x1, y1, x2, y2, color=color, width=width)
    fill_polygon(canvas, head, color)
    return True


class GridRenderer:
    def __init__(self, style: GridStyle | None = None) -> None:
        self.style = style or GridStyle()

    def render(self, canvas: np.ndarray, bounds: Bounds) -> GridStats:
        size = ScreenSize(width=canvas.shape[1], height=canvas.shape[0])
        v_lines, v_saturated = self._draw_lines(canvas, bounds, size, vertical=True)
        h_lines, h_saturated = self._draw_lines(canvas, bounds, size, vertical=False)
        arrows = self._draw_axes(canvas, bounds, size)
        return GridStats(
            vertical_lines=v_lines,
            horizontal_lines=h_lines,
            vertical_saturated=v_saturated,
            horizontal_saturated=h_saturated,
            arrows=arrows,
        )

    def _draw_lines(self, canvas: np.ndarray, bounds: Bounds, size: ScreenSize, *, vertical: bool) -> tuple[int, bool]:
        style = self.style
        if vertical:
            values = grid_range(bounds.left, bounds.right, style.overscan)
            pixels = size.width
        else:
            values = grid_range(bounds.bottom, bounds.top, style.overscan)
            pixels = size.height
        # Past one line per pixel the lines merge into a solid wash.
        budget = 2 * pixels + 2 * style.overscan
        drawn = 0
        saturated = False
        passes = (
            (style.minor_color, style.minor_width, values, True),
            (style.major_color, style.major_width, major_range(values, style.major_every), False),
        )
        for color, width, line_values, skip_major in passes:
            if range_size(line_values) > budget:
                fill_rect(canvas, 0, 0, size.width - 1, size.height - 1, color)
                saturated = True
                continue
            for value in line_values:
                if skip_major and is_major(value, style.major_every):
                    continue
                if vertical:
                    sx = to_screen(WorldPoint(float(value), bounds.top), bounds, size).x
                    draw_vline(canvas, round(sx), 0, size.height - 1, color, width=width)
                else:
                    sy = to_screen(WorldPoint(bounds.left, float(value)), bounds, size).y
                    draw_hline(canvas, 0, size.width - 1, round(sy), color, width=width)
                drawn += 1
        return drawn, saturated

    def _draw_axes(self, canvas: np.ndarray, bounds: Bounds, size: ScreenSize) -> int:
        style = self.style
        origin = to_screen(WorldPoint(0.0, 0.0), bounds, size)
        ends = (
            WorldPoint(bounds.right, 0.0),
            WorldPoint(bounds.left, 0.0),
            WorldPoint(0.0, bounds.top),
            WorldPoint(0.0, bounds.bottom),
        )
        drawn = 0
        for end in ends:
            tip = to_screen(end, bounds, size)
            if draw_arrow(
                canvas,
                origin.x,
                origin.y,
                tip.x,
                tip.y,
                color=style.axis_color,
                width=style.axis_width,
                head_size=style.arrow_size,
            ):
                drawn += 1
        return drawn
