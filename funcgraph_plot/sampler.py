from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from funcgraph_plot.errors import EvaluationUndefined
from funcgraph_plot.functions import FunctionEvaluator, FunctionList, evaluate_point
from funcgraph_plot.palette import DEFAULT_PALETTE, color_for_index
from funcgraph_plot.raster import draw_segment
from funcgraph_plot.raster.canvas import RGBA
from funcgraph_plot.viewport import Bounds, ScreenSize


LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLES_PER_VIEW = 200


@dataclass(frozen=True)
class SampledCurve:
    """World-space segments `(x0, y0, x1, y1)` of one function over one viewport."""

    segments: np.ndarray
    attempted: int
    skipped: int

    @property
    def drawn(self) -> int:
        return int(self.segments.shape[0])


@dataclass(frozen=True)
class CurveStats:
    label: str
    color: RGBA
    attempted: int
    skipped: int
    drawn: int
    visible: int


def sample_function(
    evaluator: FunctionEvaluator,
    bounds: Bounds,
    samples_per_view: int = DEFAULT_SAMPLES_PER_VIEW,
) -> SampledCurve:
    """Walk [left, right] with step range_x / samples_per_view.

    Each step joins the values at x and x + step; a step whose endpoint is
    undefined is skipped and the walk continues.
    """
    if samples_per_view <= 0:
        raise ValueError("samples_per_view must be > 0")
    inc = bounds.range_x / float(samples_per_view)
    segments: list[tuple[float, float, float, float]] = []
    attempted = 0
    skipped = 0
    x = bounds.left
    y = _try_evaluate(evaluator, x)
    while x <= bounds.right:
        x_next = x + inc
        if x_next <= x:
            LOGGER.debug("sample step %r vanishes at x=%r; stopping walk", inc, x)
            break
        y_next = _try_evaluate(evaluator, x_next)
        attempted += 1
        if y is None or y_next is None:
            skipped += 1
        else:
            segments.append((x, y, x_next, y_next))
        x = x_next
        y = y_next
    arr = np.asarray(segments, dtype=np.float64).reshape(-1, 4)
    return SampledCurve(segments=arr, attempted=attempted, skipped=skipped)


def segments_to_screen(segments: np.ndarray, bounds: Bounds, size: ScreenSize) -> np.ndarray:
    sx = size.width / bounds.range_x
    sy = size.height / bounds.range_y
    out = np.empty_like(segments)
    with np.errstate(over="ignore", invalid="ignore"):
        out[:, 0::2] = (segments[:, 0::2] - bounds.left) * sx
        out[:, 1::2] = (bounds.top - segments[:, 1::2]) * sy
    return out


class FunctionRenderer:
    def __init__(
        self,
        samples_per_view: int = DEFAULT_SAMPLES_PER_VIEW,
        line_width: int = 2,
        palette: tuple[RGBA, ...] = DEFAULT_PALETTE,
    ) -> None:
        if samples_per_view <= 0:
            raise ValueError("samples_per_view must be > 0")
        if line_width <= 0:
            raise ValueError("line_width must be > 0")
        if not palette:
            raise ValueError("palette must include at least one color")
        self.samples_per_view = samples_per_view
        self.line_width = line_width
        self.palette = palette

    def render(self, canvas: np.ndarray, functions: FunctionList, bounds: Bounds) -> list[CurveStats]:
        size = ScreenSize(width=canvas.shape[1], height=canvas.shape[0])
        stats: list[CurveStats] = []
        with functions.locked() as entries:
            for index, entry in enumerate(entries):
                color = color_for_index(index, self.palette)
                curve = sample_function(entry.evaluator, bounds, self.samples_per_view)
                if curve.skipped:
                    LOGGER.debug(
                        "function %s: skipped %d of %d segments", entry.label, curve.skipped, curve.attempted
                    )
                visible = self._draw_curve(canvas, curve, bounds, size, color)
                stats.append(
                    CurveStats(
                        label=entry.label,
                        color=color,
                        attempted=curve.attempted,
                        skipped=curve.skipped,
                        drawn=curve.drawn,
                        visible=visible,
                    )
                )
        return stats

    def _draw_curve(self, canvas: np.ndarray, curve: SampledCurve, bounds: Bounds, size: ScreenSize, color: RGBA) -> int:
        if curve.drawn == 0:
            return 0
        visible = 0
        for x0, y0, x1, y1 in segments_to_screen(curve.segments, bounds, size).tolist():
            if draw_segment(canvas, x0, y0, x1, y1, color=color, width=self.line_width):
                visible += 1
        return visible


def _try_evaluate(evaluator: FunctionEvaluator, x: float) -> float | None:
    try:
        return evaluate_point(evaluator, x)
    except EvaluationUndefined:
        return None
