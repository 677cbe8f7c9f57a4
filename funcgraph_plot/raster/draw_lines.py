from __future__ import annotations

import math

import numpy as np

from funcgraph_plot.raster.canvas import RGBA, fill_rect


def draw_segment(
    dst: np.ndarray,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    color: RGBA,
    width: int = 1,
) -> bool:
    """Rasterize one segment after clipping it to the canvas (grown by the brush radius).

    Returns False when nothing of the segment lands on the canvas.
    """
    radius = max(0, width // 2)
    clipped = clip_segment(
        x0,
        y0,
        x1,
        y1,
        xmin=-radius,
        ymin=-radius,
        xmax=dst.shape[1] - 1 + radius,
        ymax=dst.shape[0] - 1 + radius,
    )
    if clipped is None:
        return False
    cx0, cy0, cx1, cy1 = clipped
    _draw_line_segment(dst, round(cx0), round(cy0), round(cx1), round(cy1), color=color, radius=radius)
    return True


def clip_segment(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    *,
    xmin: float,
    ymin: float,
    xmax: float,
    ymax: float,
) -> tuple[float, float, float, float] | None:
    """Liang-Barsky clip of a segment against an axis-aligned box."""
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    dx = x1 - x0
    dy = y1 - y0
    t0 = 0.0
    t1 = 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        t = q / p
        if p < 0.0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


def _draw_line_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, radius: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        fill_rect(dst, x0 - radius, y0 - radius, x0 + radius, y0 + radius, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
