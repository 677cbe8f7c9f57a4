from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from funcgraph_plot.raster.canvas import RGBA, blend_mask
from funcgraph_plot.raster.draw_lines import draw_segment


def fill_polygon(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA) -> bool:
    """Fill a simple polygon with the even-odd rule; pixel (x, y) is sampled at its integer coordinate."""
    if len(points) < 3:
        return False
    if not all(math.isfinite(x) and math.isfinite(y) for x, y in points):
        return False
    xs = np.asarray([p[0] for p in points], dtype=np.float64)
    ys = np.asarray([p[1] for p in points], dtype=np.float64)
    x0 = max(0, int(math.floor(xs.min())))
    x1 = min(dst.shape[1] - 1, int(math.ceil(xs.max())))
    y0 = max(0, int(math.floor(ys.min())))
    y1 = min(dst.shape[0] - 1, int(math.ceil(ys.max())))
    if x1 < x0 or y1 < y0:
        return False

    px = np.arange(x0, x1 + 1, dtype=np.float64)[None, :]
    py = np.arange(y0, y1 + 1, dtype=np.float64)[:, None]
    inside = np.zeros((y1 - y0 + 1, x1 - x0 + 1), dtype=bool)
    j = xs.size - 1
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(xs.size):
            crosses = (ys[i] > py) != (ys[j] > py)
            x_at = (xs[j] - xs[i]) * (py - ys[i]) / (ys[j] - ys[i]) + xs[i]
            inside ^= crosses & (px < x_at)
            j = i
    blend_mask(dst, x0, y0, inside, color)

    # Edges are stroked so slivers narrower than a pixel stay visible.
    for i in range(xs.size):
        k = (i + 1) % xs.size
        draw_segment(dst, xs[i], ys[i], xs[k], ys[k], color=color, width=1)
    return True
