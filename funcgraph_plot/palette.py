from __future__ import annotations

from funcgraph_plot.raster.canvas import RGBA


DEFAULT_PALETTE: tuple[RGBA, ...] = (
    (199, 68, 64, 255),
    (45, 112, 179, 255),
    (56, 140, 70, 255),
    (96, 66, 166, 255),
    (250, 120, 0, 255),
    (0, 0, 0, 255),
    (0, 150, 150, 255),
    (200, 40, 160, 255),
    (130, 90, 40, 255),
    (110, 110, 110, 255),
)


def color_for_index(index: int, palette: tuple[RGBA, ...] = DEFAULT_PALETTE) -> RGBA:
    if not palette:
        raise ValueError("palette must include at least one color")
    return palette[index % len(palette)]
