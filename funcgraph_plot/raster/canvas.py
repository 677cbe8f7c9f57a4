from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Blend `color` over the inclusive pixel rectangle, clipped to the canvas."""
    left = max(0, min(int(x0), int(x1)))
    right = min(dst.shape[1] - 1, max(int(x0), int(x1)))
    top = max(0, min(int(y0), int(y1)))
    bottom = min(dst.shape[0] - 1, max(int(y0), int(y1)))
    if right < left or bottom < top:
        return
    _blend(dst[top : bottom + 1, left : right + 1], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, width: int = 1) -> None:
    top = y - (width - 1) // 2
    fill_rect(dst, x0, top, x1, top + max(1, width) - 1, color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, width: int = 1) -> None:
    left = x - (width - 1) // 2
    fill_rect(dst, left, y0, left + max(1, width) - 1, y1, color)


def blend_mask(dst: np.ndarray, x0: int, y0: int, mask: np.ndarray, color: RGBA) -> None:
    """Blend `color` into every pixel where `mask` is true; `mask` is anchored at (x0, y0)."""
    h, w = mask.shape
    view = dst[y0 : y0 + h, x0 : x0 + w]
    if view.shape[:2] != mask.shape:
        raise ValueError("mask exceeds canvas bounds")
    if not mask.any():
        return
    a = color[3] / 255.0
    rgb = np.asarray(color[0:3], dtype=np.float32)
    current = view[mask][:, :3].astype(np.float32)
    blended = (rgb * a + current * (1.0 - a)).astype(np.uint8)
    view[mask, 0:3] = blended
    view[mask, 3] = 255


def _blend(view: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    if a >= 1.0:
        view[:, :, 0:3] = np.asarray(color[0:3], dtype=np.uint8)
        view[:, :, 3] = 255
        return
    if a <= 0.0:
        return
    inv = 1.0 - a
    view[:, :, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + view[:, :, :3].astype(np.float32) * inv).astype(
        np.uint8
    )
    view[:, :, 3] = 255
