from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import numpy as np
import torch

from funcgraph_plot.scene import GraphScene

from .frame_clock import FrameClock
from .frame_matrix import FrameMatrix, FullRewrite, PresentEvent, WriteBatch

LOGGER = logging.getLogger(__name__)


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")

    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
    return WriteBatch([FullRewrite(tensor)])


class RenderLoop:
    """Periodic render task: draws the scene into a back buffer and commits it to the frame matrix.

    It only reads the shared viewport and function list; it never calls into
    the input side.
    """

    def __init__(self, scene: GraphScene, matrix: FrameMatrix, clock: FrameClock | None = None) -> None:
        self._scene = scene
        self._matrix = matrix
        self._clock = clock or FrameClock()
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_error: Exception | None = None
        self._frames_rendered = 0

    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def frames_rendered(self) -> int:
        return self._frames_rendered

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def render_once(self) -> PresentEvent:
        canvas = self._scene.render(self._matrix.width, self._matrix.height)
        event = self._matrix.commit(compile_full_rewrite_batch(canvas))
        self._frames_rendered += 1
        return event

    def tick(self) -> float:
        """Render if the clock is due and return the sleep until the next tick."""
        started = time.perf_counter()
        if not self._clock.due(started):
            return self._clock.remaining(started)
        self.render_once()
        return self._clock.mark(started, time.perf_counter())

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._running.set()
        self._thread = threading.Thread(target=self._run, name="funcgraph-render", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _run(self) -> None:
        while self._running.is_set():
            try:
                sleep_for = self.tick()
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("RenderLoop failed: %s", exc)
                self._running.clear()
                break
            if sleep_for > 0:
                time.sleep(sleep_for)
