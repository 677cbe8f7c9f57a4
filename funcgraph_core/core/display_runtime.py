from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Optional

import torch

from .frame_matrix import FrameMatrix, PresentEvent
from funcgraph_core.targets.base import DisplayFrame, RenderTarget

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresentTick:
    event: PresentEvent
    frame: DisplayFrame


class DisplayRuntime:
    """Forwards committed frames from the frame matrix to a render target."""

    def __init__(self, matrix: FrameMatrix, target: RenderTarget) -> None:
        self._matrix = matrix
        self._target = target
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._target_started = False
        self._last_error: Exception | None = None
        self._frames_presented = 0

    @property
    def frames_presented(self) -> int:
        return self._frames_presented

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self.start_target()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="funcgraph-display", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self._target_started:
            self._target.stop()
            self._target_started = False

    def present_once(self, timeout: float | None = None) -> PresentTick | None:
        event = self._matrix.pop_present(timeout=timeout)
        if event is None:
            return None

        # Skip to the newest commit; the snapshot below already holds it.
        while True:
            newer = self._matrix.pop_present(timeout=None)
            if newer is None:
                break
            event = newer

        snapshot = self._matrix.read_snapshot()
        frame = _build_frame(snapshot=snapshot, revision=event.revision)
        self._target.present_frame(frame)
        self._frames_presented += 1
        return PresentTick(event=event, frame=frame)

    def should_close(self) -> bool:
        if not self._target_started:
            return False
        self._target.pump_events()
        return self._target.should_close()

    def start_target(self) -> None:
        if self._target_started:
            return
        self._target.start()
        self._target_started = True

    def _run_loop(self) -> None:
        while self._running.is_set():
            try:
                if self.should_close():
                    self._running.clear()
                    break
                self.present_once(timeout=0.1)
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("DisplayRuntime present loop failed: %s", exc)
                self._running.clear()
                break


def _build_frame(snapshot: torch.Tensor, revision: int) -> DisplayFrame:
    if snapshot.ndim != 3 or snapshot.shape[2] != 4:
        raise ValueError(f"invalid snapshot shape: {tuple(snapshot.shape)}")
    if snapshot.dtype != torch.uint8:
        raise ValueError(f"invalid snapshot dtype: {snapshot.dtype}")
    height, width, _ = snapshot.shape
    return DisplayFrame(
        revision=revision,
        width=int(width),
        height=int(height),
        rgba=snapshot,
    )
