from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import threading
import time

import torch


LOGGER = logging.getLogger(__name__)
MAGENTA = torch.tensor([255, 0, 255, 255], dtype=torch.uint8)


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor


@dataclass(frozen=True)
class WriteBatch:
    operations: list[FullRewrite]


@dataclass(frozen=True)
class PresentEvent:
    event_id: int
    revision: int
    ts_ns: int


class FrameMatrix:
    """Front buffer of the graph surface.

    Writers stage every operation of a batch on a private copy (the back
    buffer) and swap it in under the write lock, so readers only ever see whole
    frames. Each commit queues a PresentEvent for the display runtime.
    """

    def __init__(self, height: int, width: int, background: tuple[int, int, int, int] = (255, 255, 255, 255)) -> None:
        if height <= 0 or width <= 0:
            raise ValueError("height and width must be > 0")
        self.height = height
        self.width = width
        self._write_lock = threading.Lock()
        self._event_lock = threading.Lock()
        self._event_cv = threading.Condition(self._event_lock)
        self._events: deque[PresentEvent] = deque()
        self._next_event_id = 1
        self._revision = 0
        bg = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
        self._matrix = bg.expand(height, width, 4).clone()

    @property
    def revision(self) -> int:
        return self._revision

    def read_snapshot(self) -> torch.Tensor:
        with self._write_lock:
            return self._matrix.clone()

    def commit(self, batch: WriteBatch) -> PresentEvent:
        if not batch.operations:
            raise ValueError("write batch must include at least one operation")

        with self._write_lock:
            staged = self._matrix
            offending_pixels = 0
            for op in batch.operations:
                staged, op_offending = self._apply_operation(op)
                offending_pixels += op_offending

            if offending_pixels > 0:
                LOGGER.warning(
                    "FrameMatrix commit sanitized invalid RGBA channels; offending_pixels=%d",
                    offending_pixels,
                )

            self._matrix = staged
            self._revision += 1
            event = PresentEvent(
                event_id=self._next_event_id,
                revision=self._revision,
                ts_ns=time.time_ns(),
            )
            self._next_event_id += 1

        with self._event_cv:
            self._events.append(event)
            self._event_cv.notify_all()

        return event

    def pop_present(self, timeout: float | None = None) -> PresentEvent | None:
        with self._event_cv:
            if not self._events:
                if timeout is None:
                    return None
                self._event_cv.wait(timeout=timeout)
            if not self._events:
                return None
            return self._events.popleft()

    def pending_present_count(self) -> int:
        with self._event_lock:
            return len(self._events)

    def _apply_operation(self, op: FullRewrite) -> tuple[torch.Tensor, int]:
        if isinstance(op, FullRewrite):
            return _sanitize_rgba_tensor(op.tensor_h_w_4, (self.height, self.width, 4))
        raise TypeError(f"Unsupported write op: {type(op)!r}")


def _sanitize_rgba_tensor(value: torch.Tensor, expected_shape: tuple[int, ...]) -> tuple[torch.Tensor, int]:
    if not torch.is_tensor(value):
        raise ValueError("rgba tensor must be a torch.Tensor")
    if tuple(value.shape) != expected_shape:
        raise ValueError(f"rgba tensor has invalid shape: {tuple(value.shape)} expected {expected_shape}")
    if value.dtype == torch.uint8:
        return value.clone(), 0
    if value.dtype == torch.bool or value.is_complex():
        raise ValueError(f"rgba tensor must be a real numeric tensor, got {value.dtype}")
    raw = value.to(torch.float32)
    invalid = ~torch.isfinite(raw) | (raw < 0) | (raw > 255)
    pixel_mask = torch.any(invalid, dim=-1)
    invalid_pixels = int(pixel_mask.sum().item())
    clamped = torch.clamp(torch.nan_to_num(raw, nan=0.0), 0, 255).to(torch.uint8)
    if invalid_pixels > 0:
        clamped[pixel_mask] = MAGENTA
    return clamped, invalid_pixels
