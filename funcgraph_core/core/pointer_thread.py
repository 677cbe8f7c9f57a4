from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
import itertools
import logging
import threading
import time
from typing import Callable, Literal, Protocol


LOGGER = logging.getLogger(__name__)

PointerEventType = Literal["pointer_down", "pointer_move", "pointer_up", "scroll"]
PointerStatus = Literal["OK", "NOT_DETECTED"]

_PAYLOAD_KEYS = ("x", "y", "button", "delta_x", "delta_y")


@dataclass(frozen=True)
class PointerEvent:
    event_id: int
    ts_ns: int
    event_type: str
    status: PointerStatus
    payload: dict[str, object] | None


class PointerEventSource(Protocol):
    def poll(self, ts_ns: int) -> list[PointerEvent]:
        ...


class PointerThread:
    """Bounded pointer event collector.

    Consecutive moves collapse into the newest one, and press/release events
    are never dropped to make room.
    """

    def __init__(
        self,
        source: PointerEventSource | None = None,
        max_queue_size: int = 1024,
        poll_interval_s: float = 1 / 240,
        surface_size_provider: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        if max_queue_size <= 0:
            raise ValueError("max_queue_size must be > 0")
        if poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be > 0")
        self._source = source
        self._max_queue_size = max_queue_size
        self._poll_interval_s = poll_interval_s
        self._surface_size_provider = surface_size_provider
        self._queue: deque[PointerEvent] = deque()
        self._lock = threading.Lock()
        self._running = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_error: Exception | None = None
        self._event_ids = itertools.count(1)

    def start(self) -> None:
        if self._source is None:
            return
        if self._thread and self._thread.is_alive():
            return
        self._running.set()
        self._thread = threading.Thread(target=self._run, name="funcgraph-pointer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

    def submit(self, event_type: str, payload: dict[str, object] | None = None) -> PointerEvent:
        """Push an event from a callback-driven toolkit instead of a polled source."""
        event = PointerEvent(
            event_id=next(self._event_ids),
            ts_ns=time.time_ns(),
            event_type=event_type,
            status="OK",
            payload=payload,
        )
        normalized = self._normalize(event)
        self._enqueue(normalized)
        return normalized

    def poll_events(self, max_events: int) -> list[PointerEvent]:
        if max_events <= 0:
            raise ValueError("max_events must be > 0")
        out: list[PointerEvent] = []
        with self._lock:
            while self._queue and len(out) < max_events:
                out.append(self._queue.popleft())
        return out

    def pending_count(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def _run(self) -> None:
        source = self._source
        if source is None:
            return
        while self._running.is_set():
            try:
                for event in source.poll(ts_ns=time.time_ns()):
                    self._enqueue(self._normalize(event))
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("PointerThread poll loop failed: %s", exc)
                self._running.clear()
                break
            time.sleep(self._poll_interval_s)

    def _normalize(self, event: PointerEvent) -> PointerEvent:
        if event.event_type == "pointer_up":
            return replace(event, status="OK", payload=_safe_payload(event.payload))
        if event.event_type not in ("pointer_down", "pointer_move", "scroll"):
            return replace(event, status="NOT_DETECTED", payload=None)
        if not isinstance(event.payload, dict):
            return replace(event, status="NOT_DETECTED", payload=None)
        payload = _safe_payload(event.payload)
        if event.event_type == "scroll":
            if "delta_y" not in payload:
                return replace(event, status="NOT_DETECTED", payload=None)
            return replace(event, status="OK", payload=payload)
        if "x" not in payload or "y" not in payload:
            return replace(event, status="NOT_DETECTED", payload=None)
        # A drag may continue past the surface edge; only presses must land on it.
        if event.event_type == "pointer_down" and not self._on_surface(payload["x"], payload["y"]):
            return replace(event, status="NOT_DETECTED", payload=None)
        return replace(event, status="OK", payload=payload)

    def _on_surface(self, x: object, y: object) -> bool:
        if self._surface_size_provider is None:
            return True
        width, height = self._surface_size_provider()
        return 0.0 <= float(x) < float(width) and 0.0 <= float(y) < float(height)

    def _enqueue(self, event: PointerEvent) -> None:
        with self._lock:
            if _is_move(event) and self._queue and _is_move(self._queue[-1]):
                self._queue[-1] = event
                return
            if len(self._queue) < self._max_queue_size:
                self._queue.append(event)
                return
            if _is_move(event):
                return
            if self._drop_one_droppable():
                self._queue.append(event)
                return
            raise RuntimeError("pointer queue saturated with press/release events; refusing to drop them")

    def _drop_one_droppable(self) -> bool:
        for i, queued in enumerate(self._queue):
            if queued.event_type in ("pointer_move", "scroll") or queued.status != "OK":
                del self._queue[i]
                return True
        return False


def _safe_payload(payload: object) -> dict[str, object]:
    if not isinstance(payload, dict):
        return {}
    out: dict[str, object] = {}
    for key in _PAYLOAD_KEYS:
        if key not in payload:
            continue
        value = payload[key]
        if key in ("x", "y", "delta_x", "delta_y"):
            try:
                value = float(value)
            except (TypeError, ValueError):
                continue
        out[key] = value
    return out


def _is_move(event: PointerEvent) -> bool:
    return event.event_type == "pointer_move" and event.status == "OK"
