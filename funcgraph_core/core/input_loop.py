from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from funcgraph_plot.gesture import GestureController

from .pointer_thread import PointerThread

LOGGER = logging.getLogger(__name__)


class InputLoop:
    """Input task: feeds normalized pointer events to the gesture controller in arrival order."""

    def __init__(
        self,
        pointer: PointerThread,
        controller: GestureController,
        poll_interval_s: float = 1 / 240,
        max_events_per_poll: int = 64,
    ) -> None:
        if poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be > 0")
        if max_events_per_poll <= 0:
            raise ValueError("max_events_per_poll must be > 0")
        self._pointer = pointer
        self._controller = controller
        self._poll_interval_s = poll_interval_s
        self._max_events_per_poll = max_events_per_poll
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_error: Exception | None = None
        self._events_applied = 0

    @property
    def events_applied(self) -> int:
        return self._events_applied

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def drain(self) -> int:
        applied = 0
        while True:
            events = self._pointer.poll_events(max_events=self._max_events_per_poll)
            if not events:
                break
            for event in events:
                if event.status != "OK":
                    continue
                self._controller.handle_event(event.event_type, event.payload)
                applied += 1
        self._events_applied += applied
        return applied

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._pointer.start()
        self._running.set()
        self._thread = threading.Thread(target=self._run, name="funcgraph-input", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running.clear()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None
        self._pointer.stop()

    def _run(self) -> None:
        while self._running.is_set():
            try:
                self.drain()
            except Exception as exc:  # noqa: BLE001
                self._last_error = exc
                LOGGER.exception("InputLoop failed: %s", exc)
                self._running.clear()
                break
            time.sleep(self._poll_interval_s)
