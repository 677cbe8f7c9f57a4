from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Callable, Mapping, TypeAlias

from funcgraph_plot.viewport import Bounds, ScreenPoint, ScreenSize, Viewport, screen_delta_to_world


LOGGER = logging.getLogger(__name__)

DEFAULT_ZOOM_COEFFICIENT = 0.1


@dataclass(frozen=True)
class PointerPress:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerRelease:
    pass


@dataclass(frozen=True)
class Scroll:
    rotation: float


GestureInput: TypeAlias = PointerPress | PointerMove | PointerRelease | Scroll


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    anchor: ScreenPoint
    snapshot: Bounds


GestureState: TypeAlias = Idle | Dragging

IDLE = Idle()


def parse_pointer_event(event_type: str, payload: object) -> GestureInput | None:
    """Translate a normalized pointer event into a gesture input.

    Unknown event types and payloads without the fields a gesture needs yield None.
    """
    if event_type == "pointer_up":
        return PointerRelease()
    if not isinstance(payload, Mapping):
        return None
    if event_type == "scroll":
        try:
            return Scroll(rotation=float(payload.get("delta_y", 0.0)))
        except (TypeError, ValueError):
            return None
    if event_type not in ("pointer_down", "pointer_move"):
        return None
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    if event_type == "pointer_down":
        return PointerPress(x=x, y=y)
    return PointerMove(x=x, y=y)


def step(
    state: GestureState,
    gesture: GestureInput,
    viewport: Viewport,
    size: ScreenSize,
    zoom_coefficient: float = DEFAULT_ZOOM_COEFFICIENT,
) -> GestureState:
    """Apply one gesture input and return the next state."""
    if isinstance(gesture, Scroll):
        if gesture.rotation != 0:
            direction = -1.0 if gesture.rotation < 0 else 1.0
            viewport.zoom(direction, zoom_coefficient)
        return state
    if isinstance(gesture, PointerPress):
        return Dragging(anchor=ScreenPoint(gesture.x, gesture.y), snapshot=viewport.bounds())
    if isinstance(gesture, PointerRelease):
        return IDLE
    if isinstance(gesture, PointerMove):
        if not isinstance(state, Dragging):
            # Platforms deliver moves without a held button; nothing is anchored.
            return state
        dx_world, dy_world = screen_delta_to_world(
            gesture.x - state.anchor.x,
            gesture.y - state.anchor.y,
            state.snapshot,
            size,
        )
        try:
            viewport.set_bounds(state.snapshot.shifted(-dx_world, -dy_world))
        except ValueError as exc:
            LOGGER.debug("drag ignored: %s", exc)
        return state
    raise TypeError(f"Unsupported gesture input: {type(gesture)!r}")


class GestureController:
    """Owns the Idle/Dragging state and applies pointer gestures to a viewport."""

    def __init__(
        self,
        viewport: Viewport,
        size_provider: Callable[[], ScreenSize],
        zoom_coefficient: float = DEFAULT_ZOOM_COEFFICIENT,
    ) -> None:
        if zoom_coefficient <= 0:
            raise ValueError("zoom_coefficient must be > 0")
        self._viewport = viewport
        self._size_provider = size_provider
        self._zoom_coefficient = zoom_coefficient
        self._state: GestureState = IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    def handle(self, gesture: GestureInput) -> GestureState:
        with self._lock:
            self._state = step(
                self._state,
                gesture,
                self._viewport,
                self._size_provider(),
                zoom_coefficient=self._zoom_coefficient,
            )
            return self._state

    def handle_event(self, event_type: str, payload: object) -> GestureState:
        gesture = parse_pointer_event(event_type, payload)
        if gesture is None:
            return self._state
        return self.handle(gesture)

    def press(self, x: float, y: float) -> GestureState:
        return self.handle(PointerPress(x, y))

    def move(self, x: float, y: float) -> GestureState:
        return self.handle(PointerMove(x, y))

    def release(self) -> GestureState:
        return self.handle(PointerRelease())

    def scroll(self, rotation: float) -> GestureState:
        return self.handle(Scroll(rotation))
