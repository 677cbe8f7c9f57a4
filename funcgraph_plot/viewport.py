from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import threading

from funcgraph_plot.errors import DegenerateZoomRequest


LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_SPAN = 1e-9


@dataclass(frozen=True)
class WorldPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ScreenSize:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("screen width and height must be > 0")


@dataclass(frozen=True)
class Bounds:
    """World-space rectangle [left, right] x [bottom, top]."""

    left: float
    right: float
    top: float
    bottom: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.left, self.right, self.top, self.bottom)):
            raise ValueError("bounds must be finite")
        if not self.left < self.right:
            raise ValueError(f"left must be < right: {self.left} >= {self.right}")
        if not self.bottom < self.top:
            raise ValueError(f"bottom must be < top: {self.bottom} >= {self.top}")
        # Transforms divide by the ranges, so they must be finite too.
        if not (math.isfinite(self.right - self.left) and math.isfinite(self.top - self.bottom)):
            raise ValueError("bounds ranges must be finite")

    @property
    def range_x(self) -> float:
        return self.right - self.left

    @property
    def range_y(self) -> float:
        return self.top - self.bottom

    @property
    def center(self) -> WorldPoint:
        return WorldPoint((self.left + self.right) * 0.5, (self.top + self.bottom) * 0.5)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.right, self.top, self.bottom)

    def shifted(self, dx: float, dy: float) -> "Bounds":
        return Bounds(
            left=self.left + dx,
            right=self.right + dx,
            top=self.top + dy,
            bottom=self.bottom + dy,
        )


DEFAULT_BOUNDS = Bounds(left=-10.0, right=10.0, top=10.0, bottom=-10.0)


def to_screen(point: WorldPoint, bounds: Bounds, size: ScreenSize) -> ScreenPoint:
    return ScreenPoint(
        (point.x - bounds.left) * size.width / bounds.range_x,
        (bounds.top - point.y) * size.height / bounds.range_y,
    )


def to_world(point: ScreenPoint, bounds: Bounds, size: ScreenSize) -> WorldPoint:
    return WorldPoint(
        bounds.left + point.x * bounds.range_x / size.width,
        bounds.top - point.y * bounds.range_y / size.height,
    )


def screen_delta_to_world(dx: float, dy: float, bounds: Bounds, size: ScreenSize) -> tuple[float, float]:
    # Screen y grows downward, world y grows upward.
    return (dx * bounds.range_x / size.width, -dy * bounds.range_y / size.height)


def zoomed_bounds(bounds: Bounds, direction: float, coefficient: float, min_span: float = DEFAULT_MIN_SPAN) -> Bounds:
    """Shrink (direction < 0) or grow (direction > 0) both ranges by `coefficient * max(range_x, range_y)`.

    The rectangle keeps its center. Raises DegenerateZoomRequest when the result
    would have a range below `min_span` or stop being representable.
    """
    if coefficient <= 0 or not math.isfinite(coefficient):
        raise ValueError("zoom coefficient must be a finite value > 0")
    if direction == 0:
        return bounds
    inc = coefficient * max(bounds.range_x, bounds.range_y)
    half = inc * 0.5 if direction > 0 else -inc * 0.5
    left = bounds.left - half
    right = bounds.right + half
    top = bounds.top + half
    bottom = bounds.bottom - half
    if right - left < min_span or top - bottom < min_span:
        raise DegenerateZoomRequest(
            f"zoom would collapse viewport to range ({right - left!r}, {top - bottom!r}) below {min_span!r}"
        )
    try:
        return Bounds(left=left, right=right, top=top, bottom=bottom)
    except ValueError as exc:
        raise DegenerateZoomRequest(str(exc)) from exc


class Viewport:
    """Visible world rectangle shared by the input and render tasks.

    All four bounds are replaced together under one lock so a reader never
    observes a half-updated rectangle.
    """

    def __init__(self, bounds: Bounds | None = None, min_span: float = DEFAULT_MIN_SPAN) -> None:
        if min_span <= 0 or not math.isfinite(min_span):
            raise ValueError("min_span must be a finite value > 0")
        initial = bounds or DEFAULT_BOUNDS
        if initial.range_x < min_span or initial.range_y < min_span:
            raise ValueError("initial bounds are narrower than min_span")
        self._bounds = initial
        self._min_span = min_span
        self._lock = threading.Lock()

    @property
    def min_span(self) -> float:
        return self._min_span

    def bounds(self) -> Bounds:
        with self._lock:
            return self._bounds

    def set_bounds(self, bounds: Bounds) -> None:
        if bounds.range_x < self._min_span or bounds.range_y < self._min_span:
            raise ValueError("bounds are narrower than min_span")
        with self._lock:
            self._bounds = bounds

    def pan(self, dx_world: float, dy_world: float) -> bool:
        with self._lock:
            try:
                shifted = self._bounds.shifted(dx_world, dy_world)
            except ValueError:
                LOGGER.debug("pan rejected: delta (%r, %r) leaves representable range", dx_world, dy_world)
                return False
            # Far from the origin a shift can round a narrow range down.
            if shifted.range_x < self._min_span or shifted.range_y < self._min_span:
                LOGGER.debug("pan rejected: delta (%r, %r) rounds range below min_span", dx_world, dy_world)
                return False
            self._bounds = shifted
            return True

    def zoom(self, direction: float, coefficient: float = 0.1) -> bool:
        if direction == 0:
            return False
        with self._lock:
            try:
                self._bounds = zoomed_bounds(self._bounds, direction, coefficient, self._min_span)
            except DegenerateZoomRequest as exc:
                LOGGER.debug("zoom rejected: %s", exc)
                return False
            return True

    def to_screen(self, point: WorldPoint, size: ScreenSize) -> ScreenPoint:
        return to_screen(point, self.bounds(), size)

    def to_world(self, point: ScreenPoint, size: ScreenSize) -> WorldPoint:
        return to_world(point, self.bounds(), size)

    def screen_delta_to_world(self, dx: float, dy: float, size: ScreenSize) -> tuple[float, float]:
        return screen_delta_to_world(dx, dy, self.bounds(), size)
