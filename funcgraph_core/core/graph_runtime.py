from __future__ import annotations

from dataclasses import dataclass
import logging
import time

from funcgraph_core.targets.base import RenderTarget
from funcgraph_plot.functions import FunctionList
from funcgraph_plot.gesture import GestureController
from funcgraph_plot.grid import GridRenderer
from funcgraph_plot.sampler import FunctionRenderer
from funcgraph_plot.scene import GraphScene
from funcgraph_plot.viewport import ScreenSize, Viewport

from .config import GraphConfig
from .display_runtime import DisplayRuntime
from .frame_clock import FrameClock
from .frame_matrix import FrameMatrix
from .input_loop import InputLoop
from .pointer_thread import PointerEventSource, PointerThread
from .render_loop import RenderLoop

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphRunResult:
    ticks_run: int
    frames_presented: int
    events_applied: int
    stopped_by_target_close: bool


class GraphRuntime:
    """Wires the viewport, function list, input task, render task and display together."""

    def __init__(
        self,
        config: GraphConfig,
        target: RenderTarget,
        source: PointerEventSource | None = None,
        functions: FunctionList | None = None,
    ) -> None:
        self.config = config
        self.size = ScreenSize(width=config.width, height=config.height)
        self.viewport = Viewport(config.initial_bounds(), min_span=config.min_span)
        self.functions = functions if functions is not None else FunctionList()
        self.matrix = FrameMatrix(height=config.height, width=config.width)
        self.scene = GraphScene(
            viewport=self.viewport,
            functions=self.functions,
            grid=GridRenderer(config.grid_style()),
            function_renderer=FunctionRenderer(
                samples_per_view=config.samples_per_view,
                line_width=config.line_width,
            ),
        )
        self.controller = GestureController(
            viewport=self.viewport,
            size_provider=lambda: self.size,
            zoom_coefficient=config.zoom_coefficient,
        )
        self.pointer = PointerThread(
            source=source,
            surface_size_provider=lambda: (self.size.width, self.size.height),
        )
        self.input_loop = InputLoop(pointer=self.pointer, controller=self.controller)
        self.render_loop = RenderLoop(
            scene=self.scene,
            matrix=self.matrix,
            clock=FrameClock(interval_s=config.render_interval_s),
        )
        self.display = DisplayRuntime(matrix=self.matrix, target=target)
        self._last_error: Exception | None = None

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def start(self) -> None:
        """Run input, render and display as background threads."""
        self.input_loop.start()
        self.render_loop.start()
        self.display.start()

    def stop(self) -> None:
        self.render_loop.stop()
        self.input_loop.stop()
        self.display.stop()

    def run(self, max_ticks: int | None = None) -> GraphRunResult:
        """Run the render task on the calling thread; input stays on its own thread."""
        if max_ticks is not None and max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")
        self.display.start_target()
        self.input_loop.start()
        ticks_run = 0
        stopped_by_target_close = False
        try:
            while max_ticks is None or ticks_run < max_ticks:
                if self.display.should_close():
                    stopped_by_target_close = True
                    break
                started = time.perf_counter()
                clock = self.render_loop.clock
                if not clock.due(started):
                    time.sleep(clock.remaining(started))
                    continue
                self.render_loop.render_once()
                self.display.present_once(timeout=None)
                ticks_run += 1
                sleep_for = clock.mark(started, time.perf_counter())
                if sleep_for > 0:
                    time.sleep(sleep_for)
        except Exception as exc:  # noqa: BLE001
            self._last_error = exc
            raise
        finally:
            self.input_loop.stop()
            self.display.stop()
        LOGGER.info(
            "run complete: ticks=%d frames=%d events=%d",
            ticks_run,
            self.display.frames_presented,
            self.input_loop.events_applied,
        )
        return GraphRunResult(
            ticks_run=ticks_run,
            frames_presented=self.display.frames_presented,
            events_applied=self.input_loop.events_applied,
            stopped_by_target_close=stopped_by_target_close,
        )
