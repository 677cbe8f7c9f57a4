from __future__ import annotations

import argparse
import logging
from pathlib import Path

from funcgraph_core.core import GraphConfig, GraphRuntime, PointerEvent, load_config
from funcgraph_core.targets import HeadlessTarget, PngSnapshotTarget, RenderTarget
from funcgraph_plot.functions import DEMO_FUNCTIONS, FunctionList, demo_function

LOGGER = logging.getLogger("funcgraph")


class _ScriptedPointerSource:
    """Replays a fixed list of pointer events on the first poll."""

    def __init__(self, script: list[tuple[str, dict[str, float] | None]]) -> None:
        self._script = list(script)
        self._next_id = 1

    def poll(self, ts_ns: int) -> list[PointerEvent]:
        out: list[PointerEvent] = []
        for event_type, payload in self._script:
            out.append(
                PointerEvent(
                    event_id=self._next_id,
                    ts_ns=ts_ns,
                    event_type=event_type,
                    status="OK",
                    payload=payload,
                )
            )
            self._next_id += 1
        self._script.clear()
        return out


def main() -> None:
    parser = argparse.ArgumentParser(prog="funcgraph")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [funcgraph] table.")
    sub = parser.add_subparsers(dest="command", required=True)

    snapshot = sub.add_parser("snapshot", help="Render one frame of demo functions to a PNG file.")
    _add_view_arguments(snapshot)
    snapshot.add_argument("--output", type=Path, default=Path("funcgraph.png"))

    run = sub.add_parser("run", help="Run the render and input tasks against a headless target.")
    _add_view_arguments(run)
    run.add_argument("--ticks", type=int, default=100, help="Render ticks before stopping.")
    run.add_argument(
        "--drag",
        type=_parse_drag,
        action="append",
        default=[],
        metavar="X0,Y0,X1,Y1",
        help="Scripted drag in screen pixels. May be repeated.",
    )
    run.add_argument(
        "--scroll",
        type=int,
        default=0,
        help="Scripted wheel notches; negative zooms in, positive zooms out.",
    )
    run.add_argument("--snapshot", type=Path, default=None, help="Write the last presented frame as PNG.")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    config = _resolve_config(args)
    functions = _build_functions(args.function)

    if args.command == "snapshot":
        target = PngSnapshotTarget(path=args.output)
        runtime = GraphRuntime(config=config, target=target, functions=functions)
        runtime.run(max_ticks=1)
        print(f"wrote {target.written}")
        return

    if args.command == "run":
        script = _build_script(args.drag, args.scroll)
        if args.snapshot is not None:
            target: RenderTarget = PngSnapshotTarget(path=args.snapshot)
        else:
            target = HeadlessTarget()
        source = _ScriptedPointerSource(script) if script else None
        runtime = GraphRuntime(config=config, target=target, source=source, functions=functions)
        result = runtime.run(max_ticks=args.ticks)
        bounds = runtime.viewport.bounds()
        print(
            f"run complete: ticks={result.ticks_run} frames={result.frames_presented} "
            f"events={result.events_applied} "
            f"bounds=({bounds.left:g}, {bounds.right:g}, {bounds.top:g}, {bounds.bottom:g})"
        )
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--function",
        action="append",
        default=[],
        choices=sorted(DEMO_FUNCTIONS),
        help="Demo function to plot. May be repeated; colours follow the order given.",
    )
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--left", type=float, default=None)
    parser.add_argument("--right", type=float, default=None)
    parser.add_argument("--top", type=float, default=None)
    parser.add_argument("--bottom", type=float, default=None)


def _resolve_config(args: argparse.Namespace) -> GraphConfig:
    config = load_config(args.config)
    return config.with_overrides(
        width=args.width,
        height=args.height,
        left=args.left,
        right=args.right,
        top=args.top,
        bottom=args.bottom,
    )


def _build_functions(names: list[str]) -> FunctionList:
    functions = FunctionList()
    for name in names:
        functions.add(demo_function(name))
    return functions


def _parse_drag(raw: str) -> tuple[float, float, float, float]:
    parts = raw.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("drag must be X0,Y0,X1,Y1")
    try:
        x0, y0, x1, y1 = (float(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"drag coordinates must be numbers: {raw}") from None
    return (x0, y0, x1, y1)


def _build_script(
    drags: list[tuple[float, float, float, float]],
    scroll: int,
) -> list[tuple[str, dict[str, float] | None]]:
    script: list[tuple[str, dict[str, float] | None]] = []
    for x0, y0, x1, y1 in drags:
        script.append(("pointer_down", {"x": x0, "y": y0}))
        script.append(("pointer_move", {"x": x1, "y": y1}))
        script.append(("pointer_up", None))
    notch = -1.0 if scroll < 0 else 1.0
    for _ in range(abs(scroll)):
        script.append(("scroll", {"delta_y": notch}))
    return script


if __name__ == "__main__":
    main()
