from __future__ import annotations

from dataclasses import dataclass, fields, replace
import logging
import math
import os
from pathlib import Path
import tomllib
from typing import Any, Mapping

from funcgraph_plot.grid import GridStyle
from funcgraph_plot.viewport import Bounds

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "FUNCGRAPH_"
TOML_TABLE = "funcgraph"


@dataclass(frozen=True)
class GraphConfig:
    width: int = 800
    height: int = 500
    left: float = -10.0
    right: float = 10.0
    top: float = 10.0
    bottom: float = -10.0
    min_span: float = 1e-9
    zoom_coefficient: float = 0.1
    samples_per_view: int = 200
    line_width: int = 2
    grid_overscan: int = 5
    major_every: int = 5
    arrow_size: int = 10
    render_interval_s: float = 0.010

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if not (math.isfinite(self.min_span) and self.min_span > 0):
            raise ValueError("min_span must be a finite value > 0")
        if not (math.isfinite(self.zoom_coefficient) and self.zoom_coefficient > 0):
            raise ValueError("zoom_coefficient must be a finite value > 0")
        if self.samples_per_view <= 0:
            raise ValueError("samples_per_view must be > 0")
        if self.line_width <= 0:
            raise ValueError("line_width must be > 0")
        if self.render_interval_s <= 0:
            raise ValueError("render_interval_s must be > 0")
        # Validates ordering and finiteness of the initial window.
        self.initial_bounds()
        self.grid_style()

    def initial_bounds(self) -> Bounds:
        return Bounds(left=self.left, right=self.right, top=self.top, bottom=self.bottom)

    def grid_style(self) -> GridStyle:
        return GridStyle(overscan=self.grid_overscan, major_every=self.major_every, arrow_size=self.arrow_size)

    def with_overrides(self, **overrides: Any) -> "GraphConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> GraphConfig:
    """Defaults, then the `[funcgraph]` table of a TOML file, then FUNCGRAPH_* variables."""
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_toml(Path(path)))
    values.update(_read_env(os.environ if env is None else env))
    return GraphConfig(**values)


def _field_types() -> dict[str, type]:
    return {f.name: type(f.default) for f in fields(GraphConfig)}


def _coerce(name: str, raw: Any, expected: type) -> Any:
    if expected is int:
        if isinstance(raw, bool):
            raise ValueError(f"config `{name}` must be an integer")
        if isinstance(raw, float) and not raw.is_integer():
            raise ValueError(f"config `{name}` must be an integer, got {raw!r}")
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"config `{name}` must be an integer, got {raw!r}") from None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"config `{name}` must be a number, got {raw!r}") from None


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        data = tomllib.load(f)
    table = data.get(TOML_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"`[{TOML_TABLE}]` in {path} must be a table")
    types = _field_types()
    out: dict[str, Any] = {}
    for key, raw in table.items():
        if key not in types:
            raise ValueError(f"unknown config key `{key}` in {path}")
        out[key] = _coerce(key, raw, types[key])
    LOGGER.debug("loaded %d config values from %s", len(out), path)
    return out


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    types = _field_types()
    out: dict[str, Any] = {}
    for name, expected in types.items():
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is None or not raw.strip():
            continue
        out[name] = _coerce(name, raw.strip(), expected)
    return out
