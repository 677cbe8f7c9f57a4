from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import math
import threading
from typing import Callable, Iterator, Protocol

from funcgraph_plot.errors import EvaluationUndefined


class FunctionEvaluator(Protocol):
    def calculate(self, x: float) -> float | None:
        ...


@dataclass(frozen=True)
class CallableFunction:
    """Adapts a plain `float -> float` callable to the evaluator protocol."""

    fn: Callable[[float], float]
    label: str = "f"

    def calculate(self, x: float) -> float | None:
        return self.fn(x)


@dataclass(frozen=True, eq=False)
class FunctionEntry:
    evaluator: FunctionEvaluator
    label: str


def evaluate_point(evaluator: FunctionEvaluator, x: float) -> float:
    """Evaluate at `x`, raising EvaluationUndefined for failures and non-finite results."""
    try:
        value = evaluator.calculate(x)
    except Exception as exc:  # noqa: BLE001
        raise EvaluationUndefined(x, f"{type(exc).__name__}: {exc}") from exc
    if value is None:
        raise EvaluationUndefined(x, "no value")
    try:
        y = float(value)
    except (TypeError, ValueError) as exc:
        raise EvaluationUndefined(x, f"non-numeric result {value!r}") from exc
    if not math.isfinite(y):
        raise EvaluationUndefined(x, f"non-finite result {y!r}")
    return y


class FunctionList:
    """Function set shared by input handlers (add/remove) and the render task (iterate)."""

    def __init__(self) -> None:
        self._entries: list[FunctionEntry] = []
        self._lock = threading.Lock()

    def add(self, evaluator: FunctionEvaluator, label: str | None = None) -> FunctionEntry:
        if not callable(getattr(evaluator, "calculate", None)):
            raise TypeError("evaluator must expose calculate(x)")
        if label is None:
            label = str(getattr(evaluator, "label", "f"))
        entry = FunctionEntry(evaluator=evaluator, label=label)
        with self._lock:
            self._entries.append(entry)
        return entry

    def add_callable(self, fn: Callable[[float], float], label: str = "f") -> FunctionEntry:
        return self.add(CallableFunction(fn=fn, label=label), label=label)

    def remove(self, entry: FunctionEntry) -> bool:
        with self._lock:
            for i, current in enumerate(self._entries):
                if current is entry:
                    del self._entries[i]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> tuple[FunctionEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    @contextmanager
    def locked(self) -> Iterator[tuple[FunctionEntry, ...]]:
        """Hold the list lock for a whole pass; add/remove callers wait until it ends."""
        with self._lock:
            yield tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _reciprocal(x: float) -> float:
    return 1.0 / x


def _square(x: float) -> float:
    return x * x


def _cube(x: float) -> float:
    return x * x * x


DEMO_FUNCTIONS: dict[str, Callable[[float], float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "square": _square,
    "cube": _cube,
    "reciprocal": _reciprocal,
    "sqrt": math.sqrt,
    "log": math.log,
    "abs": abs,
    "exp": math.exp,
}


def demo_function(name: str) -> CallableFunction:
    try:
        fn = DEMO_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"unknown demo function: {name} (choose from {', '.join(sorted(DEMO_FUNCTIONS))})") from None
    return CallableFunction(fn=fn, label=name)
