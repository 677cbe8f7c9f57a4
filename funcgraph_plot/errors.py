from __future__ import annotations


class GraphError(Exception):
    """Base class for graph domain errors."""


class EvaluationUndefined(GraphError):
    """A function has no finite value at the requested sample point."""

    def __init__(self, x: float, reason: str) -> None:
        super().__init__(f"function undefined at x={x!r}: {reason}")
        self.x = x
        self.reason = reason


class DegenerateZoomRequest(GraphError):
    """A zoom would collapse the viewport to a range below its minimum span."""
