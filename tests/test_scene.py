from __future__ import annotations

import unittest

import numpy as np

from funcgraph_plot.functions import FunctionList, demo_function
from funcgraph_plot.scene import GraphScene
from funcgraph_plot.viewport import Bounds, Viewport


class _Crashing:
    label = "crash"

    def calculate(self, x: float) -> float:
        raise ZeroDivisionError("always")


class GraphSceneTests(unittest.TestCase):
    def test_render_returns_canvas_and_stats(self) -> None:
        functions = FunctionList()
        functions.add(demo_function("sin"))
        scene = GraphScene(Viewport(), functions)
        canvas = scene.render(320, 200)
        self.assertEqual(canvas.shape, (200, 320, 4))
        self.assertEqual(canvas.dtype, np.uint8)
        stats = scene.last_stats
        assert stats is not None
        self.assertEqual(stats.bounds, Viewport().bounds())
        self.assertEqual(stats.grid.arrows, 4)
        self.assertEqual([c.label for c in stats.curves], ["sin"])

    def test_crashing_function_still_leaves_grid_and_other_curves(self) -> None:
        functions = FunctionList()
        functions.add(_Crashing())
        functions.add(demo_function("square"))
        scene = GraphScene(Viewport(Bounds(-3.0, 3.0, 10.0, -1.0)), functions)
        scene.render(120, 120)
        stats = scene.last_stats
        assert stats is not None
        self.assertEqual(stats.curves[0].drawn, 0)
        self.assertGreater(stats.curves[1].visible, 0)
        self.assertEqual(stats.grid.arrows, 4)

    def test_frame_uses_one_bounds_snapshot(self) -> None:
        vp = Viewport()
        scene = GraphScene(vp, FunctionList())
        scene.render(50, 50)
        vp.pan(5.0, 0.0)
        stats = scene.last_stats
        assert stats is not None
        self.assertEqual(stats.bounds.left, -10.0)


if __name__ == "__main__":
    unittest.main()
