from __future__ import annotations

import math
import unittest

import numpy as np

from funcgraph_plot.grid import (
    GridRenderer,
    GridStyle,
    arrow_head,
    grid_range,
    is_major,
    major_range,
    range_size,
)
from funcgraph_plot.raster import new_canvas
from funcgraph_plot.viewport import Bounds


class GridRangeTests(unittest.TestCase):
    def test_range_extends_five_past_visible_integers(self) -> None:
        r = grid_range(-10.0, 10.0)
        self.assertEqual((r.start, r.stop - 1), (-15, 15))
        r = grid_range(-0.5, 2.2)
        self.assertEqual((r.start, r.stop - 1), (-6, 8))

    def test_major_lines_are_multiples_of_five(self) -> None:
        self.assertEqual(list(major_range(grid_range(-10.0, 10.0))), [-15, -10, -5, 0, 5, 10, 15])
        self.assertEqual(list(major_range(range(-7, 8))), [-5, 0, 5])
        self.assertTrue(is_major(-10))
        self.assertFalse(is_major(-7))

    def test_range_size_handles_huge_ranges(self) -> None:
        huge = range(-(10**30), 10**30)
        self.assertEqual(range_size(huge), 2 * 10**30)
        self.assertEqual(range_size(range(3, 3)), 0)


class ArrowHeadTests(unittest.TestCase):
    def test_rightward_head_matches_canonical_triangle(self) -> None:
        head = arrow_head(0.0, 0.0, 100.0, 0.0, 10.0)
        assert head is not None
        expected = [(100.0, 0.0), (90.0, -10.0), (90.0, 10.0)]
        for (hx, hy), (ex, ey) in zip(head, expected):
            self.assertAlmostEqual(hx, ex)
            self.assertAlmostEqual(hy, ey)

    def test_head_is_rotated_with_segment(self) -> None:
        head = arrow_head(10.0, 10.0, 10.0, 60.0, 10.0)
        assert head is not None
        tip, left, right = head
        self.assertAlmostEqual(tip[0], 10.0)
        self.assertAlmostEqual(tip[1], 60.0)
        self.assertAlmostEqual(left[0], 20.0)
        self.assertAlmostEqual(left[1], 50.0)
        self.assertAlmostEqual(right[0], 0.0)
        self.assertAlmostEqual(right[1], 50.0)

    def test_degenerate_arrow_has_no_head(self) -> None:
        self.assertIsNone(arrow_head(5.0, 5.0, 5.2, 5.0, 10.0))
        self.assertIsNone(arrow_head(0.0, 0.0, math.inf, 0.0, 10.0))


class GridRendererTests(unittest.TestCase):
    def test_default_view_draws_all_lines_and_four_arrows(self) -> None:
        canvas = new_canvas(400, 400)
        stats = GridRenderer().render(canvas, Bounds(-10.0, 10.0, 10.0, -10.0))
        self.assertEqual(stats.vertical_lines, 31)
        self.assertEqual(stats.horizontal_lines, 31)
        self.assertFalse(stats.vertical_saturated)
        self.assertEqual(stats.arrows, 4)

    def test_axes_are_drawn_in_axis_color(self) -> None:
        canvas = new_canvas(400, 400)
        GridRenderer().render(canvas, Bounds(-10.0, 10.0, 10.0, -10.0))
        # Origin sits at the canvas center; x axis runs along row 200.
        self.assertTrue(np.all(canvas[200, 50:350, :3] == 0))
        self.assertTrue(np.all(canvas[50:350, 200, :3] == 0))

    def test_major_lines_are_darker_than_minor(self) -> None:
        canvas = new_canvas(400, 400)
        GridRenderer().render(canvas, Bounds(-10.0, 10.0, 10.0, -10.0))
        # x = 5 is major (column 300); x = 3 is minor (column 260).
        row = 100 + 3  # away from the x axis and other horizontal lines
        self.assertLess(int(canvas[row, 300, 0]), int(canvas[row, 260, 0]))
        self.assertLess(int(canvas[row, 260, 0]), 255)

    def test_origin_at_corner_skips_collapsed_arrows(self) -> None:
        canvas = new_canvas(100, 100)
        stats = GridRenderer().render(canvas, Bounds(0.0, 10.0, 10.0, 0.0))
        self.assertEqual(stats.arrows, 2)

    def test_extreme_zoom_out_fills_wash_instead_of_lines(self) -> None:
        canvas = new_canvas(64, 64)
        stats = GridRenderer().render(canvas, Bounds(-1e12, 1e12, 1e12, -1e12))
        self.assertTrue(stats.vertical_saturated)
        self.assertTrue(stats.horizontal_saturated)
        self.assertEqual(stats.vertical_lines, 0)
        self.assertTrue(np.all(canvas[:, :, :3] < 255))

    def test_style_validation(self) -> None:
        with self.assertRaises(ValueError):
            GridStyle(major_width=1, minor_width=1)
        with self.assertRaises(ValueError):
            GridStyle(major_every=0)
        with self.assertRaises(ValueError):
            GridStyle(overscan=-1)


if __name__ == "__main__":
    unittest.main()
