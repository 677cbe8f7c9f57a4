from __future__ import annotations

import unittest

from funcgraph_plot.gesture import (
    IDLE,
    Dragging,
    GestureController,
    Idle,
    PointerMove,
    PointerPress,
    PointerRelease,
    Scroll,
    parse_pointer_event,
    step,
)
from funcgraph_plot.viewport import Bounds, ScreenSize, Viewport

SIZE = ScreenSize(800, 500)


def _controller(bounds: Bounds | None = None) -> tuple[GestureController, Viewport]:
    vp = Viewport(bounds or Bounds(left=-10.0, right=10.0, top=10.0, bottom=-10.0))
    return GestureController(vp, size_provider=lambda: SIZE), vp


class GestureControllerTests(unittest.TestCase):
    def test_drag_release_drag_uses_fresh_anchor(self) -> None:
        ctl, vp = _controller()
        ctl.press(100, 100)
        ctl.move(150, 100)
        shift = 50 * 20 / SIZE.width
        b = vp.bounds()
        self.assertAlmostEqual(b.left, -10.0 - shift)
        self.assertAlmostEqual(b.right, 10.0 - shift)
        self.assertEqual((b.top, b.bottom), (10.0, -10.0))

        ctl.release()
        self.assertIsInstance(ctl.state, Idle)
        ctl.press(150, 100)
        ctl.move(150, 150)
        after = vp.bounds()
        self.assertEqual((after.left, after.right), (b.left, b.right))
        vshift = 50 * 20 / SIZE.height
        self.assertAlmostEqual(after.top, 10.0 + vshift)
        self.assertAlmostEqual(after.bottom, -10.0 + vshift)

    def test_moves_are_relative_to_press_snapshot(self) -> None:
        ctl, vp = _controller()
        ctl.press(0, 0)
        for x in range(1, 41):
            ctl.move(x, 0)
        ctl.move(40, 0)
        self.assertAlmostEqual(vp.bounds().left, -10.0 - 40 * 20 / SIZE.width)

    def test_move_while_idle_is_noop(self) -> None:
        ctl, vp = _controller()
        before = vp.bounds()
        ctl.move(300, 300)
        self.assertEqual(vp.bounds(), before)
        self.assertFalse(ctl.is_dragging)

    def test_second_press_while_dragging_reanchors(self) -> None:
        ctl, vp = _controller()
        ctl.press(10, 10)
        ctl.move(60, 10)
        moved = vp.bounds()
        state = ctl.press(200, 200)
        assert isinstance(state, Dragging)
        self.assertEqual(state.snapshot, moved)
        ctl.move(200, 200)
        self.assertEqual(vp.bounds(), moved)

    def test_scroll_up_zooms_in_and_down_zooms_out(self) -> None:
        ctl, vp = _controller()
        ctl.scroll(-1)
        self.assertEqual(vp.bounds().as_tuple(), (-9.0, 9.0, 9.0, -9.0))
        ctl.scroll(3)
        b = vp.bounds()
        self.assertAlmostEqual(b.right - b.left, 19.8)

    def test_scroll_does_not_change_drag_state(self) -> None:
        ctl, _ = _controller()
        ctl.press(5, 5)
        ctl.scroll(-1)
        self.assertTrue(ctl.is_dragging)

    def test_handle_event_ignores_unparseable_events(self) -> None:
        ctl, vp = _controller()
        before = vp.bounds()
        ctl.handle_event("pointer_down", {"x": "nope"})
        ctl.handle_event("key_down", {"key": "a"})
        self.assertIs(ctl.state, IDLE)
        self.assertEqual(vp.bounds(), before)

    def test_rejects_non_positive_zoom_coefficient(self) -> None:
        with self.assertRaises(ValueError):
            GestureController(Viewport(), size_provider=lambda: SIZE, zoom_coefficient=0.0)


class StepTests(unittest.TestCase):
    def test_press_captures_anchor_and_snapshot(self) -> None:
        vp = Viewport()
        state = step(IDLE, PointerPress(3.0, 4.0), vp, SIZE)
        assert isinstance(state, Dragging)
        self.assertEqual((state.anchor.x, state.anchor.y), (3.0, 4.0))
        self.assertEqual(state.snapshot, vp.bounds())

    def test_release_from_idle_stays_idle(self) -> None:
        self.assertIs(step(IDLE, PointerRelease(), Viewport(), SIZE), IDLE)

    def test_rejects_unknown_gesture(self) -> None:
        with self.assertRaises(TypeError):
            step(IDLE, object(), Viewport(), SIZE)  # type: ignore[arg-type]


class ParsePointerEventTests(unittest.TestCase):
    def test_parses_known_event_types(self) -> None:
        self.assertEqual(parse_pointer_event("pointer_down", {"x": 1, "y": 2}), PointerPress(1.0, 2.0))
        self.assertEqual(parse_pointer_event("pointer_move", {"x": 3.5, "y": 4}), PointerMove(3.5, 4.0))
        self.assertEqual(parse_pointer_event("pointer_up", None), PointerRelease())
        self.assertEqual(parse_pointer_event("scroll", {"delta_y": -2}), Scroll(-2.0))

    def test_missing_fields_yield_none(self) -> None:
        self.assertIsNone(parse_pointer_event("pointer_down", {"x": 1}))
        self.assertIsNone(parse_pointer_event("pointer_move", None))
        self.assertIsNone(parse_pointer_event("wheel", {"delta_y": 1}))


if __name__ == "__main__":
    unittest.main()
