from __future__ import annotations

import subprocess
import sys
import unittest
from pathlib import Path

import numpy as np
import torch

from funcgraph_core.core.frame_matrix import FrameMatrix, FullRewrite, WriteBatch
from funcgraph_core.core.render_loop import compile_full_rewrite_batch

REPO_ROOT = Path(__file__).resolve().parents[1]


class FrameMatrixTests(unittest.TestCase):
    def test_starts_with_background_and_revision_zero(self) -> None:
        matrix = FrameMatrix(height=2, width=3)
        snap = matrix.read_snapshot()
        self.assertEqual(tuple(snap.shape), (2, 3, 4))
        self.assertTrue(torch.all(snap == 255))
        self.assertEqual(matrix.revision, 0)

    def test_commit_swaps_whole_frame_and_queues_present(self) -> None:
        matrix = FrameMatrix(height=2, width=2)
        frame = torch.zeros((2, 2, 4), dtype=torch.uint8)
        event = matrix.commit(WriteBatch([FullRewrite(frame)]))
        self.assertEqual(event.revision, 1)
        self.assertEqual(matrix.pending_present_count(), 1)
        self.assertTrue(torch.equal(matrix.read_snapshot(), frame))
        popped = matrix.pop_present(timeout=None)
        self.assertEqual(popped, event)
        self.assertIsNone(matrix.pop_present(timeout=None))

    def test_snapshot_is_a_copy(self) -> None:
        matrix = FrameMatrix(height=1, width=1)
        snap = matrix.read_snapshot()
        snap[:] = 0
        self.assertTrue(torch.all(matrix.read_snapshot() == 255))

    def test_failed_batch_leaves_front_buffer_untouched(self) -> None:
        matrix = FrameMatrix(height=2, width=2)
        good = FullRewrite(torch.zeros((2, 2, 4), dtype=torch.uint8))
        bad = FullRewrite(torch.zeros((3, 2, 4), dtype=torch.uint8))
        with self.assertRaises(ValueError):
            matrix.commit(WriteBatch([good, bad]))
        self.assertTrue(torch.all(matrix.read_snapshot() == 255))
        self.assertEqual(matrix.revision, 0)
        self.assertEqual(matrix.pending_present_count(), 0)

    def test_last_rewrite_in_batch_wins(self) -> None:
        matrix = FrameMatrix(height=1, width=1)
        first = FullRewrite(torch.zeros((1, 1, 4), dtype=torch.uint8))
        second = FullRewrite(torch.full((1, 1, 4), 9, dtype=torch.uint8))
        event = matrix.commit(WriteBatch([first, second]))
        self.assertEqual(event.revision, 1)
        self.assertEqual(matrix.read_snapshot()[0, 0].tolist(), [9, 9, 9, 9])

    def test_invalid_float_pixels_are_sanitized(self) -> None:
        matrix = FrameMatrix(height=1, width=2)
        frame = torch.tensor([[[10.0, 20.0, 30.0, 255.0], [float("nan"), 0.0, 0.0, 255.0]]])
        with self.assertLogs("funcgraph_core.core.frame_matrix", level="WARNING"):
            matrix.commit(WriteBatch([FullRewrite(frame)]))
        snap = matrix.read_snapshot()
        self.assertEqual(snap[0, 0].tolist(), [10, 20, 30, 255])
        self.assertEqual(snap[0, 1].tolist(), [255, 0, 255, 255])

    def test_rejects_empty_batch_and_wrong_shape(self) -> None:
        matrix = FrameMatrix(height=2, width=2)
        with self.assertRaises(ValueError):
            matrix.commit(WriteBatch([]))
        with self.assertRaises(ValueError):
            matrix.commit(WriteBatch([FullRewrite(torch.zeros((3, 2, 4), dtype=torch.uint8))]))

    def test_rejects_non_positive_size(self) -> None:
        with self.assertRaises(ValueError):
            FrameMatrix(height=0, width=2)


class CompileTests(unittest.TestCase):
    def test_compile_full_rewrite_batch(self) -> None:
        canvas = np.full((2, 3, 4), 7, dtype=np.uint8)
        batch = compile_full_rewrite_batch(canvas)
        self.assertEqual(len(batch.operations), 1)
        op = batch.operations[0]
        assert isinstance(op, FullRewrite)
        self.assertEqual(tuple(op.tensor_h_w_4.shape), (2, 3, 4))

    def test_compile_rejects_wrong_dtype(self) -> None:
        with self.assertRaises(ValueError):
            compile_full_rewrite_batch(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaises(ValueError):
            compile_full_rewrite_batch(np.zeros((2, 2, 3), dtype=np.uint8))


class ImportOrderTests(unittest.TestCase):
    def _import_fresh(self, code: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [sys.executable, "-c", code],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
            timeout=60,
        )

    def test_render_loop_imports_first_in_fresh_interpreter(self) -> None:
        proc = self._import_fresh("import funcgraph_core.core.render_loop")
        self.assertEqual(proc.returncode, 0, proc.stderr)

    def test_plot_package_does_not_pull_in_core(self) -> None:
        proc = self._import_fresh(
            "import sys, funcgraph_plot.scene, funcgraph_plot.raster\n"
            "assert not any(m.startswith('funcgraph_core') for m in sys.modules), sorted(sys.modules)"
        )
        self.assertEqual(proc.returncode, 0, proc.stderr)


if __name__ == "__main__":
    unittest.main()
