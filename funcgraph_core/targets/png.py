from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from PIL import Image

from .base import DisplayFrame
from .headless import HeadlessTarget

LOGGER = logging.getLogger(__name__)


def save_frame_png(frame: DisplayFrame, path: Path) -> Path:
    rgba = frame.rgba_array()
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(rgba).save(path)
    return path


@dataclass
class PngSnapshotTarget(HeadlessTarget):
    """Headless target that writes the last presented frame to a PNG file on stop."""

    path: Path = Path("funcgraph.png")
    written: Path | None = None

    def stop(self) -> None:
        if self.started and self.last_frame is not None:
            self.written = save_frame_png(self.last_frame, self.path)
            LOGGER.info("wrote frame revision=%d to %s", self.last_frame.revision, self.written)
        super().stop()
