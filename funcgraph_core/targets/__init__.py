from .base import DisplayFrame, RenderTarget
from .headless import HeadlessTarget
from .png import PngSnapshotTarget, save_frame_png

__all__ = ["DisplayFrame", "HeadlessTarget", "PngSnapshotTarget", "RenderTarget", "save_frame_png"]
