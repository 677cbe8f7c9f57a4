from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
import torch


@dataclass(frozen=True)
class DisplayFrame:
    """One committed graph frame, as handed from the display runtime to a target.

    `rgba` is a snapshot of the frame matrix, so targets may keep it after
    the next commit.
    """

    revision: int
    width: int
    height: int
    rgba: torch.Tensor

    def rgba_array(self) -> np.ndarray:
        """Return the frame as a contiguous uint8 (height, width, 4) array."""
        out = self.rgba.detach().cpu().contiguous().numpy()
        if out.shape != (self.height, self.width, 4):
            raise ValueError(f"frame rgba has invalid shape: {out.shape} expected {(self.height, self.width, 4)}")
        if out.dtype != np.uint8:
            raise ValueError(f"frame rgba must be uint8, got {out.dtype}")
        return out


class RenderTarget(ABC):
    """Where finished graph frames go: a window, a file, or nowhere.

    The display runtime calls `start` once, then `present_frame` for each
    committed revision in order, and `stop` on shutdown. Targets never touch
    the viewport; pointer input reaches the graph through the pointer thread.
    """

    @abstractmethod
    def start(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def present_frame(self, frame: DisplayFrame) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    def pump_events(self) -> None:
        """Called before each close check, for targets that own an event queue."""
        return

    def should_close(self) -> bool:
        """True once the user has closed the graph surface."""
        return False
