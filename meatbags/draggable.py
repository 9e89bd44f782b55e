"""Points that can be hovered over and dragged with the mouse."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class DraggablePoint:
    """A point with a square handle size and mouse interaction state."""

    x: float = 0.0
    y: float = 0.0
    size: float = 0.0
    half_size: float = 0.0
    is_mouse_over: bool = False
    is_mouse_clicked: bool = False

    def set_size(self, size: float) -> None:
        """Set the handle size; the half size follows from it."""
        self.size = size
        self.half_size = size * 0.5

    def distance_to(self, x: float, y: float) -> float:
        """Euclidean distance from this point to ``(x, y)``."""
        return math.hypot(self.x - x, self.y - y)