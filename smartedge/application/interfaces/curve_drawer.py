"""Abstract curve drawer interface."""
from abc import ABC, abstractmethod
from typing import Sequence

from ...domain.models.geometry import CanvasPoint


class CurveDrawer(ABC):
    """Turns an ordered list of canvas points into SVG path data."""
    
    @abstractmethod
    def draw(self, source: CanvasPoint, target: CanvasPoint,
             waypoints: Sequence[CanvasPoint]) -> str:
        """Return the ``d`` attribute of an SVG path from source to target."""
        pass
