"""Abstract path finder interface."""
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from ...domain.models.geometry import GridCell, Side
from ...domain.models.routing import GridPath

if TYPE_CHECKING:
    from ...algorithms.base.grid import OccupancyGrid


class PathFinder(ABC):
    """Searches an occupancy grid for a path between two cells."""
    
    @abstractmethod
    def generate_path(self, grid: "OccupancyGrid", start: GridCell, end: GridCell,
                      start_side: Optional[Side] = None,
                      end_side: Optional[Side] = None) -> GridPath:
        """Find a path from ``start`` to ``end``.
        
        Returns an empty GridPath when ``end`` is unreachable; never raises
        for that condition.
        """
        pass
    
    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs."""
        pass
