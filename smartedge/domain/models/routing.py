"""Domain models for routing results."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .geometry import CanvasPoint, GridCell, Rectangle

# Smoothed paths this short carry no routing information worth drawing:
# 0 = no path, 1 = start equals end, 2 = a single straight segment.
FALLBACK_PATH_LENGTH = 2


@dataclass(frozen=True)
class GridPath:
    """Value object holding a cell-by-cell path and its smoothed form."""
    full_path: Tuple[GridCell, ...] = ()
    smoothed_path: Tuple[GridCell, ...] = ()
    
    @classmethod
    def empty(cls) -> 'GridPath':
        return cls((), ())
    
    @property
    def found(self) -> bool:
        return len(self.full_path) > 0
    
    @property
    def requires_fallback(self) -> bool:
        """Decided from the smoothed path length alone."""
        return len(self.smoothed_path) <= FALLBACK_PATH_LENGTH
    
    @property
    def step_count(self) -> int:
        return max(len(self.full_path) - 1, 0)
    
    @property
    def corner_count(self) -> int:
        return max(len(self.smoothed_path) - 2, 0)


@dataclass
class EdgeRoute:
    """Result of routing one edge."""
    source: CanvasPoint
    target: CanvasPoint
    path: GridPath = field(default_factory=GridPath.empty)
    waypoints: Tuple[CanvasPoint, ...] = ()
    svg_path: str = ""
    canvas_bounds: Optional[Rectangle] = None
    edge_id: Optional[str] = None
    execution_time: float = 0.0
    
    @property
    def full_path(self) -> Tuple[GridCell, ...]:
        return self.path.full_path
    
    @property
    def smoothed_path(self) -> Tuple[GridCell, ...]:
        return self.path.smoothed_path
    
    @property
    def used_fallback(self) -> bool:
        return self.path.requires_fallback
    
    def get_route_statistics(self) -> Dict[str, Any]:
        """Summary used by logging and the CLI."""
        return {
            'found': self.path.found,
            'used_fallback': self.used_fallback,
            'steps': self.path.step_count,
            'corners': self.path.corner_count,
            'waypoints': len(self.waypoints),
            'execution_time_ms': round(self.execution_time * 1000, 3),
        }


@dataclass(frozen=True)
class EdgeRequest:
    """Endpoints of one edge to route."""
    source: CanvasPoint
    target: CanvasPoint
    id: Optional[str] = None
