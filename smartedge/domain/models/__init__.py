"""Domain models."""
from .geometry import (
    CanvasPoint, GridCell, NodeGeometry, Rectangle, Side,
    round_down, round_up, round_half_up, to_grid_units
)
from .routing import EdgeRequest, EdgeRoute, GridPath, FALLBACK_PATH_LENGTH

__all__ = [
    'CanvasPoint', 'GridCell', 'NodeGeometry', 'Rectangle', 'Side',
    'round_down', 'round_up', 'round_half_up', 'to_grid_units',
    'EdgeRequest', 'EdgeRoute', 'GridPath', 'FALLBACK_PATH_LENGTH'
]
