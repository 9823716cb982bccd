"""
smartedge - obstacle-avoiding edge routing for diagram canvases
"""
from .algorithms.base import (
    BoundingBoxes, CoordinateMapper, OccupancyGrid, build_boxes, create_grid,
    graph_to_grid_point, grid_to_graph_point
)
from .application.interfaces import CurveDrawer, PathFinder
from .domain.models import (
    CanvasPoint, EdgeRequest, EdgeRoute, GridCell, GridPath, NodeGeometry, Rectangle, Side
)
from .domain.services import AStarPathFinder, SmartEdgeRouter, compress_path, smoothen_path
from .presentation.curves import PolylineDrawer, SmoothCurveDrawer, StraightLineDrawer
from .shared.configuration import SmartEdgeOptions
from .shared.exceptions import (
    SmartEdgeException, ConfigurationError, InvalidGeometryError,
    UnroutableEndpointError, GridError
)

# Version information
__version__ = "1.0.0"
__license__ = "MIT"
__description__ = "Obstacle-avoiding edge routing for diagram canvases"

__all__ = [
    # Version info
    '__version__',
    '__license__',
    
    # Routing
    'SmartEdgeRouter',
    'SmartEdgeOptions',
    'AStarPathFinder',
    'PathFinder',
    'compress_path',
    'smoothen_path',
    
    # Grid
    'BoundingBoxes',
    'OccupancyGrid',
    'CoordinateMapper',
    'build_boxes',
    'create_grid',
    'graph_to_grid_point',
    'grid_to_graph_point',
    
    # Geometry and results
    'CanvasPoint',
    'EdgeRequest',
    'EdgeRoute',
    'GridCell',
    'GridPath',
    'NodeGeometry',
    'Rectangle',
    'Side',
    
    # Drawing
    'CurveDrawer',
    'SmoothCurveDrawer',
    'PolylineDrawer',
    'StraightLineDrawer',
    
    # Errors
    'SmartEdgeException',
    'ConfigurationError',
    'InvalidGeometryError',
    'UnroutableEndpointError',
    'GridError',
]
