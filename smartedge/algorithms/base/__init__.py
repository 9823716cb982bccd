"""Grid construction: bounding boxes, occupancy grid and coordinate mapping."""
from .coordinates import CoordinateMapper, graph_to_grid_point, grid_to_graph_point
from .grid import (
    OccupancyGrid, EndpointResolver, NudgeState, GridBuildResult, create_grid,
    check_allocation, search_footprint
)
from .obstacles import BoundingBoxes, build_boxes, routing_margin

__all__ = [
    'CoordinateMapper', 'graph_to_grid_point', 'grid_to_graph_point',
    'OccupancyGrid', 'EndpointResolver', 'NudgeState', 'GridBuildResult', 'create_grid',
    'check_allocation', 'search_footprint',
    'BoundingBoxes', 'build_boxes', 'routing_margin'
]
