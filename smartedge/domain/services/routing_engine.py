"""Routing engine: runs one edge through the full pipeline."""
import logging
from typing import Iterable, List, Optional, Sequence

from ...algorithms.base.grid import create_grid
from ...algorithms.base.obstacles import build_boxes
from ...application.interfaces.curve_drawer import CurveDrawer
from ...application.interfaces.path_finder import PathFinder
from ...presentation.curves import SmoothCurveDrawer, StraightLineDrawer
from ...shared.configuration.settings import SmartEdgeOptions
from ...shared.exceptions import RoutingError, ValidationError
from ...shared.utils.logging_utils import get_context_logger
from ...shared.utils.performance_utils import timing_context
from ..models.geometry import CanvasPoint, NodeGeometry
from ..models.routing import EdgeRequest, EdgeRoute
from .pathfinder import AStarPathFinder

logger = logging.getLogger(__name__)


class SmartEdgeRouter:
    """Routes edges around diagram nodes.

    Each call builds obstacle boxes, an occupancy grid and a path from
    scratch; the router itself holds only its options and strategies, so one
    instance may serve any number of edges.
    """

    def __init__(self, options: Optional[SmartEdgeOptions] = None,
                 path_finder: Optional[PathFinder] = None,
                 curve_drawer: Optional[CurveDrawer] = None,
                 fallback_drawer: Optional[CurveDrawer] = None):
        """Initialize router.

        Args:
            options: Routing options; defaults to SmartEdgeOptions()
            path_finder: Search strategy; defaults to A* built from the options
            curve_drawer: Draws routed edges; defaults to a smooth curve
            fallback_drawer: Draws edges without a useful route; defaults to a straight line
        """
        self.options = options or SmartEdgeOptions()
        self.path_finder = path_finder or AStarPathFinder.from_options(self.options)
        self.curve_drawer = curve_drawer or SmoothCurveDrawer()
        self.fallback_drawer = fallback_drawer or StraightLineDrawer()

    def route(self, source: CanvasPoint, target: CanvasPoint,
              nodes: Iterable[NodeGeometry], edge_id: Optional[str] = None) -> EdgeRoute:
        """Route one edge between two connection points.

        Returns:
            EdgeRoute; ``used_fallback`` is set when the smoothed path has two
            or fewer cells, and ``svg_path`` then holds the fallback line.

        Raises:
            InvalidGeometryError: Degenerate canvas or endpoints outside it
            UnroutableEndpointError: An endpoint cannot leave its obstacle
            GridError: The grid would be too large
        """
        log = get_context_logger(__name__, edge=edge_id)
        options = self.options

        try:
            with timing_context("route", logger) as timing:
                boxes = build_boxes(nodes, options.node_padding, options.grid_ratio)
                if boxes.is_empty:
                    log.debug("No obstacles on canvas, no path possible")
                    route = EdgeRoute(source, target, canvas_bounds=boxes.canvas_bounds,
                                      edge_id=edge_id)
                else:
                    built = create_grid(
                        boxes.canvas_bounds, boxes.obstacles, source, target,
                        options.grid_ratio,
                        max_nudge_radius=options.max_nudge_radius,
                        max_cells=options.max_grid_cells,
                        diagonal=options.diagonal
                    )
                    path = self.path_finder.generate_path(
                        built.grid, built.start, built.end,
                        start_side=source.side, end_side=target.side
                    )
                    waypoints = tuple(built.grid.mapper.path_to_points(path.smoothed_path))
                    route = EdgeRoute(source, target, path, waypoints,
                                      canvas_bounds=boxes.canvas_bounds, edge_id=edge_id)

                route.svg_path = self._draw(route)
        except RoutingError as e:
            if e.edge_id is None:
                e.edge_id = edge_id
            log.warning(f"Routing failed: {e}")
            raise
        except ValidationError as e:
            log.warning(f"Invalid routing input: {e}")
            raise

        route.execution_time = timing['elapsed']
        stats = route.get_route_statistics()
        log.debug(f"Routed with {self.path_finder.name}: {stats['steps']} steps, "
                  f"{stats['corners']} corners, fallback={stats['used_fallback']}")
        return route

    def route_edges(self, edges: Iterable[EdgeRequest],
                    nodes: Sequence[NodeGeometry]) -> List[EdgeRoute]:
        """Route several edges against the same node set."""
        nodes = tuple(nodes)
        routes = [self.route(edge.source, edge.target, nodes, edge_id=edge.id) for edge in edges]
        fallback_count = sum(1 for route in routes if route.used_fallback)
        logger.info(f"Routed {len(routes)} edges, {fallback_count} using fallback")
        return routes

    def _draw(self, route: EdgeRoute) -> str:
        if route.used_fallback:
            return self.fallback_drawer.draw(route.source, route.target, ())
        return self.curve_drawer.draw(route.source, route.target, route.waypoints)
