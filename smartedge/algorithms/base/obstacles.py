"""Obstacle rectangles and canvas bounds from node geometry."""
import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from ...domain.models.geometry import NodeGeometry, Rectangle
from ...shared.exceptions import InvalidGeometryError
from ...shared.utils.validation_utils import validate_grid_ratio

logger = logging.getLogger(__name__)

# Empty-canvas sentinel returned when there are no nodes
EMPTY_CANVAS = Rectangle(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class BoundingBoxes:
    """Padded obstacle rectangles and the canvas that encloses them."""
    canvas_bounds: Rectangle
    obstacles: Tuple[Rectangle, ...]
    
    @property
    def is_empty(self) -> bool:
        """True when there is nothing to route around, so no path is possible."""
        return not self.obstacles or self.canvas_bounds.is_empty


def routing_margin(padding: float, grid_ratio: float) -> float:
    """Free space kept between the outermost obstacles and the canvas edge.
    
    Twice the padding, plus one grid cell so a lane exists even at zero
    padding.
    """
    return max(2 * padding, 0.0) + grid_ratio


def build_boxes(nodes: Iterable[NodeGeometry], padding: float,
                grid_ratio: float) -> BoundingBoxes:
    """Turn node rectangles into padded obstacles and an overall canvas.
    
    Every obstacle is the node rectangle grown by ``padding`` and rounded
    outward to the grid pitch. The canvas is the union of the obstacles grown
    by :func:`routing_margin`, also rounded outward, so grid lines coincide
    with every rectangle edge.
    
    Args:
        nodes: Node geometry supplied by the host
        padding: Clearance added around every node
        grid_ratio: Canvas units per grid cell
        
    Returns:
        BoundingBoxes; with no nodes the obstacle list is empty and the
        canvas has zero size.
        
    Raises:
        InvalidGeometryError: If the ratio is not positive or padding inverts
            a node rectangle
    """
    validate_grid_ratio(grid_ratio)
    
    obstacles = []
    for node in nodes:
        try:
            padded = node.bounds.expand(padding)
        except InvalidGeometryError as e:
            raise InvalidGeometryError(
                f"Padding {padding} inverts node {node.id or '<anonymous>'}: {e}",
                field="node_padding", value=padding
            ) from e
        obstacles.append(padded.round_outward(grid_ratio))
    
    if not obstacles:
        logger.debug("No nodes supplied, canvas is empty")
        return BoundingBoxes(EMPTY_CANVAS, ())
    
    margin = routing_margin(padding, grid_ratio)
    canvas = Rectangle.union_all(obstacles).expand(margin).round_outward(grid_ratio)
    
    logger.debug(f"Built {len(obstacles)} obstacle boxes, canvas "
                 f"({canvas.x_min}, {canvas.y_min}) to ({canvas.x_max}, {canvas.y_max})")
    return BoundingBoxes(canvas, tuple(obstacles))
