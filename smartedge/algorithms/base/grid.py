"""Occupancy grid construction and endpoint placement."""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set

import numpy as np

from ...domain.models.geometry import CanvasPoint, GridCell, Rectangle, Side, to_grid_units
from ...shared.configuration.settings import SmartEdgeOptions
from ...shared.exceptions import GridError, InvalidGeometryError, UnroutableEndpointError
from ...shared.utils.performance_utils import memory_budget
from ...shared.utils.validation_utils import validate_coordinates, validate_grid_ratio
from .coordinates import CoordinateMapper

logger = logging.getLogger(__name__)

_DEFAULTS = SmartEdgeOptions()

ORTHOGONAL_HEADINGS = 4
DIAGONAL_HEADINGS = 8
# g_steps, g_turns and parent as int64 plus one closed flag
SEARCH_BYTES_PER_STATE = 3 * 8 + 1


class OccupancyGrid:
    """Read-only 2D grid of blocked flags.
    
    Cell ``(col, row)`` is the lattice point
    ``origin + (col, row) * grid_ratio`` and owns the square of side
    ``grid_ratio`` centred on it. Flags live in a single row-major numpy
    array; cells are addressed by flat index ``row * cols + col``.
    """
    
    def __init__(self, blocked: np.ndarray, x_min: float, y_min: float, grid_ratio: float):
        """Initialize grid from a (rows, cols) boolean array, which is copied."""
        self._blocked = np.array(blocked, dtype=bool, copy=True)
        if self._blocked.ndim != 2:
            raise GridError(f"Occupancy array must be 2D, got shape {self._blocked.shape}")
        self._blocked.setflags(write=False)
        
        self.rows, self.cols = self._blocked.shape
        self.grid_ratio = grid_ratio
        self.mapper = CoordinateMapper(x_min, y_min, grid_ratio)
    
    @classmethod
    def from_obstacles(cls, canvas_bounds: Rectangle, obstacles: Iterable[Rectangle],
                       grid_ratio: float,
                       max_cells: int = _DEFAULTS.max_grid_cells,
                       headings: int = ORTHOGONAL_HEADINGS) -> 'OccupancyGrid':
        """Discretize the canvas and block every cell touching an obstacle's interior.
        
        Raises:
            InvalidGeometryError: If the canvas has zero size or the ratio is invalid
            GridError: If the grid would exceed ``max_cells``, or the grid plus a
                search over ``headings`` directions would exceed the memory budget
        """
        validate_grid_ratio(grid_ratio)
        if canvas_bounds.width <= 0 or canvas_bounds.height <= 0:
            raise InvalidGeometryError(
                f"Canvas has zero size: {canvas_bounds.width}x{canvas_bounds.height}",
                field="canvas_bounds", value=canvas_bounds.as_tuple()
            )
        
        cols = math.ceil(to_grid_units(canvas_bounds.width, grid_ratio)) + 1
        rows = math.ceil(to_grid_units(canvas_bounds.height, grid_ratio)) + 1
        check_allocation(rows, cols, headings, max_cells)
        
        blocked = np.zeros((rows, cols), dtype=bool)
        for obstacle in obstacles:
            if obstacle.is_empty:
                continue
            col_start, col_end = _blocked_span(
                obstacle.x_min - canvas_bounds.x_min, obstacle.x_max - canvas_bounds.x_min,
                grid_ratio, cols
            )
            row_start, row_end = _blocked_span(
                obstacle.y_min - canvas_bounds.y_min, obstacle.y_max - canvas_bounds.y_min,
                grid_ratio, rows
            )
            blocked[row_start:row_end, col_start:col_end] = True
        
        grid = cls(blocked, canvas_bounds.x_min, canvas_bounds.y_min, grid_ratio)
        logger.debug(f"Initialized occupancy grid: {cols}x{rows}, "
                     f"{grid.blocked_count} blocked cells")
        return grid
    
    @property
    def blocked(self) -> np.ndarray:
        """Read-only (rows, cols) array of blocked flags."""
        return self._blocked
    
    @property
    def flat(self) -> np.ndarray:
        """Read-only flat view, indexed by :meth:`index`."""
        return self._blocked.ravel()
    
    @property
    def size(self) -> int:
        return self.rows * self.cols
    
    @property
    def blocked_count(self) -> int:
        return int(np.count_nonzero(self._blocked))
    
    def index(self, cell: GridCell) -> int:
        return cell.row * self.cols + cell.col
    
    def cell_at(self, index: int) -> GridCell:
        row, col = divmod(int(index), self.cols)
        return GridCell(col, row)
    
    def in_bounds(self, cell: GridCell) -> bool:
        return 0 <= cell.col < self.cols and 0 <= cell.row < self.rows
    
    def is_walkable(self, cell: GridCell) -> bool:
        """Free and inside the grid."""
        return self.in_bounds(cell) and not self._blocked[cell.row, cell.col]
    
    def is_blocked(self, cell: GridCell) -> bool:
        return not self.is_walkable(cell)
    
    def cell_square(self, cell: GridCell) -> Rectangle:
        """Canvas square owned by ``cell``."""
        center = self.mapper.to_point(cell)
        half = self.grid_ratio / 2
        return Rectangle(center.x - half, center.y - half, center.x + half, center.y + half)
    
    def get_statistics(self) -> dict:
        """Get grid statistics."""
        blocked = self.blocked_count
        return {
            'dimensions': f"{self.cols}x{self.rows}",
            'grid_ratio': self.grid_ratio,
            'total_cells': self.size,
            'blocked_cells': blocked,
            'free_cells': self.size - blocked,
            'blocked_percent': blocked / self.size * 100 if self.size else 0.0,
        }


def _blocked_span(lo: float, hi: float, grid_ratio: float, limit: int):
    """Index range [start, end) of cells whose squares overlap the open interval (lo, hi)."""
    start = math.floor(to_grid_units(lo, grid_ratio) - 0.5) + 1
    end = math.ceil(to_grid_units(hi, grid_ratio) + 0.5)
    return max(start, 0), min(end, limit)


def search_footprint(cells: int, headings: int) -> int:
    """Bytes a path search over ``cells`` needs, blocked flags included.
    
    The search keeps one state per cell and heading plus one heading-less
    start state, each holding three int64 values and a closed flag.
    """
    states = cells * (headings + 1)
    return states * SEARCH_BYTES_PER_STATE + cells


def check_allocation(rows: int, cols: int, headings: int = ORTHOGONAL_HEADINGS,
                     max_cells: Optional[int] = None) -> None:
    """Raise GridError when a grid of this shape cannot be searched.
    
    Raises:
        GridError: Above ``max_cells`` cells, or when the search footprint
            exceeds the memory budget
    """
    cells = rows * cols
    if max_cells is not None and cells > max_cells:
        raise GridError(
            f"Grid of {cols}x{rows} cells exceeds the limit of {max_cells}; "
            f"increase grid_ratio",
            grid_shape=(rows, cols)
        )
    estimated_bytes = search_footprint(cells, headings)
    budget = memory_budget()
    if estimated_bytes > budget:
        raise GridError(
            f"Grid of {cols}x{rows} cells needs ~{estimated_bytes / 1024**2:.1f}MB, "
            f"budget is {budget / 1024**2:.1f}MB",
            grid_shape=(rows, cols)
        )


class NudgeState(Enum):
    """States of endpoint placement."""
    AT_POINT = "at_point"
    NUDGING = "nudging"
    RESOLVED = "resolved"
    FAILED = "failed"


class EndpointResolver:
    """Places a connection point on a free grid cell.
    
    The point's own cell is used when free. Otherwise the resolver steps
    outward along the side's normal, one cell at a time, up to
    ``max_radius`` cells. Points without a side try all four normals at each
    radius in SEARCH_ORDER.
    
    The obstacles under the point's own cell are the ones it may step
    through. A direction is abandoned as soon as it reaches a cell touching
    any other obstacle, so an endpoint never lands on the far side of a
    neighbouring node.
    """
    
    SEARCH_ORDER = (Side.TOP, Side.RIGHT, Side.BOTTOM, Side.LEFT)
    
    def __init__(self, grid: OccupancyGrid, max_radius: int = _DEFAULTS.max_nudge_radius,
                 obstacles: Iterable[Rectangle] = ()):
        self.grid = grid
        self.max_radius = max_radius
        self.obstacles = tuple(o for o in obstacles if not o.is_empty)
        self.state = NudgeState.AT_POINT
        self.radius = 0
    
    def _own_obstacles(self, point: CanvasPoint, origin: GridCell) -> Set[int]:
        square = self.grid.cell_square(origin)
        return {
            i for i, obstacle in enumerate(self.obstacles)
            if obstacle.contains_point(point.x, point.y) or obstacle.intersects_interior(square)
        }
    
    def _enters_other_obstacle(self, cell: GridCell, own: Set[int]) -> bool:
        square = self.grid.cell_square(cell)
        return any(
            i not in own and obstacle.intersects_interior(square)
            for i, obstacle in enumerate(self.obstacles)
        )
    
    def resolve(self, point: CanvasPoint, endpoint: str = "endpoint") -> GridCell:
        """Return the free cell for ``point``.
        
        Raises:
            UnroutableEndpointError: If no free cell is reachable within the
                radius without crossing into another obstacle
        """
        self.state = NudgeState.AT_POINT
        self.radius = 0
        origin = self.grid.mapper.to_cell(point)
        resolved: Optional[GridCell] = None
        own: Set[int] = set()
        directions: List[Side] = []
        
        while self.state not in (NudgeState.RESOLVED, NudgeState.FAILED):
            if self.state == NudgeState.AT_POINT:
                if self.grid.is_walkable(origin):
                    resolved = origin
                    self.state = NudgeState.RESOLVED
                else:
                    own = self._own_obstacles(point, origin)
                    directions = [point.side] if point.side is not None else list(self.SEARCH_ORDER)
                    self.state = NudgeState.NUDGING
            
            elif self.state == NudgeState.NUDGING:
                self.radius += 1
                for side in list(directions):
                    dcol, drow = side.normal
                    candidate = origin.offset(dcol * self.radius, drow * self.radius)
                    if not self.grid.in_bounds(candidate):
                        directions.remove(side)
                    elif self.grid.is_walkable(candidate):
                        resolved = candidate
                        self.state = NudgeState.RESOLVED
                        break
                    elif self._enters_other_obstacle(candidate, own):
                        logger.debug(f"{endpoint} nudge {side.value} blocked by another "
                                     f"obstacle at {candidate.as_tuple()}")
                        directions.remove(side)
                if self.state == NudgeState.NUDGING and (not directions or self.radius >= self.max_radius):
                    self.state = NudgeState.FAILED
        
        if self.state == NudgeState.FAILED:
            raise UnroutableEndpointError(
                f"No free cell for {endpoint} at ({point.x}, {point.y}) within "
                f"{self.radius} cells; check node_padding and grid_ratio",
                endpoint=endpoint, point=point.as_tuple(), search_radius=self.radius
            )
        
        if resolved != origin:
            logger.debug(f"Nudged {endpoint} from {origin.as_tuple()} to {resolved.as_tuple()}")
        return resolved


@dataclass(frozen=True)
class GridBuildResult:
    """Occupancy grid plus the resolved start and end cells."""
    grid: OccupancyGrid
    start: GridCell
    end: GridCell


def create_grid(canvas_bounds: Rectangle, obstacles: Iterable[Rectangle],
                source: CanvasPoint, target: CanvasPoint, grid_ratio: float,
                max_nudge_radius: int = _DEFAULTS.max_nudge_radius,
                max_cells: int = _DEFAULTS.max_grid_cells,
                diagonal: bool = False) -> GridBuildResult:
    """Build the occupancy grid and locate the start and end cells.
    
    Args:
        canvas_bounds: Canvas rectangle, usually from ``build_boxes``
        obstacles: Obstacle rectangles to block
        source: Source connection point
        target: Target connection point
        grid_ratio: Canvas units per grid cell
        max_nudge_radius: Cells searched to move a blocked endpoint out
        max_cells: Upper bound on the grid size
        diagonal: Size the memory check for an 8-connected search
        
    Raises:
        InvalidGeometryError: Zero-size canvas, bad ratio, or endpoints outside the canvas
        UnroutableEndpointError: An endpoint is enclosed beyond the nudge radius
            or only escapes through another obstacle
        GridError: The grid is too large to allocate
    """
    obstacles = tuple(obstacles)
    headings = DIAGONAL_HEADINGS if diagonal else ORTHOGONAL_HEADINGS
    grid = OccupancyGrid.from_obstacles(canvas_bounds, obstacles, grid_ratio, max_cells, headings)
    
    for name, point in (("source", source), ("target", target)):
        validate_coordinates(point.x, point.y, canvas_bounds.as_tuple(), name=name)
    
    resolver = EndpointResolver(grid, max_nudge_radius, obstacles)
    start = resolver.resolve(source, "source")
    end = resolver.resolve(target, "target")
    return GridBuildResult(grid, start, end)
