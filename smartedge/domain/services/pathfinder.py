"""Domain service for grid path search."""
import heapq
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from ...algorithms.base.grid import check_allocation
from ...application.interfaces.path_finder import PathFinder
from ...shared.exceptions import InvalidGeometryError
from ..models.geometry import GridCell, Side
from ..models.routing import GridPath

if TYPE_CHECKING:
    from ...algorithms.base.grid import OccupancyGrid
    from ...shared.configuration.settings import SmartEdgeOptions

logger = logging.getLogger(__name__)

# Headings, indexed; the search state is (cell, heading)
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))
DIAGONAL_STEPS: Tuple[Tuple[int, int], ...] = ORTHOGONAL_STEPS + ((1, 1), (-1, 1), (-1, -1), (1, -1))


class HeuristicFunction(ABC):
    """Abstract base class for heuristic functions."""

    @abstractmethod
    def calculate(self, start: GridCell, end: GridCell) -> int:
        """Calculate heuristic cost between two cells."""
        pass


class ManhattanHeuristic(HeuristicFunction):
    """Manhattan distance; admissible for 4-connected unit-cost grids."""

    def calculate(self, start: GridCell, end: GridCell) -> int:
        return abs(start.col - end.col) + abs(start.row - end.row)


class ChebyshevHeuristic(HeuristicFunction):
    """Chebyshev distance; admissible when diagonal steps cost the same as straight ones."""

    def calculate(self, start: GridCell, end: GridCell) -> int:
        return max(abs(start.col - end.col), abs(start.row - end.row))


class ZeroHeuristic(HeuristicFunction):
    """Zero heuristic, turning A* into uniform-cost search."""

    def calculate(self, start: GridCell, end: GridCell) -> int:
        return 0


def _direction(a: GridCell, b: GridCell) -> Tuple[int, int]:
    dc = b.col - a.col
    dr = b.row - a.row
    return ((dc > 0) - (dc < 0), (dr > 0) - (dr < 0))


def compress_path(path: Sequence[GridCell]) -> Tuple[GridCell, ...]:
    """Collapse runs of collinear cells to their end cells.

    The first and last cells are always kept, as is every cell where the
    direction of travel changes.
    """
    if len(path) < 3:
        return tuple(path)

    compressed = [path[0]]
    previous = _direction(path[0], path[1])
    for i in range(1, len(path) - 1):
        current = _direction(path[i], path[i + 1])
        if current != previous:
            compressed.append(path[i])
        previous = current
    compressed.append(path[-1])
    return tuple(compressed)


def interpolate(start: GridCell, end: GridCell) -> List[GridCell]:
    """Cells on the Bresenham line from ``start`` to ``end``, both included."""
    x0, y0 = start.col, start.row
    x1, y1 = end.col, end.row
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    line = []
    while True:
        line.append(GridCell(x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy
    return line


def smoothen_path(grid: "OccupancyGrid", path: Sequence[GridCell]) -> Tuple[GridCell, ...]:
    """Shortcut the path wherever a straight line of free cells exists.

    Walks the path keeping the last cell that is still visible from the
    current anchor; the first and last cells are always kept.
    """
    if len(path) < 3:
        return tuple(path)

    anchor = path[0]
    smoothed = [anchor]
    for i in range(2, len(path)):
        line = interpolate(anchor, path[i])
        if any(not grid.is_walkable(cell) for cell in line[1:]):
            anchor = path[i - 1]
            smoothed.append(anchor)
    smoothed.append(path[-1])
    return tuple(smoothed)


def validate_path(grid: "OccupancyGrid", path: Sequence[GridCell],
                  diagonal: bool = False) -> List[str]:
    """Validate that a path is continuous and stays on free cells."""
    issues = []

    for i, cell in enumerate(path):
        if not grid.is_walkable(cell):
            issues.append(f"Blocked or out-of-grid cell at step {i}: {cell.as_tuple()}")

    for i in range(len(path) - 1):
        if not path[i].is_adjacent(path[i + 1], diagonal=diagonal):
            issues.append(f"Invalid movement at step {i}: "
                          f"{path[i].as_tuple()} -> {path[i + 1].as_tuple()}")

    return issues


class AStarPathFinder(PathFinder):
    """A* over (cell, heading) states with a corner-minimizing tie-break.

    Every step costs 1. Paths are compared by (steps, turns), so the result
    is always a shortest path and, among shortest paths, one with the fewest
    turns. A turn is any change of heading; leaving the start against
    ``start_side``'s normal and arriving at the end against ``end_side``'s
    normal are free, other headings there cost a turn. Remaining ties are
    broken by (f, turns, h, cell index, heading index), which depends only on
    the inputs.

    Search buffers are flat numpy arrays indexed by
    ``cell_index * heading_count + heading``.
    """

    def __init__(self, heuristic: HeuristicFunction = None, diagonal: bool = False,
                 smoothing: str = "compress", max_iterations: Optional[int] = None):
        """Initialize A* path finder.

        Args:
            heuristic: Defaults to Manhattan (Chebyshev when diagonal)
            diagonal: Allow 8-connected moves; diagonals never cut blocked corners
            smoothing: "compress" (collinear runs) or "line_of_sight"
            max_iterations: Optional cap on expanded states
        """
        if smoothing not in ("compress", "line_of_sight"):
            raise ValueError(f"Unknown smoothing mode: {smoothing}")
        self.diagonal = diagonal
        self.heuristic = heuristic or (ChebyshevHeuristic() if diagonal else ManhattanHeuristic())
        self.smoothing = smoothing
        self.max_iterations = max_iterations
        self.steps = DIAGONAL_STEPS if diagonal else ORTHOGONAL_STEPS

    @classmethod
    def from_options(cls, options: "SmartEdgeOptions") -> 'AStarPathFinder':
        return cls(diagonal=options.diagonal, smoothing=options.smoothing)

    @property
    def name(self) -> str:
        return f"astar-{'8' if self.diagonal else '4'}-{self.smoothing}"

    def _heading_of(self, side: Optional[Side]) -> Optional[int]:
        if side is None:
            return None
        return self.steps.index(side.normal)

    def generate_path(self, grid: "OccupancyGrid", start: GridCell, end: GridCell,
                      start_side: Optional[Side] = None,
                      end_side: Optional[Side] = None) -> GridPath:
        """Find a path and its smoothed form.

        Raises:
            InvalidGeometryError: If start or end lies outside the grid
            GridError: If the search buffers would exceed the memory budget
        """
        for name, cell in (("start", start), ("end", end)):
            if not grid.in_bounds(cell):
                raise InvalidGeometryError(
                    f"{name} cell {cell.as_tuple()} outside {grid.cols}x{grid.rows} grid",
                    field=name, value=cell.as_tuple()
                )

        if not grid.is_walkable(start) or not grid.is_walkable(end):
            logger.debug("Start or end cell is blocked, no path")
            return GridPath.empty()

        if start == end:
            return GridPath((start,), (start,))

        full_path = self._search(grid, start, end, start_side, end_side)
        if not full_path:
            return GridPath.empty()

        if self.smoothing == "line_of_sight":
            smoothed = smoothen_path(grid, full_path)
        else:
            smoothed = compress_path(full_path)
        return GridPath(tuple(full_path), smoothed)

    def _search(self, grid: "OccupancyGrid", start: GridCell, end: GridCell,
                start_side: Optional[Side], end_side: Optional[Side]) -> List[GridCell]:
        """A* pathfinding algorithm."""
        steps = self.steps
        no_heading = len(steps)
        heading_count = no_heading + 1
        cols, rows = grid.cols, grid.rows
        blocked = grid.flat
        check_allocation(rows, cols, headings=len(steps))

        state_count = grid.size * heading_count
        g_steps = np.full(state_count, -1, dtype=np.int64)
        g_turns = np.zeros(state_count, dtype=np.int64)
        parent = np.full(state_count, -1, dtype=np.int64)
        closed = np.zeros(state_count, dtype=bool)

        start_index = grid.index(start)
        end_index = grid.index(end)
        start_heading = self._heading_of(start_side)
        if start_heading is None:
            start_heading = no_heading
        arrival_heading = self._heading_of(end_side.opposite) if end_side is not None else None

        start_state = start_index * heading_count + start_heading
        g_steps[start_state] = 0
        h = self.heuristic.calculate(start, end)
        open_set = [(h, 0, h, start_index, start_heading)]
        iterations = 0

        while open_set:
            _, turns, _, index, heading = heapq.heappop(open_set)
            state = index * heading_count + heading
            if closed[state]:
                continue
            closed[state] = True

            iterations += 1
            if self.max_iterations is not None and iterations > self.max_iterations:
                logger.warning(f"A* gave up after {self.max_iterations} iterations")
                return []

            if index == end_index:
                logger.debug(f"A* reached target after {iterations} iterations")
                return self._reconstruct(grid, parent, state, heading_count)

            row, col = divmod(index, cols)
            steps_so_far = int(g_steps[state])

            for next_heading, (dc, dr) in enumerate(steps):
                ncol, nrow = col + dc, row + dr
                if not (0 <= ncol < cols and 0 <= nrow < rows):
                    continue
                next_index = nrow * cols + ncol
                if blocked[next_index]:
                    continue
                if dc and dr and (blocked[row * cols + ncol] or blocked[nrow * cols + col]):
                    continue

                next_state = next_index * heading_count + next_heading
                if closed[next_state]:
                    continue

                next_turns = turns
                if heading != no_heading and heading != next_heading:
                    next_turns += 1
                if next_index == end_index and arrival_heading is not None \
                        and next_heading != arrival_heading:
                    next_turns += 1
                next_steps = steps_so_far + 1

                known = g_steps[next_state]
                if known == -1 or (next_steps, next_turns) < (known, g_turns[next_state]):
                    g_steps[next_state] = next_steps
                    g_turns[next_state] = next_turns
                    parent[next_state] = state
                    h = self.heuristic.calculate(GridCell(ncol, nrow), end)
                    heapq.heappush(open_set, (next_steps + h, next_turns, h,
                                              next_index, next_heading))

        logger.debug(f"No path after {iterations} iterations")
        return []

    @staticmethod
    def _reconstruct(grid: "OccupancyGrid", parent: np.ndarray, state: int,
                     heading_count: int) -> List[GridCell]:
        path = []
        while state != -1:
            path.append(grid.cell_at(state // heading_count))
            state = int(parent[state])
        path.reverse()
        return path
