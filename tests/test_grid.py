"""Tests for occupancy grid construction and endpoint placement."""
import numpy as np
import pytest

from smartedge.algorithms.base import grid as grid_module
from smartedge.algorithms.base.grid import (
    EndpointResolver, NudgeState, OccupancyGrid, create_grid, search_footprint
)
from smartedge.domain.models.geometry import CanvasPoint, GridCell, Rectangle, Side
from smartedge.shared.exceptions import GridError, InvalidGeometryError, UnroutableEndpointError


class TestOccupancyGrid:
    """Grid dimensions and obstacle marking."""

    def test_dimensions_include_far_edge(self):
        grid = OccupancyGrid.from_obstacles(Rectangle(0, 0, 100, 50), [], 10)
        assert (grid.cols, grid.rows) == (11, 6)
        assert grid.blocked.shape == (6, 11)
        assert grid.blocked_count == 0

    def test_aligned_obstacle_blocks_its_cells(self):
        grid = OccupancyGrid.from_obstacles(
            Rectangle(0, 0, 100, 100), [Rectangle(20, 20, 40, 40)], 10
        )
        assert grid.blocked_count == 9
        assert grid.is_blocked(GridCell(2, 2))
        assert grid.is_blocked(GridCell(4, 4))
        assert grid.is_walkable(GridCell(1, 3))
        assert grid.is_walkable(GridCell(5, 3))

    def test_partial_overlap_blocks_cell(self):
        grid = OccupancyGrid.from_obstacles(
            Rectangle(0, 0, 100, 100), [Rectangle(21, 21, 29, 29)], 10
        )
        assert grid.blocked_count == 4
        assert grid.is_blocked(GridCell(3, 3))
        assert grid.is_walkable(GridCell(4, 3))

    def test_blocked_cells_overlap_obstacles(self):
        obstacles = [Rectangle(20, 10, 50, 30), Rectangle(60, 60, 90, 80)]
        grid = OccupancyGrid.from_obstacles(Rectangle(0, 0, 100, 100), obstacles, 10)
        for row in range(grid.rows):
            for col in range(grid.cols):
                square = Rectangle(col * 10 - 5, row * 10 - 5, col * 10 + 5, row * 10 + 5)
                overlaps = any(square.intersects_interior(o) for o in obstacles)
                assert grid.is_blocked(GridCell(col, row)) == overlaps

    def test_empty_obstacle_blocks_nothing(self):
        grid = OccupancyGrid.from_obstacles(
            Rectangle(0, 0, 100, 100), [Rectangle(30, 30, 30, 60)], 10
        )
        assert grid.blocked_count == 0

    def test_blocked_array_is_read_only(self):
        grid = OccupancyGrid.from_obstacles(Rectangle(0, 0, 50, 50), [], 10)
        with pytest.raises(ValueError):
            grid.blocked[0, 0] = True

    def test_input_array_is_copied(self):
        flags = np.zeros((3, 3), dtype=bool)
        grid = OccupancyGrid(flags, 0, 0, 1)
        flags[1, 1] = True
        assert grid.is_walkable(GridCell(1, 1))

    def test_out_of_bounds_cells_are_not_walkable(self, make_grid):
        grid = make_grid(3, 3)
        assert not grid.is_walkable(GridCell(-1, 0))
        assert not grid.is_walkable(GridCell(0, 3))

    def test_flat_indexing(self, make_grid):
        grid = make_grid(4, 3, blocked=[(2, 1)])
        index = grid.index(GridCell(2, 1))
        assert index == 6
        assert grid.flat[index]
        assert grid.cell_at(index) == GridCell(2, 1)

    def test_zero_size_canvas(self):
        with pytest.raises(InvalidGeometryError):
            OccupancyGrid.from_obstacles(Rectangle(0, 0, 0, 100), [], 10)

    def test_cell_limit(self):
        with pytest.raises(GridError) as exc_info:
            OccupancyGrid.from_obstacles(Rectangle(0, 0, 1000, 1000), [], 1, max_cells=1000)
        assert exc_info.value.grid_shape == (1001, 1001)

    def test_memory_budget(self, monkeypatch):
        monkeypatch.setattr(grid_module, "memory_budget", lambda: 100)
        with pytest.raises(GridError):
            OccupancyGrid.from_obstacles(Rectangle(0, 0, 100, 100), [], 10)

    def test_memory_budget_covers_search_buffers(self, monkeypatch):
        # 11x11 cells, five states per cell for an orthogonal search
        footprint = search_footprint(121, 4)
        assert footprint == 121 * (5 * 25 + 1)
        monkeypatch.setattr(grid_module, "memory_budget", lambda: footprint - 1)
        with pytest.raises(GridError):
            OccupancyGrid.from_obstacles(Rectangle(0, 0, 100, 100), [], 10)

        monkeypatch.setattr(grid_module, "memory_budget", lambda: footprint)
        OccupancyGrid.from_obstacles(Rectangle(0, 0, 100, 100), [], 10)

    def test_diagonal_search_needs_more_memory(self, monkeypatch):
        monkeypatch.setattr(grid_module, "memory_budget", lambda: search_footprint(121, 4))
        with pytest.raises(GridError):
            create_grid(Rectangle(0, 0, 100, 100), [], CanvasPoint(0, 0), CanvasPoint(100, 100),
                        10, diagonal=True)
        assert search_footprint(121, 8) == 121 * (9 * 25 + 1)

    def test_statistics(self):
        grid = OccupancyGrid.from_obstacles(
            Rectangle(0, 0, 100, 100), [Rectangle(20, 20, 40, 40)], 10
        )
        stats = grid.get_statistics()
        assert stats['dimensions'] == "11x11"
        assert stats['total_cells'] == 121
        assert stats['blocked_cells'] == 9
        assert stats['free_cells'] == 112


class TestEndpointResolver:
    """Moving blocked connection points onto free cells."""

    def test_free_point_stays(self, make_grid):
        resolver = EndpointResolver(make_grid(5, 5))
        assert resolver.resolve(CanvasPoint(2, 2, Side.RIGHT)) == GridCell(2, 2)
        assert resolver.state is NudgeState.RESOLVED
        assert resolver.radius == 0

    def test_nudges_along_side_normal(self, make_grid):
        blocked = [(col, 2) for col in range(0, 4)]
        resolver = EndpointResolver(make_grid(6, 5, blocked))
        assert resolver.resolve(CanvasPoint(1, 2, Side.RIGHT)) == GridCell(4, 2)
        assert resolver.radius == 3

    def test_nudge_does_not_move_sideways(self, make_grid):
        blocked = [(col, 2) for col in range(0, 6)]
        resolver = EndpointResolver(make_grid(6, 5, blocked))
        with pytest.raises(UnroutableEndpointError):
            resolver.resolve(CanvasPoint(1, 2, Side.RIGHT), "source")
        assert resolver.state is NudgeState.FAILED

    def test_radius_limit(self, make_grid):
        blocked = [(col, 2) for col in range(0, 5)]
        resolver = EndpointResolver(make_grid(8, 5, blocked), max_radius=2)
        with pytest.raises(UnroutableEndpointError) as exc_info:
            resolver.resolve(CanvasPoint(0, 2, Side.RIGHT), "target")
        error = exc_info.value
        assert error.endpoint == "target"
        assert error.search_radius == 2
        assert error.point == (0, 2)

    def test_no_side_search_order(self, make_grid):
        # Centre blocked, every neighbour free: top comes first
        resolver = EndpointResolver(make_grid(5, 5, [(2, 2)]))
        assert resolver.resolve(CanvasPoint(2, 2)) == GridCell(2, 1)

    def test_no_side_skips_blocked_directions(self, make_grid):
        blocked = [(2, 2), (2, 1), (3, 2)]
        resolver = EndpointResolver(make_grid(5, 5, blocked))
        assert resolver.resolve(CanvasPoint(2, 2)) == GridCell(2, 3)


class TestCreateGrid:

    def test_resolves_both_endpoints(self):
        result = create_grid(
            Rectangle(0, 0, 100, 100), [Rectangle(20, 20, 40, 40)],
            CanvasPoint(40, 30, Side.RIGHT), CanvasPoint(80, 30, Side.LEFT), 10
        )
        assert result.start == GridCell(5, 3)
        assert result.end == GridCell(8, 3)

    def test_nudge_stops_at_neighbouring_obstacle(self):
        # Padded nodes touch: stepping right from the first runs straight into the second
        obstacles = [Rectangle(-10, -10, 110, 110), Rectangle(110, -10, 240, 110)]
        with pytest.raises(UnroutableEndpointError) as exc_info:
            create_grid(
                Rectangle(-40, -40, 270, 140), obstacles,
                CanvasPoint(100, 50, Side.RIGHT), CanvasPoint(125, 50, Side.LEFT), 10
            )
        assert exc_info.value.endpoint == "source"

    def test_nudge_without_side_skips_blocked_direction(self):
        # Upward the first free cell lies beyond the small node at (3, 1)
        obstacles = [Rectangle(0, 20, 60, 60), Rectangle(25, 5, 35, 15)]
        result = create_grid(
            Rectangle(0, 0, 100, 100), obstacles,
            CanvasPoint(30, 30), CanvasPoint(80, 80), 10
        )
        assert result.start == GridCell(7, 3)

    def test_endpoint_outside_canvas(self):
        with pytest.raises(InvalidGeometryError):
            create_grid(
                Rectangle(0, 0, 100, 100), [],
                CanvasPoint(150, 30), CanvasPoint(80, 30), 10
            )

    def test_deterministic(self):
        args = (
            Rectangle(-40, -40, 340, 140),
            [Rectangle(-10, -10, 110, 110), Rectangle(190, -10, 310, 110)],
            CanvasPoint(100, 50, Side.RIGHT), CanvasPoint(200, 50, Side.LEFT), 10
        )
        first = create_grid(*args)
        second = create_grid(*args)
        assert np.array_equal(first.grid.blocked, second.grid.blocked)
        assert (first.start, first.end) == (second.start, second.end)
