"""Conversion between canvas coordinates and grid cells.

Cell ``(col, row)`` sits at canvas point
``(x_min + col * grid_ratio, y_min + row * grid_ratio)``; canvas points map to
the nearest such lattice point.
"""
from dataclasses import dataclass
from typing import Iterable, List

from ...domain.models.geometry import CanvasPoint, GridCell, round_half_up, to_grid_units


def graph_to_grid_point(point: CanvasPoint, x_min: float, y_min: float,
                        grid_ratio: float) -> GridCell:
    """Convert a canvas point to the nearest grid cell."""
    col = round_half_up(to_grid_units(point.x - x_min, grid_ratio))
    row = round_half_up(to_grid_units(point.y - y_min, grid_ratio))
    return GridCell(col, row)


def grid_to_graph_point(cell: GridCell, x_min: float, y_min: float,
                        grid_ratio: float) -> CanvasPoint:
    """Convert a grid cell to its canvas point."""
    return CanvasPoint(
        x=x_min + cell.col * grid_ratio,
        y=y_min + cell.row * grid_ratio
    )


@dataclass(frozen=True)
class CoordinateMapper:
    """Grid origin and pitch bundled for repeated conversions."""
    x_min: float
    y_min: float
    grid_ratio: float
    
    def to_cell(self, point: CanvasPoint) -> GridCell:
        return graph_to_grid_point(point, self.x_min, self.y_min, self.grid_ratio)
    
    def to_point(self, cell: GridCell) -> CanvasPoint:
        return grid_to_graph_point(cell, self.x_min, self.y_min, self.grid_ratio)
    
    def path_to_points(self, cells: Iterable[GridCell]) -> List[CanvasPoint]:
        return [self.to_point(cell) for cell in cells]
