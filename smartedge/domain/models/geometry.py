"""Geometry value objects for canvas and grid space."""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from ...shared.exceptions import InvalidGeometryError

# Relative tolerance used when snapping canvas values onto grid lines
GRID_SNAP_TOLERANCE = 1e-9


def to_grid_units(value: float, pitch: float) -> float:
    """Express ``value`` in multiples of ``pitch``.
    
    Quotients within GRID_SNAP_TOLERANCE of an integer are snapped to it so
    that values such as ``0.3 / 0.1`` do not land on ``2.9999999999999996``.
    """
    quotient = value / pitch
    nearest = round(quotient)
    if abs(quotient - nearest) <= GRID_SNAP_TOLERANCE * max(1.0, abs(quotient)):
        return float(nearest)
    return quotient


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def round_down(value: float, pitch: float) -> float:
    """Round ``value`` down to a multiple of ``pitch``."""
    return math.floor(to_grid_units(value, pitch)) * pitch


def round_up(value: float, pitch: float) -> float:
    """Round ``value`` up to a multiple of ``pitch``."""
    return math.ceil(to_grid_units(value, pitch)) * pitch


class Side(Enum):
    """Face of a node a connection point is attached to."""
    LEFT = "left"
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    
    @property
    def normal(self) -> Tuple[int, int]:
        """Outward unit step (dcol, drow); canvas y grows downward."""
        return _SIDE_NORMALS[self]
    
    @property
    def opposite(self) -> 'Side':
        return _SIDE_OPPOSITES[self]
    
    @classmethod
    def parse(cls, value) -> Optional['Side']:
        """Parse a side from a string (case-insensitive), a Side, or None."""
        if value is None or isinstance(value, Side):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidGeometryError(
                f"Unknown side: {value!r}", field="side", value=value
            ) from None


_SIDE_NORMALS = {
    Side.LEFT: (-1, 0),
    Side.TOP: (0, -1),
    Side.RIGHT: (1, 0),
    Side.BOTTOM: (0, 1),
}

_SIDE_OPPOSITES = {
    Side.LEFT: Side.RIGHT,
    Side.RIGHT: Side.LEFT,
    Side.TOP: Side.BOTTOM,
    Side.BOTTOM: Side.TOP,
}


@dataclass(frozen=True)
class CanvasPoint:
    """A point in canvas space, optionally attached to a node side."""
    x: float
    y: float
    side: Optional[Side] = None
    
    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)
    
    def distance_to(self, other: 'CanvasPoint') -> float:
        """Calculate Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class GridCell:
    """Integer (col, row) index into an occupancy grid."""
    col: int
    row: int
    
    def offset(self, dcol: int, drow: int) -> 'GridCell':
        return GridCell(self.col + dcol, self.row + drow)
    
    def as_tuple(self) -> Tuple[int, int]:
        return (self.col, self.row)
    
    def is_adjacent(self, other: 'GridCell', diagonal: bool = False) -> bool:
        """True if ``other`` is one grid step away."""
        dc = abs(self.col - other.col)
        dr = abs(self.row - other.row)
        if diagonal:
            return max(dc, dr) == 1
        return dc + dr == 1


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in canvas units."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float
    
    def __post_init__(self):
        values = (self.x_min, self.y_min, self.x_max, self.y_max)
        if not all(math.isfinite(v) for v in values):
            raise InvalidGeometryError(f"Rectangle has non-finite bounds: {values}")
        if self.x_min > self.x_max or self.y_min > self.y_max:
            raise InvalidGeometryError(
                f"Inverted rectangle: ({self.x_min}, {self.y_min}) to ({self.x_max}, {self.y_max})",
                details={'bounds': values}
            )
    
    @property
    def width(self) -> float:
        return self.x_max - self.x_min
    
    @property
    def height(self) -> float:
        return self.y_max - self.y_min
    
    @property
    def center(self) -> CanvasPoint:
        return CanvasPoint(
            x=(self.x_min + self.x_max) / 2,
            y=(self.y_min + self.y_max) / 2
        )
    
    @property
    def is_empty(self) -> bool:
        """True when the rectangle has no area."""
        return self.width == 0 or self.height == 0
    
    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x_min, self.y_min, self.x_max, self.y_max)
    
    def contains_point(self, x: float, y: float) -> bool:
        """Inclusive containment test."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max
    
    def intersects_interior(self, other: 'Rectangle') -> bool:
        """True if the interiors overlap; shared edges do not count."""
        return (self.x_min < other.x_max and other.x_min < self.x_max and
                self.y_min < other.y_max and other.y_min < self.y_max)
    
    def expand(self, margin: float) -> 'Rectangle':
        """Grow (or shrink, for negative margins) on all four sides."""
        return Rectangle(
            self.x_min - margin, self.y_min - margin,
            self.x_max + margin, self.y_max + margin
        )
    
    def union(self, other: 'Rectangle') -> 'Rectangle':
        return Rectangle(
            min(self.x_min, other.x_min), min(self.y_min, other.y_min),
            max(self.x_max, other.x_max), max(self.y_max, other.y_max)
        )
    
    def round_outward(self, pitch: float) -> 'Rectangle':
        """Snap edges outward onto multiples of ``pitch``."""
        return Rectangle(
            round_down(self.x_min, pitch), round_down(self.y_min, pitch),
            round_up(self.x_max, pitch), round_up(self.y_max, pitch)
        )
    
    @classmethod
    def union_all(cls, rectangles: Iterable['Rectangle']) -> Optional['Rectangle']:
        """Bounding box of all rectangles, or None for an empty input."""
        result = None
        for rect in rectangles:
            result = rect if result is None else result.union(rect)
        return result


@dataclass(frozen=True)
class NodeGeometry:
    """A diagram node as seen by the router: top-left position and size."""
    x: float
    y: float
    width: float
    height: float
    id: Optional[str] = None
    
    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidGeometryError(
                f"Node {self.id or '<anonymous>'} has negative size {self.width}x{self.height}",
                field="size", value=(self.width, self.height)
            )
    
    @property
    def bounds(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.x + self.width, self.y + self.height)
