"""SVG path drawers for routed edges."""
from typing import List, Sequence

from ..application.interfaces.curve_drawer import CurveDrawer
from ..domain.models.geometry import CanvasPoint


def format_number(value: float) -> str:
    """Compact number formatting for SVG path data (``10.0`` -> ``10``)."""
    if value == int(value):
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _coord(point: CanvasPoint) -> str:
    return f"{format_number(point.x)},{format_number(point.y)}"


def _chain(source: CanvasPoint, target: CanvasPoint,
           waypoints: Sequence[CanvasPoint]) -> List[CanvasPoint]:
    return [source, *waypoints, target]


class SmoothCurveDrawer(CurveDrawer):
    """Quadratic Bézier curve that rounds every corner of the route.
    
    Consecutive points are joined through their midpoints, each point acting
    as the control point of the curve that bends around it.
    """
    
    def draw(self, source: CanvasPoint, target: CanvasPoint,
             waypoints: Sequence[CanvasPoint]) -> str:
        points = _chain(source, target, waypoints)
        commands = [f"M {_coord(points[0])}"]
        for previous, current, following in zip(points, points[1:], points[2:]):
            start = _midpoint(previous, current)
            end = _midpoint(current, following)
            commands.append(f"L {_coord(start)}")
            commands.append(f"Q {_coord(current)} {_coord(end)}")
        commands.append(f"L {_coord(points[-1])}")
        return " ".join(commands)


class PolylineDrawer(CurveDrawer):
    """Straight segments through every waypoint."""
    
    def draw(self, source: CanvasPoint, target: CanvasPoint,
             waypoints: Sequence[CanvasPoint]) -> str:
        points = _chain(source, target, waypoints)
        return " ".join(
            f"{'M' if i == 0 else 'L'} {_coord(point)}" for i, point in enumerate(points)
        )


class StraightLineDrawer(CurveDrawer):
    """Direct source-to-target line; the fallback edge."""
    
    def draw(self, source: CanvasPoint, target: CanvasPoint,
             waypoints: Sequence[CanvasPoint]) -> str:
        return f"M {_coord(source)} L {_coord(target)}"


def _midpoint(a: CanvasPoint, b: CanvasPoint) -> CanvasPoint:
    return CanvasPoint((a.x + b.x) / 2, (a.y + b.y) / 2)


DRAWERS = {
    'smooth': SmoothCurveDrawer,
    'polyline': PolylineDrawer,
    'straight': StraightLineDrawer,
}


def get_drawer(name: str) -> CurveDrawer:
    """Instantiate a drawer by name."""
    try:
        return DRAWERS[name]()
    except KeyError:
        raise ValueError(f"Unknown drawer: {name}; choose from {sorted(DRAWERS)}") from None
