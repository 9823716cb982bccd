"""Domain services: path search and the routing engine."""
from .pathfinder import (
    AStarPathFinder, HeuristicFunction, ManhattanHeuristic, ChebyshevHeuristic,
    ZeroHeuristic, compress_path, smoothen_path, interpolate, validate_path
)
from .routing_engine import SmartEdgeRouter

__all__ = [
    'AStarPathFinder', 'HeuristicFunction', 'ManhattanHeuristic', 'ChebyshevHeuristic',
    'ZeroHeuristic', 'compress_path', 'smoothen_path', 'interpolate', 'validate_path',
    'SmartEdgeRouter'
]
