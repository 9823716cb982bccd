#!/usr/bin/env python3
"""
SmartEdge Serialization Module

Reads scene files for routing and writes routing results.

Scene format (JSON, optionally gzip-compressed with a ``.gz`` suffix)::

    {
      "nodes": [{"id": "a", "x": 0, "y": 0, "width": 100, "height": 50}, ...],
      "edges": [{"id": "a-b",
                 "source": {"x": 100, "y": 25, "side": "right"},
                 "target": {"x": 300, "y": 25, "side": "left"}}, ...]
    }

Nodes may also give their position as ``"position": {"x": .., "y": ..}``.
"""

import gzip
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..domain.models.geometry import CanvasPoint, NodeGeometry, Side
from ..domain.models.routing import EdgeRequest, EdgeRoute
from ..shared.configuration.settings import SmartEdgeOptions
from ..shared.exceptions import SceneLoadError, ValidationError

logger = logging.getLogger(__name__)

# Format version for compatibility checking
RESULT_FORMAT_VERSION = "1.0"


@dataclass(frozen=True)
class Scene:
    """Nodes and the edges to route between them."""
    nodes: Tuple[NodeGeometry, ...]
    edges: Tuple[EdgeRequest, ...]


def _number(data: Dict[str, Any], key: str, context: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneLoadError(f"{context}: '{key}' must be a number, got {value!r}")
    return float(value)


def _parse_node(data: Any, index: int) -> NodeGeometry:
    if not isinstance(data, dict):
        raise SceneLoadError(f"node {index} must be an object")
    context = f"node {data.get('id', index)}"
    position = data.get('position', data)
    if not isinstance(position, dict):
        raise SceneLoadError(f"{context}: 'position' must be an object")
    return NodeGeometry(
        x=_number(position, 'x', context),
        y=_number(position, 'y', context),
        width=_number(data, 'width', context),
        height=_number(data, 'height', context),
        id=str(data['id']) if 'id' in data else None
    )


def _parse_point(data: Any, context: str) -> CanvasPoint:
    if not isinstance(data, dict):
        raise SceneLoadError(f"{context} must be an object with x and y")
    return CanvasPoint(
        x=_number(data, 'x', context),
        y=_number(data, 'y', context),
        side=Side.parse(data.get('side'))
    )


def parse_scene(data: Dict[str, Any]) -> Scene:
    """Build a Scene from decoded JSON.
    
    Raises:
        SceneLoadError: If the structure is malformed
    """
    if not isinstance(data, dict):
        raise SceneLoadError("Scene root must be a JSON object")
    
    raw_nodes = data.get('nodes', [])
    raw_edges = data.get('edges', [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise SceneLoadError("'nodes' and 'edges' must be lists")
    
    try:
        nodes = tuple(_parse_node(node, i) for i, node in enumerate(raw_nodes))
        edges = []
        for i, edge in enumerate(raw_edges):
            edge_id = str(edge.get('id', i)) if isinstance(edge, dict) else str(i)
            if not isinstance(edge, dict):
                raise SceneLoadError(f"edge {edge_id} must be an object")
            edges.append(EdgeRequest(
                source=_parse_point(edge.get('source'), f"edge {edge_id} source"),
                target=_parse_point(edge.get('target'), f"edge {edge_id} target"),
                id=edge_id
            ))
    except ValidationError as e:
        raise SceneLoadError(f"Invalid scene geometry: {e}") from e
    
    return Scene(nodes, tuple(edges))


def load_scene(path: Union[str, Path]) -> Scene:
    """Load a scene from a JSON (or ``.json.gz``) file.
    
    Raises:
        SceneLoadError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        if path.suffix == '.gz':
            with gzip.open(path, 'rt', encoding='utf-8') as f:
                data = json.load(f)
        else:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
    except (OSError, ValueError) as e:
        raise SceneLoadError(f"Failed to read scene: {e}", file_path=str(path)) from e
    
    try:
        scene = parse_scene(data)
    except SceneLoadError as e:
        e.file_path = str(path)
        raise
    
    logger.info(f"Loaded scene {path}: {len(scene.nodes)} nodes, {len(scene.edges)} edges")
    return scene


def _point_to_list(point: CanvasPoint) -> List[float]:
    return [point.x, point.y]


def route_to_dict(route: EdgeRoute) -> Dict[str, Any]:
    """Serialize one routing result."""
    return {
        "id": route.edge_id,
        "used_fallback": route.used_fallback,
        "svg_path": route.svg_path,
        "waypoints": [_point_to_list(p) for p in route.waypoints],
        "full_path": [list(cell.as_tuple()) for cell in route.full_path],
        "smoothed_path": [list(cell.as_tuple()) for cell in route.smoothed_path],
        "statistics": route.get_route_statistics(),
    }


def routes_to_document(routes: Sequence[EdgeRoute],
                       options: Optional[SmartEdgeOptions] = None) -> Dict[str, Any]:
    """Wrap routing results in a versioned document."""
    document = {
        "format": "SmartEdge Routes",
        "version": RESULT_FORMAT_VERSION,
        "timestamp": datetime.now().isoformat(),
        "routes": [route_to_dict(route) for route in routes],
    }
    if options is not None:
        document["options"] = {
            "grid_ratio": options.grid_ratio,
            "node_padding": options.node_padding,
            "diagonal": options.diagonal,
            "smoothing": options.smoothing,
        }
    return document


def save_document(document: Dict[str, Any], output_path: Union[str, Path]) -> None:
    """Write a result document as pretty-printed JSON."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)
    logger.info(f"Wrote {len(document.get('routes', []))} routes to {path}")
