"""Tests for scene loading and result documents."""
import gzip
import json

import pytest

from smartedge.domain.models.geometry import CanvasPoint, Side
from smartedge.domain.models.routing import EdgeRoute
from smartedge.infrastructure.serialization import (
    RESULT_FORMAT_VERSION, load_scene, parse_scene, route_to_dict, routes_to_document,
    save_document
)
from smartedge.shared.configuration.settings import SmartEdgeOptions
from smartedge.shared.exceptions import SceneLoadError

SCENE = {
    "nodes": [
        {"id": "a", "x": 0, "y": 0, "width": 100, "height": 100},
        {"id": "b", "position": {"x": 200, "y": 0}, "width": 100, "height": 100},
    ],
    "edges": [
        {"id": "a-b",
         "source": {"x": 100, "y": 50, "side": "right"},
         "target": {"x": 200, "y": 50, "side": "LEFT"}},
        {"source": {"x": 50, "y": 100}, "target": {"x": 250, "y": 100}},
    ],
}


class TestParseScene:

    def test_nodes_and_edges(self):
        scene = parse_scene(SCENE)
        assert [node.id for node in scene.nodes] == ["a", "b"]
        assert scene.nodes[1].x == 200
        assert scene.edges[0].id == "a-b"
        assert scene.edges[0].source == CanvasPoint(100, 50, Side.RIGHT)
        assert scene.edges[0].target.side is Side.LEFT

    def test_edge_without_id_gets_index(self):
        edge = parse_scene(SCENE).edges[1]
        assert edge.id == "1"
        assert edge.source.side is None

    @pytest.mark.parametrize("data", [
        [],
        {"nodes": {}},
        {"nodes": [{"id": "a", "x": "0", "y": 0, "width": 1, "height": 1}]},
        {"nodes": [{"id": "a", "x": 0, "y": 0, "width": -1, "height": 1}]},
        {"nodes": ["a"]},
        {"edges": [{"source": {"x": 0, "y": 0}}]},
        {"edges": [{"source": {"x": 0, "y": 0, "side": "up"}, "target": {"x": 1, "y": 1}}]},
    ])
    def test_malformed(self, data):
        with pytest.raises(SceneLoadError):
            parse_scene(data)


class TestLoadScene:

    def test_json_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE))
        assert len(load_scene(path).edges) == 2

    def test_gzip_file(self, tmp_path):
        path = tmp_path / "scene.json.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            json.dump(SCENE, f)
        assert len(load_scene(path).nodes) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneLoadError) as exc_info:
            load_scene(tmp_path / "missing.json")
        assert exc_info.value.file_path.endswith("missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{")
        with pytest.raises(SceneLoadError):
            load_scene(path)


class TestResultDocument:

    def test_route_to_dict(self):
        route = EdgeRoute(CanvasPoint(0, 0), CanvasPoint(10, 0), svg_path="M 0,0 L 10,0",
                          edge_id="e")
        data = route_to_dict(route)
        assert data["id"] == "e"
        assert data["used_fallback"]
        assert data["full_path"] == []
        assert data["statistics"]["steps"] == 0

    def test_document(self, tmp_path):
        route = EdgeRoute(CanvasPoint(0, 0), CanvasPoint(10, 0))
        document = routes_to_document([route], SmartEdgeOptions())
        assert document["version"] == RESULT_FORMAT_VERSION
        assert document["options"]["grid_ratio"] == 10
        assert len(document["routes"]) == 1

        path = tmp_path / "nested" / "routes.json"
        save_document(document, path)
        assert json.loads(path.read_text())["format"] == "SmartEdge Routes"
