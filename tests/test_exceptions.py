"""Tests for the exception hierarchy."""
from smartedge.shared.exceptions import (
    InvalidGeometryError, RoutingError, SmartEdgeException, UnroutableEndpointError,
    ValidationError
)


class TestExceptions:

    def test_error_code_in_message(self):
        error = InvalidGeometryError("canvas is empty", field="canvas_bounds")
        assert str(error) == "[INVALID_GEOMETRY] canvas is empty"
        assert isinstance(error, ValidationError)
        assert error.field == "canvas_bounds"

    def test_plain_message(self):
        assert str(SmartEdgeException("boom")) == "boom"

    def test_unroutable_endpoint(self):
        error = UnroutableEndpointError("enclosed", endpoint="target", point=(5, 5),
                                        search_radius=32, edge_id="e1")
        assert isinstance(error, RoutingError)
        assert error.error_code == "UNROUTABLE_ENDPOINT"
        data = error.to_dict()
        assert data["type"] == "UnroutableEndpointError"
        assert data["edge_id"] == "e1"
        assert data["message"] == "enclosed"

    def test_details_are_copied(self):
        details = {"bounds": (0, 0, 1, 1)}
        error = SmartEdgeException("bad", details=details)
        details.clear()
        assert error.to_dict()["details"] == {"bounds": (0, 0, 1, 1)}
