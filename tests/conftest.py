"""Test configuration and fixtures for SmartEdge."""
import logging

import numpy as np
import pytest

from smartedge.algorithms.base.grid import OccupancyGrid
from smartedge.domain.models.geometry import CanvasPoint, NodeGeometry, Side
from smartedge.domain.services.routing_engine import SmartEdgeRouter
from smartedge.shared.configuration.settings import SmartEdgeOptions


@pytest.fixture
def options():
    """Default routing options: grid ratio 10, padding 10."""
    return SmartEdgeOptions()


@pytest.fixture
def router(options):
    return SmartEdgeRouter(options)


@pytest.fixture
def make_grid():
    """Factory for small occupancy grids with origin (0, 0) and ratio 1.
    
    ``blocked`` is an iterable of (col, row) pairs.
    """
    def _make(cols, rows, blocked=()):
        flags = np.zeros((rows, cols), dtype=bool)
        for col, row in blocked:
            flags[row, col] = True
        return OccupancyGrid(flags, 0.0, 0.0, 1.0)
    return _make


@pytest.fixture
def side_by_side_scene():
    """Two 100x100 nodes with a clear horizontal gap between facing sides."""
    nodes = [
        NodeGeometry(0, 0, 100, 100, id="a"),
        NodeGeometry(200, 0, 100, 100, id="b"),
    ]
    source = CanvasPoint(100, 50, Side.RIGHT)
    target = CanvasPoint(200, 50, Side.LEFT)
    return nodes, source, target


@pytest.fixture
def blocked_scene():
    """Source and target nodes with a third node directly between them."""
    nodes = [
        NodeGeometry(0, 0, 100, 100, id="a"),
        NodeGeometry(200, 0, 100, 100, id="blocker"),
        NodeGeometry(400, 0, 100, 100, id="b"),
    ]
    source = CanvasPoint(100, 50, Side.RIGHT)
    target = CanvasPoint(400, 50, Side.LEFT)
    return nodes, source, target


@pytest.fixture
def enclosed_scene():
    """Target inside a ring of walls with no gap; source outside the ring."""
    nodes = [
        NodeGeometry(0, 0, 300, 20, id="top"),
        NodeGeometry(0, 280, 300, 20, id="bottom"),
        NodeGeometry(0, 0, 20, 300, id="left"),
        NodeGeometry(280, 0, 20, 300, id="right"),
        NodeGeometry(400, 130, 40, 40, id="source"),
    ]
    source = CanvasPoint(400, 150, Side.LEFT)
    target = CanvasPoint(150, 150)
    return nodes, source, target


@pytest.fixture
def restore_logging():
    """Undo changes setup_logging makes to the package logger."""
    package_logger = logging.getLogger("smartedge")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
