"""Shared exceptions for SmartEdge."""
from .base_exceptions import (
    SmartEdgeException, ConfigurationError, ValidationError, RoutingError
)
from .domain_exceptions import (
    InvalidGeometryError, UnroutableEndpointError, GridError, SceneLoadError
)

__all__ = [
    'SmartEdgeException', 'ConfigurationError', 'ValidationError', 'RoutingError',
    'InvalidGeometryError', 'UnroutableEndpointError', 'GridError', 'SceneLoadError'
]
