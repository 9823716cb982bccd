"""Base exceptions for SmartEdge.

Every error carries a human-readable message, an optional machine-readable
``error_code`` and a ``details`` dict, and can be reported as JSON through
:meth:`SmartEdgeException.to_dict`.
"""
from typing import Any, Dict, Optional


class SmartEdgeException(Exception):
    """Root of all SmartEdge errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly description of the error."""
        data = {
            "type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            data["details"] = self.details
        return data


class ConfigurationError(SmartEdgeException):
    """Invalid routing options or an unusable configuration file."""
    pass


class ValidationError(SmartEdgeException):
    """An input value failed validation.

    ``field`` names the offending input and ``value`` holds what was given.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class RoutingError(SmartEdgeException):
    """Routing of one edge could not be carried out.

    ``edge_id`` is filled in by the router when the error passes through it.
    """

    def __init__(self, message: str, edge_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.edge_id = edge_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["edge_id"] = self.edge_id
        return data
