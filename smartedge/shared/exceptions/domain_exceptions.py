"""Domain-specific exceptions."""
from .base_exceptions import SmartEdgeException, ValidationError, RoutingError


class InvalidGeometryError(ValidationError):
    """Exception raised for degenerate or inconsistent geometry.
    
    Covers zero-size canvases, inverted rectangles, non-positive grid
    ratios and endpoints lying outside the canvas.
    """
    
    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', 'INVALID_GEOMETRY')
        super().__init__(message, **kwargs)


class UnroutableEndpointError(RoutingError):
    """Exception raised when an endpoint cannot escape the obstacle it sits in."""
    
    def __init__(self, message: str, endpoint: str = None, point: tuple = None,
                 search_radius: int = None, **kwargs):
        """Initialize unroutable endpoint error.
        
        Args:
            message: Error message
            endpoint: Which endpoint failed ("source" or "target")
            point: Canvas coordinates of the endpoint
            search_radius: Number of cells searched before giving up
        """
        kwargs.setdefault('error_code', 'UNROUTABLE_ENDPOINT')
        super().__init__(message, **kwargs)
        self.endpoint = endpoint
        self.point = point
        self.search_radius = search_radius


class GridError(SmartEdgeException):
    """Exception raised for occupancy grid errors."""
    
    def __init__(self, message: str, grid_shape: tuple = None, **kwargs):
        """Initialize grid error.
        
        Args:
            message: Error message
            grid_shape: (rows, cols) of the grid that caused the error
        """
        super().__init__(message, **kwargs)
        self.grid_shape = grid_shape


class SceneLoadError(SmartEdgeException):
    """Exception raised when scene loading fails."""
    
    def __init__(self, message: str, file_path: str = None, **kwargs):
        """Initialize scene load error.
        
        Args:
            message: Error message
            file_path: Path to scene file that failed to load
        """
        super().__init__(message, **kwargs)
        self.file_path = file_path
