"""Validation utilities for SmartEdge."""
import math
from typing import Tuple, Any

from ..exceptions import ValidationError, InvalidGeometryError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(x: float, y: float, bounds: Tuple[float, float, float, float] = None,
                         name: str = "point") -> None:
    """Validate coordinate values.
    
    Args:
        x: X coordinate
        y: Y coordinate  
        bounds: Optional inclusive bounds as (x_min, y_min, x_max, y_max)
        name: Name of the point for error reporting
        
    Raises:
        InvalidGeometryError: If coordinates are not finite numbers or lie
            outside the bounds
    """
    for axis, value in (("x", x), ("y", y)):
        if not _is_number(value) or not math.isfinite(value):
            raise InvalidGeometryError(
                f"{name} {axis} coordinate must be a finite number, got {value!r}",
                field=f"{name}.{axis}", value=value
            )
    
    if bounds:
        x_min, y_min, x_max, y_max = bounds
        
        if x < x_min or x > x_max:
            raise InvalidGeometryError(
                f"{name} x coordinate {x} out of canvas bounds [{x_min}, {x_max}]",
                field=f"{name}.x", value=x
            )
        
        if y < y_min or y > y_max:
            raise InvalidGeometryError(
                f"{name} y coordinate {y} out of canvas bounds [{y_min}, {y_max}]",
                field=f"{name}.y", value=y
            )


def validate_grid_ratio(grid_ratio: Any) -> None:
    """Validate a grid ratio (canvas units per grid cell).
    
    Raises:
        InvalidGeometryError: If the ratio is not a positive finite number
    """
    if not _is_number(grid_ratio) or not math.isfinite(grid_ratio) or grid_ratio <= 0:
        raise InvalidGeometryError(
            f"grid_ratio must be a positive number, got {grid_ratio!r}",
            field="grid_ratio", value=grid_ratio
        )


def validate_positive_number(value: Any, field_name: str) -> None:
    """Validate that a value is a positive number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not a positive number
    """
    if not _is_number(value):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )
    
    if value <= 0:
        raise ValidationError(
            f"{field_name} must be positive, got {value}",
            field=field_name, value=value
        )


def validate_non_negative_number(value: Any, field_name: str) -> None:
    """Validate that a value is a non-negative number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not non-negative
    """
    if not _is_number(value):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )
    
    if value < 0:
        raise ValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name, value=value
        )
