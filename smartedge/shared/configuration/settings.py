"""Settings dataclasses for SmartEdge."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ..exceptions import ConfigurationError, ValidationError
from ..utils.validation_utils import validate_positive_number, validate_non_negative_number

SMOOTHING_MODES = ("compress", "line_of_sight")


@dataclass(frozen=True)
class SmartEdgeOptions:
    """Routing options, read-only for the duration of a routing call."""
    
    # Grid
    grid_ratio: float = 10.0          # canvas units per grid cell
    node_padding: float = 10.0        # clearance added around every node
    max_grid_cells: int = 4_000_000   # refuse to allocate grids above this
    
    # Host-side recompute throttle in milliseconds, never read by the router
    debounce_time: float = 200.0
    
    # Search
    max_nudge_radius: int = 32        # cells searched to free a blocked endpoint
    diagonal: bool = False            # 8-connected search when True
    smoothing: str = "compress"       # "compress" or "line_of_sight"
    
    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ConfigurationError(
                "Invalid routing options: " + "; ".join(errors),
                error_code="INVALID_OPTIONS",
                details={'errors': errors}
            )
    
    def validate(self) -> List[str]:
        """Return a list of problems with these options (empty when valid)."""
        errors = []
        checks = [
            (validate_positive_number, self.grid_ratio, "grid_ratio"),
            (validate_positive_number, self.max_grid_cells, "max_grid_cells"),
            (validate_positive_number, self.max_nudge_radius, "max_nudge_radius"),
            (validate_non_negative_number, self.debounce_time, "debounce_time"),
        ]
        for check, value, name in checks:
            try:
                check(value, name)
            except ValidationError as e:
                errors.append(str(e))
        
        if isinstance(self.node_padding, bool) or not isinstance(self.node_padding, (int, float)):
            errors.append(f"node_padding must be numeric, got {type(self.node_padding)}")
        if not isinstance(self.max_nudge_radius, int):
            errors.append(f"max_nudge_radius must be an integer, got {self.max_nudge_radius!r}")
        if self.smoothing not in SMOOTHING_MODES:
            errors.append(f"smoothing must be one of {SMOOTHING_MODES}, got {self.smoothing!r}")
        return errors


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = "INFO"
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    console_output: bool = True
    file_output: bool = False
    log_file: str = "logs/smartedge.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    component_levels: Dict[str, str] = field(default_factory=dict)
    
    def validate(self) -> List[str]:
        errors = []
        for name, level in [("level", self.level), *self.component_levels.items()]:
            if not isinstance(logging.getLevelName(str(level).upper()), int):
                errors.append(f"Unknown log level for {name}: {level}")
        if self.max_file_size_mb <= 0:
            errors.append("max_file_size_mb must be positive")
        if self.backup_count < 0:
            errors.append("backup_count must be non-negative")
        return errors


@dataclass
class ApplicationSettings:
    """Top-level settings container."""
    routing: SmartEdgeOptions = field(default_factory=SmartEdgeOptions)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    version: str = "1.0.0"
    config_version: int = 1
    
    def validate(self) -> Dict[str, List[str]]:
        """Validate every settings category."""
        return {
            'routing': self.routing.validate(),
            'logging': self.logging.validate(),
        }
