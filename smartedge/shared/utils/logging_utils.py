"""Logging setup for the smartedge package and its command line tool."""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from ..configuration.settings import LoggingSettings

PACKAGE_LOGGER = "smartedge"


def _level(name: str) -> int:
    return getattr(logging, str(name).upper())


def setup_logging(settings: "LoggingSettings", stream: Optional[TextIO] = None) -> List[logging.Handler]:
    """Attach handlers described by ``settings`` to the package logger.

    Only the ``smartedge`` logger is touched, so a host application's root
    configuration is left alone. Handlers installed by an earlier call are
    closed and replaced.

    Args:
        settings: Logging settings configuration
        stream: Console stream, defaults to stderr

    Returns:
        The handlers now attached to the package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = _level(settings.level)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=settings.format_string, datefmt=settings.date_format)
    handlers: List[logging.Handler] = []

    if settings.console_output:
        handlers.append(logging.StreamHandler(stream or sys.stderr))

    if settings.file_output:
        log_path = Path(settings.log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=settings.max_file_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
                encoding='utf-8'
            ))
        except OSError as e:
            package_logger.warning(f"File logging disabled, cannot open {log_path}: {e}")

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    # With our own handlers attached, records must not reach the host's root handlers twice
    package_logger.propagate = not handlers

    for component, component_level in settings.component_levels.items():
        logging.getLogger(component).setLevel(_level(component_level))

    package_logger.debug(f"Logging configured at {settings.level.upper()} "
                         f"with {len(handlers)} handler(s)")
    return handlers


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with ``[key=value ...]``.

    Context entries whose value is None are left out, so an edge without an
    id logs without a prefix.
    """

    def __init__(self, logger: logging.Logger, context: dict):
        super().__init__(logger, {k: v for k, v in context.items() if v is not None})

    def process(self, msg, kwargs):
        if self.extra:
            prefix = " ".join(f"{k}={v}" for k, v in self.extra.items())
            msg = f"[{prefix}] {msg}"
        return msg, kwargs


def get_context_logger(name: str, **context) -> ContextLogger:
    """Get a logger for ``name`` that tags each message with ``context``."""
    return ContextLogger(logging.getLogger(name), context)
