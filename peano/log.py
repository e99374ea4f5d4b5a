"""
Structured logging setup.

Library modules get their loggers with get_logger(), which wraps a
standard library logger under the "peano" namespace. That namespace
carries a NullHandler, so nothing is emitted until an application
configures logging. The command line calls configure_logging() once at
start-up; output goes to stderr so results on stdout stay clean.
"""

import logging
import sys
from typing import Dict, Optional, TextIO

import structlog

PACKAGE_LOGGER = "peano"

LOG_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())

# Handler installed by the last configure_logging() call
_handler: Optional[logging.Handler] = None


def get_logger(name: str):
    """A structlog logger over the standard library logger called name."""
    return structlog.wrap_logger(logging.getLogger(name))


def parse_level(name: str) -> int:
    """
    Map a level name (case-insensitive) to its numeric value.

    Raises:
        ValueError: For an unknown level name
    """
    try:
        return LOG_LEVELS[name.lower()]
    except KeyError:
        options = ", ".join(LOG_LEVELS)
        raise ValueError(f"Unknown log level: {name!r}. Options: {options}") from None


def configure_logging(level: str = "warning", stream: Optional[TextIO] = None) -> None:
    """
    Send peano log events to a console stream at the given level.

    Calling it again replaces the previous stream and level.

    Args:
        level: Level name, see LOG_LEVELS
        stream: Text sink (default: sys.stderr)

    Raises:
        ValueError: For an unknown level name
    """
    global _handler
    numeric_level = parse_level(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    ))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    _handler = handler
