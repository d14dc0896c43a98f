"""
Structured logging setup for the command line entry point.

Library modules only call ``structlog.get_logger()``; nothing is configured
until a host (the CLI, a test session) does it.
"""

import logging
import sys
from typing import Any, List

import structlog
from structlog.stdlib import LoggerFactory

PACKAGE_LOGGER = "evm_stepper"


def build_processors(json_logs: bool = False) -> List[Any]:
    """Processor chain shared by console and JSON output; the renderer is last."""
    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route the package's structlog output to stderr at ``log_level``.

    Only the ``evm_stepper`` logger tree gets a handler, so stdout stays
    free for command output. Does nothing if structlog is already configured.
    """
    if structlog.is_configured():
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    package_logger.propagate = False

    structlog.configure(
        processors=build_processors(json_logs),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
