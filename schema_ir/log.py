"""
Structured logging setup for schema_ir.

Library modules only call ``structlog.get_logger(__name__)``; the CLI calls
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


def _add_component(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor that tags events with the package name."""
    event_dict.setdefault("component", "schema_ir")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used by every renderer."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_component,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(verbose: bool = False, json_output: bool = False) -> None:
    """
    Configure structlog for command line use.

    Args:
        verbose: Emit debug events (fallback decisions, lazy lookups)
        json_output: Render events as JSON lines instead of console text
    """
    level = logging.DEBUG if verbose else logging.WARNING
    renderer: Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*get_shared_processors(), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
