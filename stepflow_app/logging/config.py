"""
Centralized logging configuration for the StepFlow app.

This module provides standardized logging configuration using structlog
for all components. The flow engine, the persistence gateway and the
screen presenters all log through loggers obtained here so stage
transitions and storage failures share one structured format.
"""
import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
        stream: Output stream for log records (defaults to stdout). The
            console presenter owns stdout, so interactive runs pass stderr.
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=stream or sys.stdout,
        format="%(message)s",  # structlog will handle formatting
        force=True
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_stage_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for flow stage transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the flow engine
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="flow_engine",
        audit_trail=True
    )


def get_persistence_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound to the persistence subsystem."""
    return get_logger(name).bind(subsystem="persistence")


def log_stage_transition(
    logger: FilteringBoundLogger,
    from_stage: str,
    to_stage: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a stage transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_stage: Stage that just finished
        to_stage: Stage the engine moves to
        trigger: Event reported by the finished stage
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_stage=from_stage,
        to_stage=to_stage,
        trigger=trigger,
        event_type="stage_transition"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Stage transition")
