"""
Centralized logging configuration for the signal hub.

This module provides standardized logging configuration using structlog
for the server, the broadcast channel and the listener client. All logging
throughout the system should go through this configuration so that
connection and signal events share one structured format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
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
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

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


def get_channel_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for the server-side broadcast channel.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for registry and broadcast events
    """
    logger = get_logger(name)

    return logger.bind(subsystem="channel")


def get_client_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for the reconnecting listener client.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for client state machine events
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="client",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    client_name: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a client state transition with standardized format.

    Args:
        logger: Structlog logger instance
        client_name: Identifier the client announces to the server
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        client=client_name,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_delivery_failure(
    logger: FilteringBoundLogger,
    connection_id: str,
    signal_id: Optional[str],
    error: BaseException
) -> None:
    """
    Log an isolated per-connection write failure.

    Args:
        logger: Structlog logger instance
        connection_id: Connection whose write failed
        signal_id: Signal being delivered, if the payload was a signal
        error: The underlying exception
    """
    logger.warning(
        "Delivery to connection failed",
        connection_id=connection_id,
        signal_id=signal_id,
        error=str(error),
        error_type=type(error).__name__,
    )
