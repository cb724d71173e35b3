"""
Structured logging setup for Skyhop.

Provides JSON logging for production and colored console for development.
Flight context (run id, active phase) is carried through structlog
context variables so every event emitted during a phase is tagged.
"""

import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import Processor


def configure_logging(
    level: str = "INFO",
    run_id: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        run_id: Optional run identifier to include in all log messages.
        json_format: If True, output JSON logs (production mode).
        stream: Output stream, stderr by default so stdout stays free for
            command output.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=numeric_level,
        force=True,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if run_id:
        shared_processors.insert(0, _add_run_id(run_id))

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=stream is None),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _add_run_id(run_id: str) -> Processor:
    """Create processor that adds run_id to all log events."""

    def processor(
        logger: Any,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict["run_id"] = run_id
        return event_dict

    return processor


def bind_phase(phase: str) -> None:
    """Tag subsequent log events with the active flight phase."""
    structlog.contextvars.bind_contextvars(phase=phase)


def clear_phase() -> None:
    """Remove the flight phase tag."""
    structlog.contextvars.unbind_contextvars("phase")


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name. If None, uses the calling module name.

    Returns:
        Bound logger instance.
    """
    return structlog.get_logger(name)
