# src/pdasim/core/logging.py
"""Logging setup for pdasim.

structlog loggers and plain logging.getLogger() loggers share one
stderr handler whose ProcessorFormatter renders every record the same
way (console text or JSON lines). stdout stays free for command results.

Engine events carry their context as keyword fields (pda, position,
token, state, stack_symbols, ...). structlog treats `stack` and
`exception` as rendered traceback text, so events never use those keys.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from pdasim.core.config import LoggingSettings


def _pre_chain() -> list[Any]:
    """Processors every record passes through before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=False),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Install the pdasim handler on the root logger.

    Calling this again replaces the previous handler, so the last call wins.

    Args:
        json_output: Render JSON lines instead of console text.
        level: Root level name (DEBUG, INFO, WARNING, ERROR).
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure between cases
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_render_chain(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper()))


def configure_from_settings(
    settings: LoggingSettings,
    *,
    verbose: bool = False,
    json_logs: bool = False,
) -> None:
    """Configure logging from a settings file, letting command-line flags win.

    verbose forces DEBUG and json_logs forces JSON output; without them
    the settings decide.
    """
    configure_logging(
        json_output=json_logs or settings.json_output,
        level="DEBUG" if verbose else settings.level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
