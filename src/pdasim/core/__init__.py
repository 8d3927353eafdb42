"""Core infrastructure: transition tables, settings, logging."""

from pdasim.core.config import EngineSettings, LoggingSettings, PdaSettings, load_settings
from pdasim.core.logging import configure_logging, get_logger
from pdasim.core.table import TransitionRule, TransitionTable, load_table_file

__all__ = [
    "EngineSettings",
    "LoggingSettings",
    "PdaSettings",
    "TransitionRule",
    "TransitionTable",
    "configure_logging",
    "get_logger",
    "load_settings",
    "load_table_file",
]
