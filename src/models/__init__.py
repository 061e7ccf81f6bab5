"""Domain models for James OS."""

from src.models.config import AppConfig, EventsConfig, LogStoreConfig
from src.models.log_entry import (
    LogCategory,
    LogEntry,
    LogLevel,
    LogStats,
    SessionSummary,
)

__all__ = [
    # Config
    "AppConfig",
    "EventsConfig",
    "LogStoreConfig",
    # Log entries
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "LogStats",
    "SessionSummary",
]
