"""Services for James OS."""

from src.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)
from src.services.event_bus import Event, EventBus
from src.services.log_sender import LogSender, SendResult
from src.services.log_store import (
    FileLogStore,
    LogStore,
    LogStoreError,
    NotFoundError,
    StorageError,
    ValidationError,
    create_log_store,
)

__all__ = [
    "ConfigService",
    "Event",
    "EventBus",
    "FileLogStore",
    "LogSender",
    "LogStore",
    "LogStoreError",
    "NotFoundError",
    "SendResult",
    "StorageError",
    "ValidationError",
    "create_log_store",
    "get_config_service",
    "reset_config_service",
]
