"""Log entry models for James OS.

Pydantic models for activity log entries, derived session summaries,
and aggregate store statistics.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LogLevel(str, Enum):
    """Severity / kind tag of a log entry."""

    INFO = "info"
    WORKING = "working"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"
    LLM_REQUEST = "llm-request"
    LLM_RESPONSE = "llm-response"
    TOOL_CALL = "tool-call"
    FILE_OP = "file-op"


class LogCategory(str, Enum):
    """Area of activity a log entry belongs to."""

    SYSTEM = "system"
    TASK = "task"
    FILE = "file"
    COMMAND = "command"
    API = "api"
    BUILD = "build"
    LLM = "llm"
    USER_REQUEST = "user-request"
    TOOL = "tool"
    RESPONSE = "response"


def generate_log_id() -> str:
    """Generate a unique log entry ID."""
    return str(uuid.uuid4())


def generate_session_id() -> str:
    """Generate a session grouping key (``sess_`` + 12 hex chars)."""
    return f"sess_{uuid.uuid4().hex[:12]}"


def utc_now_iso() -> str:
    """Current time as an ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO 8601 timestamp for ordering.

    Accepts a trailing ``Z``. Unparseable or missing values sort oldest.
    """
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class LogEntry(BaseModel):
    """One recorded unit of activity.

    Entries are immutable once created. Field names serialize as camelCase
    (``sessionId``, ``parentId``) to match the dashboard API. Extra fields
    supplied by the caller are kept as-is.

    Attributes:
        id: Unique identifier, assigned by the store.
        session_id: Grouping key; children share their parent's value.
        parent_id: ID of the parent entry, None for top-level entries.
        timestamp: ISO 8601 creation time, assigned by the store.
        level: Entry level (unknown values become ``info``).
        category: Entry category (unknown values become ``system``).
        message: Human-readable description.
        details: Optional longer elaboration.
        metadata: Optional string-to-string context.
        duration: Optional elapsed time annotation.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: str = Field(default_factory=generate_log_id)
    session_id: str = Field(default_factory=generate_session_id)
    parent_id: str | None = None
    timestamp: str = Field(default_factory=utc_now_iso)
    level: LogLevel = LogLevel.INFO
    category: LogCategory = LogCategory.SYSTEM
    message: str = Field(..., min_length=1)
    details: str | None = None
    metadata: dict[str, str] | None = None
    duration: float | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if isinstance(value, LogLevel):
            return value
        try:
            return LogLevel(value)
        except ValueError:
            return LogLevel.INFO

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, LogCategory):
            return value
        try:
            return LogCategory(value)
        except ValueError:
            return LogCategory.SYSTEM

    @property
    def is_top_level(self) -> bool:
        """Whether this entry has no parent."""
        return not self.parent_id

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON wire form.

        Optional fields the caller never supplied are omitted.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data["id"] = self.id
        data["sessionId"] = self.session_id
        data["parentId"] = self.parent_id
        data["timestamp"] = self.timestamp
        data["level"] = self.level.value
        data["category"] = self.category.value
        return data


class SessionSummary(BaseModel):
    """Derived, read-only view of all entries sharing a session ID.

    Attributes:
        session_id: The session grouping key.
        created_at: Earliest entry timestamp in the session.
        last_activity_at: Latest entry timestamp in the session.
        log_count: Number of entries in the session.
        summary: Message of the session's first top-level entry, else its first entry.
        top_level_id: ID of that top-level entry, None if the session has none.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    created_at: str
    last_activity_at: str
    log_count: int = 0
    summary: str = "No summary"
    top_level_id: str | None = None


class LogStats(BaseModel):
    """Aggregate statistics for the log store.

    Attributes:
        total_logs: Number of stored entries.
        total_sessions: Number of distinct non-empty session IDs.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_logs: int = 0
    total_sessions: int = 0
