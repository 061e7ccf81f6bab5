"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from src.models import (
    AppConfig,
    LogCategory,
    LogEntry,
    LogLevel,
    LogStats,
    LogStoreConfig,
    SessionSummary,
)
from src.models.log_entry import generate_session_id, parse_timestamp


class TestLogEntry:
    """Tests for LogEntry model."""

    def test_accepts_camel_case(self):
        """JSON-style field names populate snake_case attributes."""
        entry = LogEntry.model_validate({"id": "1", "sessionId": "S1", "parentId": "0", "message": "x"})
        assert entry.session_id == "S1"
        assert entry.parent_id == "0"

    def test_defaults(self):
        """Missing fields get generated values and default tags."""
        entry = LogEntry(message="x")
        assert entry.id
        assert entry.session_id.startswith("sess_")
        assert entry.level == LogLevel.INFO
        assert entry.category == LogCategory.SYSTEM
        assert entry.is_top_level

    def test_message_required(self):
        """A message is mandatory."""
        with pytest.raises(ValidationError):
            LogEntry()

    def test_empty_message_rejected(self):
        """An empty message is invalid."""
        with pytest.raises(ValidationError):
            LogEntry(message="")

    def test_frozen(self):
        """Entries cannot be mutated after creation."""
        entry = LogEntry(message="x")
        with pytest.raises(ValidationError):
            entry.message = "y"

    @pytest.mark.parametrize("level", [lv.value for lv in LogLevel])
    def test_known_levels(self, level):
        """Every documented level is accepted as-is."""
        assert LogEntry(message="x", level=level).level.value == level

    def test_unknown_category_defaults(self):
        """Unknown categories become system."""
        assert LogEntry(message="x", category="weird").category == LogCategory.SYSTEM

    def test_to_dict_wire_form(self):
        """to_dict uses camelCase and keeps parentId null."""
        entry = LogEntry(message="x", level="warn", category="file")
        data = entry.to_dict()

        assert data["sessionId"] == entry.session_id
        assert data["parentId"] is None
        assert data["level"] == "warn"
        assert data["category"] == "file"
        assert "session_id" not in data

    def test_to_dict_omits_unsupplied_optionals(self):
        """Optional fields the caller never set are left out."""
        data = LogEntry(message="x").to_dict()
        assert "details" not in data
        assert "metadata" not in data
        assert "duration" not in data

    def test_to_dict_keeps_extras(self):
        """Extra caller fields survive serialization."""
        entry = LogEntry.model_validate({"message": "x", "content": "x", "source": "cli"})
        data = entry.to_dict()
        assert data["content"] == "x"
        assert data["source"] == "cli"


class TestSessionSummary:
    """Tests for SessionSummary model."""

    def test_serializes_camel_case(self):
        """Summaries dump with camelCase keys."""
        summary = SessionSummary(
            session_id="S1",
            created_at="2025-01-26T10:00:00+00:00",
            last_activity_at="2025-01-26T10:05:00+00:00",
            log_count=3,
            summary="Deploy",
            top_level_id="a",
        )
        data = summary.model_dump(by_alias=True)
        assert data["sessionId"] == "S1"
        assert data["logCount"] == 3
        assert data["topLevelId"] == "a"


class TestLogStats:
    """Tests for LogStats model."""

    def test_serializes_camel_case(self):
        """Stats dump with the API's key names."""
        stats = LogStats(total_logs=4, total_sessions=2)
        assert stats.model_dump(by_alias=True) == {"totalLogs": 4, "totalSessions": 2}


class TestHelpers:
    """Tests for ID and timestamp helpers."""

    def test_session_ids_unique(self):
        """Generated session IDs do not collide in practice."""
        ids = {generate_session_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_parse_timestamp_accepts_z_suffix(self):
        """Z and +00:00 parse to the same instant."""
        assert parse_timestamp("2025-01-26T10:00:00Z") == parse_timestamp(
            "2025-01-26T10:00:00+00:00"
        )

    def test_parse_timestamp_invalid_sorts_oldest(self):
        """Garbage timestamps sort before real ones."""
        assert parse_timestamp("garbage") < parse_timestamp("2025-01-26T10:00:00Z")
        assert parse_timestamp(None) < parse_timestamp("2025-01-26T10:00:00Z")


class TestAppConfig:
    """Tests for configuration models."""

    def test_defaults(self):
        """Defaults match a single-node memory deployment."""
        config = AppConfig()
        assert config.port == 5050
        assert config.log_store.backend == "memory"
        assert config.log_store.capacity == 1000
        assert config.events.buffer_size == 100

    def test_invalid_backend(self):
        """Only memory and file backends are valid."""
        with pytest.raises(ValidationError):
            LogStoreConfig(backend="redis")

    def test_invalid_capacity(self):
        """Capacity must be positive."""
        with pytest.raises(ValidationError):
            LogStoreConfig(capacity=0)
