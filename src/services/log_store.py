"""LogStore - the activity log repository behind the dashboard.

Entries are kept as a flat, newest-first list with parent back-references.
No tree is materialized: child lookups and cascading deletes rebuild the
parent/child relation by scanning the list on each call, so inconsistent
data (orphans, cycles) never breaks an operation.

Two backends share the same operations:
- LogStore: the list lives in process memory.
- FileLogStore: the list lives in a JSON file that is re-read and rewritten
  on every operation.
"""

import contextlib
import json
import logging
import threading
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import pydantic

from src.models.log_entry import (
    LogEntry,
    LogStats,
    SessionSummary,
    generate_log_id,
    generate_session_id,
    parse_timestamp,
    utc_now_iso,
)
from src.services.event_bus import EventBus

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000

# Keys the store always controls, whatever the caller sends
RESERVED_FIELDS = frozenset(
    {
        "id",
        "timestamp",
        "sessionId",
        "session_id",
        "parentId",
        "parent_id",
        "message",
        "children",
    }
)

# Keys every persisted record must carry
STORED_KEYS = ("id", "sessionId", "timestamp")


class LogStoreError(Exception):
    """Base class for log store failures."""


class ValidationError(LogStoreError):
    """The submitted entry data is invalid (e.g. no message)."""


class NotFoundError(LogStoreError):
    """No entry exists with the requested ID."""


class StorageError(LogStoreError):
    """The backing storage could not be read or written."""


def _require_mapping(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise ValidationError("log data must be an object")


class LogStore:
    """In-memory log repository.

    All operations run under a single re-entrant lock, so each mutation is
    atomic with respect to the others and readers never see a half-applied
    change. Change events are published before the lock is released, so
    their order matches the order the mutations were applied in.
    """

    storage_kind = "memory"

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        event_bus: EventBus | None = None,
    ):
        """Initialize the store.

        Args:
            capacity: Maximum entries retained; the oldest are evicted beyond it.
            event_bus: Optional bus that receives change events.
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.event_bus = event_bus
        self._lock = threading.RLock()
        self._logs: list[LogEntry] = []

    # =========================================================================
    # Storage hooks
    # =========================================================================

    def _load(self) -> list[LogEntry]:
        """Return the current newest-first entry list."""
        return self._logs

    def _save(self, logs: list[LogEntry]) -> None:
        """Persist the entry list after a mutation."""
        self._logs = logs

    @contextlib.contextmanager
    def _reading(self) -> Iterator[list[LogEntry]]:
        with self._lock:
            yield self._load()

    @contextlib.contextmanager
    def _writing(self) -> Iterator[list[LogEntry]]:
        # Nothing is saved if the block raises.
        with self._lock:
            logs = self._load()
            yield logs
            self._save(logs)

    # =========================================================================
    # Insertion
    # =========================================================================

    def insert(self, data: Mapping[str, Any]) -> LogEntry:
        """Create a new entry at the front of the log.

        When ``parentId`` names an existing entry the new entry joins the
        parent's session and any supplied ``sessionId`` is ignored. An unknown
        parent is kept as-is and the entry is stored as an orphan.

        Args:
            data: Partial entry; ``message`` or ``content`` is required.
                ``sessionId`` and ``parentId`` are honored when present.

        Returns:
            The stored LogEntry.

        Raises:
            ValidationError: If there is no message/content or a field is malformed.
        """
        _require_mapping(data)
        parent_id = data.get("parentId") or data.get("parent_id") or None

        with self._lock:
            with self._writing() as logs:
                parent = self._find(logs, parent_id) if parent_id else None
                if parent is not None:
                    session_id = parent.session_id
                else:
                    session_id = (
                        data.get("sessionId") or data.get("session_id") or generate_session_id()
                    )
                entry = self._build_entry(data, str(session_id), parent_id)
                self._push(logs, entry)
            self._announce(entry)
        return entry

    def insert_child(self, parent_id: str, data: Mapping[str, Any]) -> LogEntry | None:
        """Create an entry nested under an existing one.

        The child always inherits the parent's session ID; any session or
        parent given in ``data`` is ignored.

        Args:
            parent_id: ID of the existing parent entry.
            data: Partial entry; ``message`` or ``content`` is required.

        Returns:
            The stored LogEntry, or None if the parent does not exist.

        Raises:
            ValidationError: If there is no message/content or a field is malformed.
        """
        _require_mapping(data)
        with self._lock:
            try:
                with self._writing() as logs:
                    parent = self._find(logs, parent_id)
                    if parent is None:
                        # Raising out of the block skips the save.
                        raise NotFoundError(f"parent log {parent_id} not found")
                    entry = self._build_entry(data, parent.session_id, parent_id)
                    self._push(logs, entry)
            except NotFoundError:
                return None
            self._announce(entry)
        return entry

    def seed(self, message: str = "Log store initialized") -> LogEntry | None:
        """Insert an initialization entry if the store is empty.

        Returns:
            The new entry, or None if the store already had entries.
        """
        with self._lock:
            if self._load():
                return None
            return self.insert(
                {
                    "level": "info",
                    "category": "system",
                    "message": message,
                    "details": "Logging system ready",
                }
            )

    def _build_entry(
        self,
        data: Mapping[str, Any],
        session_id: str,
        parent_id: str | None,
    ) -> LogEntry:
        """Validate caller data into a fresh, fully stamped entry."""
        message = data.get("message") or data.get("content")
        if not message:
            raise ValidationError("message or content is required")

        fields = {k: v for k, v in data.items() if k not in RESERVED_FIELDS}
        fields.update(
            id=generate_log_id(),
            sessionId=session_id,
            parentId=parent_id,
            timestamp=utc_now_iso(),
            level=data.get("level") or "info",
            category=data.get("category") or "system",
            message=message if isinstance(message, str) else str(message),
        )
        try:
            return LogEntry.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid log entry: {e.errors()[0]['msg']}") from e

    def _push(self, logs: list[LogEntry], entry: LogEntry) -> None:
        """Insert newest-first and evict the oldest entries past capacity.

        Eviction does not cascade: children of an evicted entry stay behind
        as orphans.
        """
        logs.insert(0, entry)
        overflow = len(logs) - self.capacity
        if overflow > 0:
            del logs[self.capacity :]
            logger.debug(f"Evicted {overflow} oldest log entries (capacity {self.capacity})")

    def _announce(self, entry: LogEntry) -> None:
        logger.info(f"[{entry.level.value.upper()}] [{entry.category.value}] {entry.message}")
        if self.event_bus:
            self.event_bus.emit("log_created", {"log": entry.to_dict()})

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, log_id: str) -> LogEntry | None:
        """Get an entry by exact ID."""
        with self._reading() as logs:
            return self._find(logs, log_id)

    def list_all(self) -> list[LogEntry]:
        """All entries, newest first."""
        with self._reading() as logs:
            return list(logs)

    def list_top_level(self) -> list[LogEntry]:
        """Entries without a parent, newest first."""
        with self._reading() as logs:
            return [entry for entry in logs if entry.is_top_level]

    def list_by_session(self, session_id: str) -> list[LogEntry]:
        """Entries at any depth belonging to a session, newest first."""
        with self._reading() as logs:
            return [entry for entry in logs if entry.session_id == session_id]

    def list_by_parent(self, parent_id: str) -> list[LogEntry]:
        """Direct children of an entry, newest first."""
        with self._reading() as logs:
            return [entry for entry in logs if entry.parent_id == parent_id]

    def get_with_children(self, log_id: str) -> tuple[LogEntry, list[LogEntry]]:
        """Get an entry together with its direct children in one read.

        Raises:
            NotFoundError: If no entry has this ID.
        """
        with self._reading() as logs:
            entry = self._find(logs, log_id)
            if entry is None:
                raise NotFoundError(f"log {log_id} not found")
            return entry, [e for e in logs if e.parent_id == log_id]

    def stats(self) -> LogStats:
        """Entry and distinct-session counts."""
        with self._reading() as logs:
            sessions = {entry.session_id for entry in logs if entry.session_id}
            return LogStats(total_logs=len(logs), total_sessions=len(sessions))

    def list_sessions(self) -> list[SessionSummary]:
        """Summaries of every session, most recently started first."""
        with self._reading() as logs:
            snapshot = list(logs)

        grouped: dict[str, list[LogEntry]] = {}
        for entry in snapshot:
            if entry.session_id:
                grouped.setdefault(entry.session_id, []).append(entry)

        summaries = []
        for session_id, entries in grouped.items():
            # Storage order is newest-first; walk oldest-first.
            ordered = sorted(reversed(entries), key=lambda e: parse_timestamp(e.timestamp))
            root = next((e for e in ordered if e.is_top_level), None)
            representative = root or ordered[0]
            summaries.append(
                SessionSummary(
                    session_id=session_id,
                    created_at=ordered[0].timestamp,
                    last_activity_at=ordered[-1].timestamp,
                    log_count=len(entries),
                    summary=representative.message or "No summary",
                    top_level_id=root.id if root else None,
                )
            )

        summaries.sort(key=lambda s: parse_timestamp(s.created_at), reverse=True)
        return summaries

    @staticmethod
    def _find(logs: list[LogEntry], log_id: str) -> LogEntry | None:
        for entry in logs:
            if entry.id == log_id:
                return entry
        return None

    # =========================================================================
    # Deletion
    # =========================================================================

    def delete(self, log_id: str) -> int:
        """Delete an entry and all of its descendants.

        The requested ID always counts toward the result, even when no such
        entry exists, so a return of 1 does not prove anything was removed.
        Use get() first when that distinction matters.

        Args:
            log_id: ID of the subtree root.

        Returns:
            Size of the deleted ID set, including ``log_id`` itself.
        """
        with self._lock:
            with self._writing() as logs:
                doomed = self._collect_subtree(logs, log_id)
                logs[:] = [entry for entry in logs if entry.id not in doomed]

            deleted = len(doomed)
            logger.info(f"Deleted log {log_id} ({deleted} entries including descendants)")
            if self.event_bus:
                self.event_bus.emit("log_deleted", {"id": log_id, "deleted": deleted})
        return deleted

    @staticmethod
    def _collect_subtree(logs: list[LogEntry], root_id: str) -> set[str]:
        """IDs reachable from root_id through parent links.

        Uses an explicit visited set, so cyclic parent chains terminate.
        """
        children: dict[str, list[str]] = {}
        for entry in logs:
            if entry.parent_id:
                children.setdefault(entry.parent_id, []).append(entry.id)

        visited = {root_id}
        pending = [root_id]
        while pending:
            current = pending.pop()
            for child_id in children.get(current, []):
                if child_id not in visited:
                    visited.add(child_id)
                    pending.append(child_id)
        return visited

    def delete_all(self) -> None:
        """Remove every entry."""
        with self._lock:
            with self._writing() as logs:
                cleared = len(logs)
                logs.clear()

            logger.info(f"Cleared all logs ({cleared} entries)")
            if self.event_bus:
                self.event_bus.emit("logs_cleared", {"deleted": cleared})


class FileLogStore(LogStore):
    """Log repository whose canonical state is a JSON file.

    Every operation re-reads the file and every mutation rewrites it whole,
    as one unit under the store lock. Concurrent writers in other processes
    are not supported.
    """

    storage_kind = "file"

    def __init__(
        self,
        path: str | Path,
        capacity: int = DEFAULT_CAPACITY,
        event_bus: EventBus | None = None,
    ):
        """Initialize the store.

        Args:
            path: JSON file holding the newest-first entry array.
            capacity: Maximum entries retained; the oldest are evicted beyond it.
            event_bus: Optional bus that receives change events.
        """
        super().__init__(capacity=capacity, event_bus=event_bus)
        self.path = Path(path)

    def _load(self) -> list[LogEntry]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.warning(f"Log file {self.path} is not valid JSON ({e}), starting empty")
            return []
        except OSError as e:
            raise StorageError(f"could not read {self.path}") from e

        if not isinstance(raw, list):
            logger.warning(f"Log file {self.path} does not hold a JSON array, starting empty")
            return []

        logs = []
        for record in raw:
            if not isinstance(record, dict) or not all(record.get(key) for key in STORED_KEYS):
                logger.warning(f"Skipping log record without an identity in {self.path}")
                continue
            try:
                logs.append(LogEntry.model_validate(record))
            except pydantic.ValidationError as e:
                logger.warning(f"Skipping malformed log record in {self.path}: {e}")
        return logs

    def _save(self, logs: list[LogEntry]) -> None:
        payload = [entry.to_dict() for entry in logs[: self.capacity]]
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"could not write {self.path}") from e


def create_log_store(
    backend: str = "memory",
    capacity: int = DEFAULT_CAPACITY,
    file_path: str | Path = "data/logs.json",
    event_bus: EventBus | None = None,
) -> LogStore:
    """Build the store for a configured backend.

    Args:
        backend: "memory" or "file".
        capacity: Retention bound shared by both backends.
        file_path: JSON file for the file backend.
        event_bus: Optional bus that receives change events.
    """
    if backend == "file":
        return FileLogStore(file_path, capacity=capacity, event_bus=event_bus)
    if backend == "memory":
        return LogStore(capacity=capacity, event_bus=event_bus)
    raise ValueError(f"Unknown log store backend: {backend}")
