"""EventBus for pushing log store changes to dashboard clients over SSE.

Events: log_created, log_deleted, logs_cleared
"""

import contextlib
import json
import logging
import queue
import threading
from collections.abc import Generator
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """A log store change to be broadcast via SSE."""

    event_type: str
    data: dict
    timestamp: datetime = field(default_factory=datetime.now)
    id: str | None = None

    def to_sse(self) -> str:
        """Format the event as an SSE message.

        SSE format:
        event: <event_type>
        data: <json_data>
        id: <optional_id>

        """
        lines = [f"event: {self.event_type}", f"data: {json.dumps(self.data, default=str)}"]
        if self.id:
            lines.append(f"id: {self.id}")
        return "\n".join(lines) + "\n\n"


class EventBus:
    """Fan-out of store events to connected SSE clients.

    Recent events are buffered so a dashboard that reconnects can catch up.
    """

    def __init__(self, buffer_size: int = 100, client_queue_size: int = 100):
        """Initialize the EventBus.

        Args:
            buffer_size: Number of recent events replayed to new SSE clients.
            client_queue_size: Pending events per SSE client before it is dropped.
        """
        self._buffer_size = buffer_size
        self._client_queue_size = client_queue_size
        self._buffer: list[Event] = []
        self._client_queues: list[queue.Queue] = []
        self._lock = threading.Lock()
        self._counter = 0

    def emit(self, event_type: str, data: dict) -> Event:
        """Publish an event to connected SSE clients.

        Args:
            event_type: The type of event (e.g., "log_created").
            data: JSON-serializable payload.

        Returns:
            The created Event.
        """
        with self._lock:
            self._counter += 1
            event = Event(event_type=event_type, data=data, id=str(self._counter))

            if self._buffer_size > 0:
                self._buffer.append(event)
                del self._buffer[: -self._buffer_size]

            stale = []
            for client in self._client_queues:
                try:
                    client.put_nowait(event)
                except queue.Full:
                    stale.append(client)
            for client in stale:
                self._client_queues.remove(client)
                logger.debug("Dropped SSE client with a full queue")

        return event

    def get_sse_stream(
        self,
        include_buffer: bool = True,
        timeout: float = 30.0,
    ) -> Generator[str, None, None]:
        """Yield SSE-formatted events as they occur.

        Args:
            include_buffer: Whether to replay buffered events first.
            timeout: Seconds to wait for an event before sending a keep-alive.

        Yields:
            SSE-formatted event strings.
        """
        client: queue.Queue = queue.Queue(maxsize=self._client_queue_size)

        with self._lock:
            self._client_queues.append(client)
            backlog = list(self._buffer) if include_buffer else []

        try:
            for event in backlog:
                yield event.to_sse()
            while True:
                try:
                    event = client.get(timeout=timeout)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                yield event.to_sse()
        finally:
            with self._lock, contextlib.suppress(ValueError):
                self._client_queues.remove(client)

    def get_buffered_events(self, event_type: str | None = None) -> list[Event]:
        """Return buffered events, optionally only those of one type."""
        with self._lock:
            events = list(self._buffer)
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    @property
    def subscriber_count(self) -> int:
        """Number of connected SSE clients."""
        with self._lock:
            return len(self._client_queues)
