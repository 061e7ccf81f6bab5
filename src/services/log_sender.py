"""Best-effort client for posting log entries to a running dashboard.

Used by automation hooks and the ``send_log.py`` CLI. The dashboard may not
be running, so network failures are reported as a False result and never
raised.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5050


@dataclass
class SendResult:
    """Outcome of a send attempt.

    Attributes:
        sent: Whether the dashboard accepted the entry (HTTP 200).
        status_code: HTTP status, None if the request never completed.
        log: The stored entry echoed back by the dashboard, if any.
    """

    sent: bool
    status_code: int | None = None
    log: dict[str, Any] | None = None


class LogSender:
    """Posts entries to ``/api/logs`` on a James OS dashboard."""

    def __init__(
        self,
        host: str | None = None,
        port: int | str | None = None,
        timeout: float = 2.0,
    ):
        """Initialize the sender.

        Args:
            host: Dashboard host. Defaults to $HOST, then localhost.
            port: Dashboard port. Defaults to $PORT, then 5050.
            timeout: Request timeout in seconds.
        """
        self.host = host or os.environ.get("HOST") or DEFAULT_HOST
        self.port = int(port or os.environ.get("PORT") or DEFAULT_PORT)
        self.timeout = timeout

    @property
    def url(self) -> str:
        """Endpoint entries are posted to."""
        return f"http://{self.host}:{self.port}/api/logs"

    def send(
        self,
        level: str,
        category: str,
        message: str,
        details: str | None = None,
        **extra: Any,
    ) -> SendResult:
        """Send one entry.

        Args:
            level: Entry level (e.g. "info", "tool-call").
            category: Entry category (e.g. "system", "build").
            message: Entry message.
            details: Optional elaboration.
            **extra: Additional fields (sessionId, parentId, metadata, ...).

        Returns:
            SendResult; ``sent`` is False on any network error.
        """
        payload: dict[str, Any] = {"level": level, "category": category, "message": message}
        if details:
            payload["details"] = details
        payload.update({k: v for k, v in extra.items() if v is not None})

        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"Dashboard unreachable at {self.url}: {e}")
            return SendResult(sent=False)

        if response.status_code != 200:
            return SendResult(sent=False, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = {}
        log = body.get("log") if isinstance(body, dict) else None
        return SendResult(sent=True, status_code=200, log=log)
