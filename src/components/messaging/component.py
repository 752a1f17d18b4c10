"""
Messaging component - direct messages and the unread badge poller.

The poller owns one integer. Each successful poll replaces it as a whole
value; a failed poll leaves the previous value in place.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from src.adapters.http.errors import ApiError
from src.domain.entities import UnreadSummary

from .models import ComposeInput
from .ports import MessagingClientPort

logger = logging.getLogger(__name__)


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class MessageService:
    def __init__(self, client: MessagingClientPort) -> None:
        self.client = client

    def users(self) -> list[dict[str, Any]]:
        return _unwrap(self.client.get("/messages/users")) or []

    def conversation(self, user_id: str) -> list[dict[str, Any]]:
        return _unwrap(self.client.get(f"/messages/conversation/{user_id}")) or []

    def send(
        self,
        receiver_id: str,
        subject: str,
        content: str,
        priority: str = "normal",
    ) -> Any:
        message = ComposeInput(receiver_id, subject, content, priority)
        error = message.validate()
        if error:
            raise ValueError(error)
        return self.client.post("/messages/send", message.to_payload())

    def unread(self) -> UnreadSummary:
        return UnreadSummary.model_validate(_unwrap(self.client.get("/messages/unread")) or {})

    def mark_read(self, message_id: str) -> Any:
        return self.client.put(f"/messages/read/{message_id}")


class UnreadPoller:
    """
    Background unread-count poller.

    Runs a daemon thread that fetches the unread summary every
    ``interval_seconds`` and reports count changes through ``on_change``.
    """

    def __init__(
        self,
        fetch: Callable[[], UnreadSummary],
        interval_seconds: float = 30.0,
        on_change: Callable[[int], None] | None = None,
    ) -> None:
        self._fetch = fetch
        self._interval = interval_seconds
        self._on_change = on_change
        self._count = 0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_running(self) -> bool:
        return self._running

    def poll_once(self) -> int:
        try:
            summary = self._fetch()
        except (ApiError, ValidationError) as e:
            logger.error(f"Error fetching unread count: {e}")
            return self._count

        with self._lock:
            changed = summary.count != self._count
            self._count = summary.count

        if changed and self._on_change:
            try:
                self._on_change(summary.count)
            except Exception as e:
                logger.error(f"Unread listener failed: {e}")
        return summary.count

    def start(self) -> None:
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        self._running = True
        logger.info("Unread poller started (interval: %.1fs)", self._interval)

    def stop(self) -> None:
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Unread poller stopped")

    def _poll_loop(self) -> None:
        self.poll_once()
        while not self._stop_event.wait(timeout=self._interval):
            self.poll_once()
