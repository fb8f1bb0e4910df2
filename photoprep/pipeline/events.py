"""EventBus: synchronous broadcast of pipeline lifecycle events."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    JOB_STARTED = "job_started"
    STAGE_CHANGED = "stage_changed"
    JOB_COMPLETED = "job_completed"
    JOB_FAILED = "job_failed"


@dataclass
class Event:
    type: EventType
    job_id: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_json(self) -> str:
        return json.dumps({
            "type": self.type.value,
            "job_id": self.job_id,
            "data": self.data,
            "timestamp": self.timestamp,
        })


# Subscriber = callable that receives an Event
Subscriber = Callable[[Event], None]


class EventBus:
    """Simple pub/sub bus. Subscribers receive all events.

    Pipelines run on worker threads, so the subscriber list is guarded by
    a thread lock; callbacks run on the emitting thread.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers = [s for s in self._subscribers if s != callback]

    def emit(self, event: Event) -> None:
        with self._lock:
            subs = list(self._subscribers)
        for sub in subs:
            try:
                sub(event)
            except Exception:
                logger.exception("EventBus subscriber error")


# Singleton
event_bus = EventBus()
