"""
Notification Hub -- UIL Console

Operator-facing notifications. A notification is routed to every registered
sink (a callable taking the ``Notification``); the hub records the per-sink
outcome and keeps a bounded in-memory history.

Sinks:
    log       built in, writes through the ``notifications`` logger
    anything  ``hub.add_sink("stdout", print_notification)``

Usage:
    from uil_console.notifications import NotificationHub

    hub = NotificationHub()
    hub.success("Actions executed", "Coordinated actions sent for user_001")
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from uil_console.config import MAX_NOTIFICATION_HISTORY

logger = logging.getLogger("notifications")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Severity(str, Enum):
    """Notification severity levels, ordered from lowest to highest."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    CRITICAL = "critical"


SEVERITY_RANK: Dict[str, int] = {
    "info": 0,
    "success": 0,
    "warning": 1,
    "critical": 2,
}

# Prefixes for plain-text sinks
SEVERITY_PREFIX: Dict[str, str] = {
    "info": "[i]",
    "success": "[OK]",
    "warning": "[!]",
    "critical": "[!!!]",
}

_LOG_LEVELS: Dict[str, int] = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "critical": logging.ERROR,
}


@dataclass
class Notification:
    """A single notification record with delivery tracking."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    message: str = ""
    severity: str = "info"
    source: str = ""
    entity_id: Optional[str] = None
    data: dict = field(default_factory=dict)
    created_at: str = field(default_factory=_now_iso)
    delivered_to: List[str] = field(default_factory=list)
    delivery_status: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    def format_text(self) -> str:
        prefix = SEVERITY_PREFIX.get(self.severity, "[?]")
        return f"{prefix} {self.title}: {self.message}"


Sink = Callable[[Notification], Any]


def log_sink(notification: Notification) -> None:
    logger.log(
        _LOG_LEVELS.get(notification.severity, logging.INFO),
        notification.format_text(),
    )


def print_notification(notification: Notification) -> None:
    print(notification.format_text())


class NotificationHub:
    """Routes notifications to sinks and remembers what was sent."""

    def __init__(
        self,
        sinks: Optional[Dict[str, Sink]] = None,
        max_history: int = MAX_NOTIFICATION_HISTORY,
    ) -> None:
        self._sinks: Dict[str, Sink] = dict(sinks) if sinks is not None else {"log": log_sink}
        self._history: List[Notification] = []
        self.max_history = max_history

    # -- Sinks --------------------------------------------------------------

    def add_sink(self, name: str, sink: Sink) -> None:
        self._sinks[name] = sink

    def remove_sink(self, name: str) -> bool:
        return self._sinks.pop(name, None) is not None

    @property
    def sinks(self) -> List[str]:
        return list(self._sinks)

    # -- Sending ------------------------------------------------------------

    def send(
        self,
        title: str,
        message: str,
        severity: str = "info",
        source: Optional[str] = None,
        entity_id: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> Notification:
        """Deliver a notification to every sink and record it in history."""
        notification = Notification(
            title=title,
            message=message,
            severity=Severity(severity).value,
            source=source or "",
            entity_id=entity_id,
            data=data or {},
        )

        for name, sink in list(self._sinks.items()):
            try:
                sink(notification)
            except Exception as exc:
                logger.error("Delivery to %s failed: %s", name, exc)
                notification.delivery_status[name] = "failed"
            else:
                notification.delivery_status[name] = "sent"
                notification.delivered_to.append(name)

        self._history.append(notification)
        if len(self._history) > self.max_history:
            del self._history[: len(self._history) - self.max_history]
        return notification

    def info(self, title: str, message: str, **kwargs: Any) -> Notification:
        return self.send(title, message, severity="info", **kwargs)

    def success(self, title: str, message: str, **kwargs: Any) -> Notification:
        return self.send(title, message, severity="success", **kwargs)

    def warning(self, title: str, message: str, **kwargs: Any) -> Notification:
        return self.send(title, message, severity="warning", **kwargs)

    def critical(self, title: str, message: str, **kwargs: Any) -> Notification:
        return self.send(title, message, severity="critical", **kwargs)

    # -- History ------------------------------------------------------------

    def get_history(self, limit: int = 50, min_severity: Optional[str] = None) -> List[Notification]:
        """Most recent notifications first, optionally filtered by minimum severity."""
        items = list(reversed(self._history))
        if min_severity is not None:
            floor = SEVERITY_RANK[Severity(min_severity).value]
            items = [n for n in items if SEVERITY_RANK.get(n.severity, 0) >= floor]
        return items[:limit]

    def clear_history(self) -> int:
        count = len(self._history)
        self._history.clear()
        return count
