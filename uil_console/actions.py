"""
Action dispatcher.

Sends the coordinated cross-platform action command for one entity and tells
the operator how it went. Dispatches are not retried or de-duplicated: two
clicks send two requests. ``in_flight`` lets a renderer disable its trigger
while a request is outstanding.
"""

from __future__ import annotations

import logging
from typing import Optional

from uil_console.api_client import UILClient
from uil_console.errors import ApiResult, ApplicationFailure
from uil_console.notifications import NotificationHub
from uil_console.store import ConsoleStore

logger = logging.getLogger("actions")


class ActionDispatcher:
    """Fires ``execute_actions`` and reports the outcome as a notification."""

    def __init__(self, client: UILClient, store: ConsoleStore, notifier: NotificationHub) -> None:
        self.client = client
        self.store = store
        self.notifier = notifier
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def dispatch(self, entity_id: Optional[str] = None) -> ApiResult:
        """
        Execute coordinated actions for ``entity_id`` (default: current selection).

        No profile needs to have been loaded first. With no id and no
        selection, nothing is sent and a failed result is returned.
        """
        target = entity_id if entity_id is not None else self.store.selected_id
        if target is None:
            logger.warning("Action dispatch requested with no entity selected")
            return ApiResult.failed(ApplicationFailure("No entity selected"))

        self._in_flight += 1
        try:
            result = await self.client.execute_actions(target)
        finally:
            self._in_flight -= 1

        if result:
            count = len(result.data.actions)
            logger.info("Executed %d coordinated action(s) for %s", count, target)
            self.notifier.success(
                "Actions executed",
                f"Coordinated actions executed successfully across all platforms for {target}",
                source="actions",
                entity_id=target,
                data={"actions": count, "message": result.data.message},
            )
        else:
            logger.error("Action execution failed for %s: %s", target, result.error)
            self.notifier.critical(
                "Action execution failed",
                f"Could not execute actions for {target}: {result.error}",
                source="actions",
                entity_id=target,
                data={"failure": result.failure_kind},
            )
        return result
