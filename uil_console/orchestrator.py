"""
Fetch Orchestrator
==================

Keeps the store's profile and insights in step with the current selection.

Every selection change issues ``get_profile`` and ``get_insights`` concurrently,
tagged with a fencing token: the selected id plus a generation number. A
response is written to the store only if its token is still current when it
arrives, so a slow answer for an earlier selection can never overwrite a later
one. Nothing is cancelled; stale responses are dropped on arrival.

``loading`` goes true when a pair is issued and false once both requests of
the latest pair have settled, whether they succeeded or not.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set

from uil_console.api_client import UILClient
from uil_console.errors import ApiResult, NetworkFailure, UILError
from uil_console.store import ConsoleStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("orchestrator")
logger.setLevel(logging.INFO)

if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter(
        "[%(asctime)s] %(name)s %(levelname)s: %(message)s", datefmt="%H:%M:%S",
    ))
    logger.addHandler(_h)

# Called as listener(operation, entity_id, failed_result)
FailureListener = Callable[[str, str, ApiResult], None]


@dataclass(frozen=True)
class FetchToken:
    """Selection id and issue generation captured when a pair is sent."""
    entity_id: str
    generation: int


class FetchOrchestrator:
    """Re-fetches profile and insights whenever the selection changes."""

    def __init__(
        self,
        client: UILClient,
        store: ConsoleStore,
        failure_listener: Optional[FailureListener] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.failure_listener = failure_listener
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def is_current(self, token: FetchToken) -> bool:
        return (
            token.generation == self._generation
            and token.entity_id == self.store.selected_id
        )

    def on_selection(self, entity_id: str) -> asyncio.Task:
        """
        Issue the profile/insights pair for ``entity_id``.

        Must be called from inside a running event loop. Returns the task
        driving the pair.
        """
        self._generation += 1
        token = FetchToken(entity_id=entity_id, generation=self._generation)
        self.store.set_loading(True)
        logger.debug("Issuing fetch pair for %s (generation %d)", entity_id, token.generation)

        task = asyncio.ensure_future(self._fetch_pair(token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding fetch pair to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # -- Internals ----------------------------------------------------------

    async def _fetch_pair(self, token: FetchToken) -> None:
        try:
            await asyncio.gather(
                self._fetch_slice(token, "get_profile", self.client.get_profile, self._commit_profile),
                self._fetch_slice(token, "get_insights", self.client.get_insights, self._commit_insights),
            )
        finally:
            if token.generation == self._generation:
                self.store.set_loading(False)

    async def _fetch_slice(
        self,
        token: FetchToken,
        operation: str,
        fetch: Callable[[str], Awaitable[ApiResult]],
        commit: Callable[[FetchToken, ApiResult], None],
    ) -> None:
        try:
            result = await fetch(token.entity_id)
        except UILError as exc:
            result = ApiResult.failed(exc)
        except Exception as exc:
            logger.error(
                "%s for %s raised %s: %s",
                operation, token.entity_id, type(exc).__name__, exc,
            )
            result = ApiResult.failed(NetworkFailure(f"{operation} raised {type(exc).__name__}: {exc}"))

        if not self.is_current(token):
            logger.debug(
                "Discarding %s response for superseded selection %s (generation %d)",
                operation, token.entity_id, token.generation,
            )
            return

        if not result:
            self._report_failure(operation, token.entity_id, result)
            return

        commit(token, result)

    def _commit_profile(self, token: FetchToken, result: ApiResult) -> None:
        self.store.commit_profile(token.entity_id, result.data)

    def _commit_insights(self, token: FetchToken, result: ApiResult) -> None:
        self.store.commit_insights(token.entity_id, result.data)

    def _report_failure(self, operation: str, entity_id: str, result: ApiResult) -> None:
        logger.error("%s failed for %s: %s", operation, entity_id, result.error)
        if self.failure_listener is None:
            return
        try:
            self.failure_listener(operation, entity_id, result)
        except Exception as exc:
            logger.error("Failure listener raised: %s", exc)
