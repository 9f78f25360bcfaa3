"""
AnalyticsConsole -- composition root.

Builds the store, client, catalog, orchestrator, view controller and action
dispatcher for one console session and owns their lifecycle:

    console = AnalyticsConsole(ConsoleConfig.from_env())
    await console.start()          # catalog + analytics, concurrently
    console.select("user_003")     # triggers profile + insights
    await console.wait_idle()
    console.switch_view("entity-analysis")
    model = console.view_model()
    await console.close()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

from uil_console.actions import ActionDispatcher
from uil_console.api_client import UILClient
from uil_console.catalog import EntityCatalog
from uil_console.config import ConsoleConfig
from uil_console.errors import ApiResult
from uil_console.notifications import NotificationHub
from uil_console.orchestrator import FailureListener, FetchOrchestrator
from uil_console.store import ConsoleStore
from uil_console.views import View, ViewController, ViewModel

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("console")
logger.setLevel(logging.INFO)

if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter(
        "[%(asctime)s] %(name)s %(levelname)s: %(message)s", datefmt="%H:%M:%S",
    ))
    logger.addHandler(_h)


class AnalyticsConsole:
    """One operator session against the UIL API."""

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        client: Optional[UILClient] = None,
        notifier: Optional[NotificationHub] = None,
        failure_listener: Optional[FailureListener] = None,
    ) -> None:
        self.config = config or ConsoleConfig.from_env()
        self.client = client or UILClient(self.config)
        self.notifier = notifier or NotificationHub()
        self.store = ConsoleStore()
        self.catalog = EntityCatalog(self.client, self.store)
        self.orchestrator = FetchOrchestrator(self.client, self.store, failure_listener)
        self.views = ViewController(self.store, self.config.currency_symbol)
        self.dispatcher = ActionDispatcher(self.client, self.store, self.notifier)
        self.catalog.on_select(self.orchestrator.on_selection)
        self._started = False

    # -- Lifecycle ----------------------------------------------------------

    async def start(self) -> None:
        """Load the catalog and the analytics summary concurrently."""
        logger.info("Starting console against %s", self.client.base_url)
        await self.refresh()
        self._started = True

    async def refresh(self) -> None:
        """Re-fetch catalog and summary; each is replaced whole on success."""
        await asyncio.gather(self.catalog.load(), self.load_analytics())

    async def load_analytics(self) -> ApiResult:
        result = await self.client.get_analytics_summary()
        if result:
            self.store.set_analytics(result.data)
        else:
            logger.error("Could not load analytics summary: %s", result.error)
        return result

    async def wait_idle(self) -> None:
        """Wait until no profile/insights fetch is outstanding."""
        await self.orchestrator.drain()

    async def close(self) -> None:
        await self.orchestrator.drain()
        self.views.detach()
        self.store.close()
        await self.client.close()
        self._started = False
        logger.info("Console closed")

    async def __aenter__(self) -> AnalyticsConsole:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def started(self) -> bool:
        return self._started

    # -- Operator actions ---------------------------------------------------

    def select(self, entity_id: str) -> None:
        self.catalog.select(entity_id)

    def switch_view(self, view: Union[View, str]) -> View:
        return self.views.switch(view)

    def view_model(self, view: Optional[Union[View, str]] = None) -> ViewModel:
        return self.views.view_model(view)

    async def execute_actions(self, entity_id: Optional[str] = None) -> ApiResult:
        return await self.dispatcher.dispatch(entity_id)

    def __repr__(self) -> str:
        return f"AnalyticsConsole({self.client.base_url!r}, {self.store!r})"
