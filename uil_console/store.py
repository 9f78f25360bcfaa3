"""
Console view store.

Holds the small set of state the console renders from. Each slice has a single
writer:

    entities, selected_id   EntityCatalog
    profile, insights       FetchOrchestrator (tagged with the owning entity id)
    loading                 FetchOrchestrator
    analytics               AnalyticsConsole
    active_view             ViewController

Listeners registered with ``subscribe`` are called with the slice name after
every mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from uil_console.models import AnalyticsSummary, Entity, Insight, Profile

logger = logging.getLogger("store")

Listener = Callable[[str], None]


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable copy of the store handed to renderers."""
    entities: Tuple[Entity, ...]
    selected_id: Optional[str]
    profile: Optional[Profile]
    insights: Tuple[Insight, ...]
    analytics: Optional[AnalyticsSummary]
    loading: bool
    active_view: str


class ConsoleStore:
    """Explicitly owned state container; see module docstring for writers."""

    def __init__(self, active_view: str = "overview") -> None:
        self._entities: Tuple[Entity, ...] = ()
        self._selected_id: Optional[str] = None
        self._profile: Optional[Profile] = None
        self._profile_owner: Optional[str] = None
        self._insights: Tuple[Insight, ...] = ()
        self._insights_owner: Optional[str] = None
        self._analytics: Optional[AnalyticsSummary] = None
        self._loading = False
        self._active_view = active_view
        self._listeners: List[Listener] = []
        self._closed = False

    # -- Observers ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, slice_name: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(slice_name)
            except Exception as exc:
                logger.error("Store listener failed on %s change: %s", slice_name, exc)

    # -- Read access --------------------------------------------------------

    @property
    def entities(self) -> Tuple[Entity, ...]:
        return self._entities

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def profile(self) -> Optional[Profile]:
        """Last committed profile, which may belong to an earlier selection."""
        return self._profile

    @property
    def profile_owner(self) -> Optional[str]:
        return self._profile_owner

    @property
    def insights(self) -> Tuple[Insight, ...]:
        return self._insights

    @property
    def insights_owner(self) -> Optional[str]:
        return self._insights_owner

    @property
    def analytics(self) -> Optional[AnalyticsSummary]:
        return self._analytics

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def active_view(self) -> str:
        return self._active_view

    @property
    def closed(self) -> bool:
        return self._closed

    def current_profile(self) -> Optional[Profile]:
        """Profile for the current selection, or None if absent or stale."""
        if self._selected_id is None or self._profile_owner != self._selected_id:
            return None
        return self._profile

    def current_insights(self) -> Tuple[Insight, ...]:
        """Insights for the current selection; empty if absent or stale."""
        if self._selected_id is None or self._insights_owner != self._selected_id:
            return ()
        return self._insights

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            entities=self._entities,
            selected_id=self._selected_id,
            profile=self.current_profile(),
            insights=self.current_insights(),
            analytics=self._analytics,
            loading=self._loading,
            active_view=self._active_view,
        )

    # -- Writes -------------------------------------------------------------

    def set_entities(self, entities: Sequence[Entity]) -> None:
        self._entities = tuple(entities)
        self._notify("entities")

    def set_selected_id(self, entity_id: Optional[str]) -> None:
        self._selected_id = entity_id
        self._notify("selected_id")

    def commit_profile(self, owner_id: str, profile: Profile) -> None:
        self._profile = profile
        self._profile_owner = owner_id
        self._notify("profile")

    def commit_insights(self, owner_id: str, insights: Sequence[Insight]) -> None:
        self._insights = tuple(insights)
        self._insights_owner = owner_id
        self._notify("insights")

    def set_loading(self, loading: bool) -> None:
        if loading == self._loading:
            return
        self._loading = loading
        self._notify("loading")

    def set_analytics(self, analytics: AnalyticsSummary) -> None:
        self._analytics = analytics
        self._notify("analytics")

    def set_active_view(self, view: str) -> None:
        self._active_view = view
        self._notify("active_view")

    def close(self) -> None:
        """Drop all listeners; the store is not used after this."""
        self._listeners.clear()
        self._closed = True

    def __repr__(self) -> str:
        return (
            f"ConsoleStore(entities={len(self._entities)}, selected={self._selected_id!r}, "
            f"loading={self._loading}, view={self._active_view!r})"
        )
