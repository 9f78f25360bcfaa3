"""
View controller for the four console tabs.

Any view can switch to any other; the initial view is ``overview``.
``view_model()`` is rebuilt from the store on every call, so derived values
always reflect the current store contents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from uil_console import metrics
from uil_console.config import UIL_CURRENCY_SYMBOL
from uil_console.store import ConsoleStore

logger = logging.getLogger("views")


class View(str, Enum):
    """Named console views."""
    OVERVIEW = "overview"
    ENTITY_ANALYSIS = "entity-analysis"
    INSIGHTS = "insights"
    ACTIONS = "actions"


@dataclass
class ViewModel:
    """What the renderer needs for one view. ``ready`` is False when data is missing."""
    view: View
    ready: bool
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"view": self.view.value, "ready": self.ready, "data": self.data}


RenderCallback = Callable[[ViewModel], None]


class ViewController:
    """Finite state machine over ``View``; reads the store, writes only ``active_view``."""

    def __init__(self, store: ConsoleStore, currency_symbol: str = UIL_CURRENCY_SYMBOL) -> None:
        self.store = store
        self.currency_symbol = currency_symbol
        self._render_callbacks: List[RenderCallback] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        if store.active_view != View.OVERVIEW.value:
            store.set_active_view(View.OVERVIEW.value)

    @property
    def active(self) -> View:
        return View(self.store.active_view)

    def switch(self, view: Union[View, str]) -> View:
        """Make ``view`` active. Raises ValueError for an unknown view name."""
        target = View(view)
        if target.value != self.store.active_view:
            logger.debug("View %s -> %s", self.store.active_view, target.value)
            self.store.set_active_view(target.value)
        return target

    # -- Rendering ----------------------------------------------------------

    def on_render(self, callback: RenderCallback) -> None:
        """Call ``callback`` with a fresh view model after every store change."""
        self._render_callbacks.append(callback)
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_store_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._render_callbacks.clear()

    def _on_store_change(self, slice_name: str) -> None:
        model = self.view_model()
        for callback in list(self._render_callbacks):
            callback(model)

    def view_model(self, view: Optional[Union[View, str]] = None) -> ViewModel:
        """Build the model for ``view`` (default: the active view)."""
        target = View(view) if view is not None else self.active
        builder = {
            View.OVERVIEW: self._overview,
            View.ENTITY_ANALYSIS: self._entity_analysis,
            View.INSIGHTS: self._insights,
            View.ACTIONS: self._actions,
        }[target]
        return builder()

    def _overview(self) -> ViewModel:
        summary = self.store.analytics
        return ViewModel(
            view=View.OVERVIEW,
            ready=summary is not None,
            data={
                "tiles": metrics.summary_tiles(summary, self.currency_symbol),
                "distribution": metrics.distribution_series(summary),
                "projection": metrics.revenue_projection(summary, self.currency_symbol),
            },
        )

    def _entity_analysis(self) -> ViewModel:
        profile = self.store.current_profile()
        loading = self.store.loading
        data: Dict[str, Any] = {
            "entities": metrics.entity_cards(self.store.entities, self.store.selected_id),
            "selected_id": self.store.selected_id,
            "loading": loading,
        }
        ready = profile is not None and not loading
        if ready:
            data["scorecard"] = metrics.profile_scorecard(profile, self.currency_symbol)
            data["revenue_blend"] = metrics.revenue_blend(profile)
            data["platforms"] = metrics.platform_cards(profile, self.currency_symbol)
        return ViewModel(view=View.ENTITY_ANALYSIS, ready=ready, data=data)

    def _insights(self) -> ViewModel:
        cards = metrics.insight_cards(self.store.current_insights(), self.currency_symbol)
        return ViewModel(
            view=View.INSIGHTS,
            ready=bool(cards),
            data={"selected_id": self.store.selected_id, "insights": cards},
        )

    def _actions(self) -> ViewModel:
        selected_id = self.store.selected_id
        if selected_id is None:
            return ViewModel(view=View.ACTIONS, ready=False)
        entity = next((e for e in self.store.entities if e.id == selected_id), None)
        return ViewModel(
            view=View.ACTIONS,
            ready=True,
            data={
                "selected_id": selected_id,
                "entity_name": entity.name if entity else None,
            },
        )
