"""
Entity catalog and selection.

``load()`` fills the catalog and, when nothing is selected yet, selects the
first entity in catalog order. ``select()`` commits a new id and runs every
registered selection reaction with it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

from uil_console.api_client import UILClient
from uil_console.errors import ApiResult
from uil_console.models import Entity
from uil_console.store import ConsoleStore

logger = logging.getLogger("catalog")

SelectionReaction = Callable[[str], Any]


class EntityCatalog:
    """Selectable entities plus the current selection (stored in ``ConsoleStore``)."""

    def __init__(self, client: UILClient, store: ConsoleStore) -> None:
        self.client = client
        self.store = store
        self._reactions: List[SelectionReaction] = []

    def on_select(self, reaction: SelectionReaction) -> None:
        """Register a callable run with the new id after every selection change."""
        self._reactions.append(reaction)

    @property
    def entities(self) -> Tuple[Entity, ...]:
        return self.store.entities

    @property
    def selected_id(self) -> Optional[str]:
        return self.store.selected_id

    @property
    def selected_entity(self) -> Optional[Entity]:
        if self.store.selected_id is None:
            return None
        return self.get(self.store.selected_id)

    def get(self, entity_id: str) -> Optional[Entity]:
        for entity in self.store.entities:
            if entity.id == entity_id:
                return entity
        return None

    async def load(self) -> ApiResult:
        """Fetch the catalog, replacing the current list on success."""
        result = await self.client.list_entities()
        if not result:
            logger.error("Could not load entity catalog: %s", result.error)
            return result

        entities: List[Entity] = result.data
        self.store.set_entities(entities)
        logger.info("Loaded %d entities", len(entities))

        if entities and self.store.selected_id is None:
            self.select(entities[0].id)
        return result

    def select(self, entity_id: str) -> None:
        """
        Select an entity by id.

        Membership in the catalog is not checked. Selecting the id that is
        already selected does nothing.
        """
        if entity_id == self.store.selected_id:
            return
        self.store.set_selected_id(entity_id)
        logger.info("Selected entity %s", entity_id)
        for reaction in list(self._reactions):
            reaction(entity_id)
