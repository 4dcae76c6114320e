"""Service facade running each world operation against the in-memory state.

Every mutating method validates and applies its change through the registry
modules, then persists the whole state through the injected store before
returning. Failed validation raises a :class:`WorldError` and leaves the state
untouched.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from loguru import logger

from rpg_world.domain.errors import PersistenceError, WorldError
from rpg_world.domain.models import Character, DanglingReference, Location, Plot, WorldState
from rpg_world.storage.base import WorldStore
from rpg_world.storage.codec import location_to_dict
from rpg_world.world import characters as characters_ops
from rpg_world.world import locations as locations_ops
from rpg_world.world import plots as plots_ops
from rpg_world.world.integrity import find_dangling_references


class WorldService:
    def __init__(self, store: WorldStore, state: WorldState | None = None) -> None:
        self._store = store
        self._state = state if state is not None else store.load()

    @property
    def state(self) -> WorldState:
        return self._state

    @contextmanager
    def _operation(self, op: str, entity: str, entity_id: Any = "-") -> Iterator[Any]:
        log = logger.bind(op=op, entity=entity, entity_id=entity_id)
        try:
            yield log
        except PersistenceError as exc:
            log.error("World changed in memory but was not saved: {}", exc.message)
            raise
        except WorldError as exc:
            log.warning("{} rejected kind={} reason={}", op, exc.kind.value, exc.message)
            raise

    def _persist(self) -> None:
        self._store.save(self._state)

    # World

    def create_world(self, name: str, description: str) -> int:
        with self._operation("create_world", "world", 0) as log:
            root = locations_ops.create_world(self._state, name, description)
            self._persist()
            log.info("World '{}' created", root.name)
            return root.id

    def get_world(self) -> dict[str, Any]:
        with self._operation("get_world", "world", 0):
            return location_to_dict(locations_ops.require_root(self._state))

    # Locations

    def create_location(self, parent_id: int, name: str, description: str) -> int:
        with self._operation("create_location", "location", parent_id) as log:
            location = locations_ops.create_location(self._state, parent_id, name, description)
            self._persist()
            log.info("Location '{}' created id={} parent={}", location.name, location.id, parent_id)
            return location.id

    def update_location(
        self,
        location_id: int,
        name: str | None = None,
        description: str | None = None,
    ) -> Location:
        with self._operation("update_location", "location", location_id) as log:
            location = locations_ops.update_location(self._state, location_id, name=name, description=description)
            self._persist()
            log.info("Location '{}' updated", location.name)
            return location

    def delete_location(self, location_id: int, force: bool = False) -> Location:
        with self._operation("delete_location", "location", location_id) as log:
            location = locations_ops.delete_location(self._state, location_id, force=force)
            self._persist()
            log.info("Location '{}' deleted force={} pruned_children={}", location.name, force, len(location.children))
            return location

    def get_location(self, location_id: int) -> dict[str, Any]:
        with self._operation("get_location", "location", location_id):
            return locations_ops.describe_location(self._state, location_id)

    def list_locations(self, include_details: bool = False) -> list[dict[str, Any]]:
        with self._operation("list_locations", "location"):
            return locations_ops.list_locations(self._state, include_details=include_details)

    # Characters

    def create_character(
        self,
        name: str,
        personality: str,
        description: str,
        location_id: int | None = None,
    ) -> int:
        with self._operation("create_character", "character") as log:
            character = characters_ops.create_character(
                self._state,
                name=name,
                personality=personality,
                description=description,
                location_id=location_id,
            )
            self._persist()
            log.bind(entity_id=character.id).info("Character '{}' created", character.name)
            return character.id

    def update_character(
        self,
        character_id: int,
        name: str | None = None,
        personality: str | None = None,
        description: str | None = None,
        location_id: int | None = None,
    ) -> Character:
        with self._operation("update_character", "character", character_id) as log:
            character = characters_ops.update_character(
                self._state,
                character_id,
                name=name,
                personality=personality,
                description=description,
                location_id=location_id,
            )
            self._persist()
            log.info("Character '{}' updated", character.name)
            return character

    def delete_character(self, character_id: int) -> Character:
        with self._operation("delete_character", "character", character_id) as log:
            character = characters_ops.delete_character(self._state, character_id)
            self._persist()
            log.info("Character '{}' deleted", character.name)
            return character

    def get_character(self, character_id: int) -> Character:
        with self._operation("get_character", "character", character_id):
            return characters_ops.get_character(self._state, character_id)

    def list_characters(self) -> list[Character]:
        return characters_ops.list_characters(self._state)

    # Plots

    def create_plot(
        self,
        plot_id: int,
        name: str,
        description: str,
        time: str,
        location_id: int,
        character_ids: Iterable[int] = (),
    ) -> Plot:
        with self._operation("create_plot", "plot", plot_id) as log:
            plot = plots_ops.create_plot(
                self._state,
                plot_id,
                name=name,
                description=description,
                time=time,
                location_id=location_id,
                character_ids=character_ids,
            )
            self._persist()
            log.info("Plot '{}' created characters={}", plot.name, plot.character_ids)
            return plot

    def update_plot(
        self,
        plot_id: int,
        name: str | None = None,
        description: str | None = None,
        time: str | None = None,
        location_id: int | None = None,
        character_ids: Iterable[int] | None = None,
    ) -> Plot:
        with self._operation("update_plot", "plot", plot_id) as log:
            plot = plots_ops.update_plot(
                self._state,
                plot_id,
                name=name,
                description=description,
                time=time,
                location_id=location_id,
                character_ids=character_ids,
            )
            self._persist()
            log.info("Plot '{}' updated", plot.name)
            return plot

    def delete_plot(self, plot_id: int) -> Plot:
        with self._operation("delete_plot", "plot", plot_id) as log:
            plot = plots_ops.delete_plot(self._state, plot_id)
            self._persist()
            log.info("Plot '{}' deleted", plot.name)
            return plot

    def get_plot(self, plot_id: int) -> Plot:
        with self._operation("get_plot", "plot", plot_id):
            return plots_ops.get_plot(self._state, plot_id)

    def list_plots(self, plot_ids: Iterable[int]) -> list[Plot]:
        return plots_ops.list_plots(self._state, plot_ids)

    # Integrity

    def dangling_references(self) -> list[DanglingReference]:
        return find_dangling_references(self._state)
