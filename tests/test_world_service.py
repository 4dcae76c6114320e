from __future__ import annotations

import copy
from typing import Any

from loguru import logger
import pytest

from rpg_world.domain.errors import (
    HasChildrenError,
    InvalidCharacterReferencesError,
    PersistenceError,
    RootDeletionForbiddenError,
    WorldMissingError,
)
from rpg_world.domain.models import WorldState
from rpg_world.world import WorldService

DESCRIPTION = (
    "Aldoria is a continent of rival city-states, drowned coastlines and mountain monasteries, "
    "held together by trade and old oaths."
)


class RecordingStore:
    def __init__(self, initial: WorldState | None = None) -> None:
        self.initial = initial or WorldState()
        self.saved: list[WorldState] = []

    def load(self) -> WorldState:
        return self.initial

    def save(self, state: WorldState) -> None:
        self.saved.append(copy.deepcopy(state))


class FailingStore(RecordingStore):
    def save(self, state: WorldState) -> None:
        raise PersistenceError("disk full")


def _service() -> tuple[WorldService, RecordingStore]:
    store = RecordingStore()
    return WorldService(store), store


def test_aldoria_location_scenario() -> None:
    service, store = _service()

    assert service.create_world("Aldoria", DESCRIPTION) == 0
    assert service.create_location(0, "Capital", DESCRIPTION) == 1
    assert service.create_location(1, "Slums", DESCRIPTION) == 2

    path = service.get_location(2)["path"]
    assert path == [
        {"id": 0, "name": "Aldoria"},
        {"id": 1, "name": "Capital"},
        {"id": 2, "name": "Slums"},
    ]
    assert len(store.saved) == 3


def test_cascade_delete_leaves_dangling_character_location() -> None:
    service, _ = _service()
    service.create_world("Aldoria", DESCRIPTION)
    service.create_location(0, "Capital", DESCRIPTION)
    service.create_location(1, "Slums", DESCRIPTION)
    assert service.create_character("Mira", "curious", "A quick-fingered thief.", location_id=2) == 1

    with pytest.raises(HasChildrenError):
        service.delete_location(1, force=False)

    service.delete_location(1, force=True)

    assert [entry["id"] for entry in service.list_locations()] == [0]
    mira = service.get_character(1)
    assert mira.location_id == 2
    dangling = service.dangling_references()
    assert [(ref.entity, ref.entity_id, ref.attribute, ref.missing_id) for ref in dangling] == [
        ("character", 1, "locationId", 2)
    ]


def test_plot_scenarios() -> None:
    service, store = _service()
    service.create_world("Aldoria", DESCRIPTION)
    service.create_location(0, "Capital", DESCRIPTION)
    service.create_location(1, "Slums", DESCRIPTION)
    service.create_character("Mira", "curious", "thief", location_id=2)
    saves_before = len(store.saved)

    with pytest.raises(InvalidCharacterReferencesError) as exc_info:
        service.create_plot(5, "Heist", "d", "Night 1", location_id=2, character_ids=[1, 99])
    assert exc_info.value.invalid_ids == [99]
    assert service.list_plots([5]) == []
    assert len(store.saved) == saves_before

    service.create_plot(5, "Heist", "d", "Night 1", location_id=2, character_ids=[1])
    assert [plot.id for plot in service.list_plots([5])] == [5]


def test_root_can_never_be_deleted() -> None:
    service, _ = _service()
    service.create_world("Aldoria", DESCRIPTION)

    with pytest.raises(RootDeletionForbiddenError):
        service.delete_location(0, force=True)
    assert service.get_world()["id"] == 0


def test_world_missing_is_distinct_from_not_found() -> None:
    service, store = _service()

    with pytest.raises(WorldMissingError):
        service.get_world()
    with pytest.raises(WorldMissingError):
        service.create_location(0, "Capital", DESCRIPTION)
    assert store.saved == []


def test_reads_do_not_mutate_or_persist() -> None:
    service, store = _service()
    service.create_world("Aldoria", DESCRIPTION)
    service.create_location(0, "Capital", DESCRIPTION)
    service.create_character("Mira", "curious", "thief", location_id=1)
    before = copy.deepcopy(service.state)
    saves = len(store.saved)

    service.get_location(1)
    service.list_locations(include_details=True)
    service.get_character(1)
    service.list_characters()
    service.list_plots([1, 2])
    service.get_world()

    assert service.state == before
    assert len(store.saved) == saves


def test_get_world_returns_whole_tree() -> None:
    service, _ = _service()
    service.create_world("Aldoria", DESCRIPTION)
    service.create_location(0, "Capital", DESCRIPTION)

    world = service.get_world()

    assert world["name"] == "Aldoria"
    assert [child["name"] for child in world["children"]] == ["Capital"]


def test_persistence_failure_surfaces_and_keeps_memory_state() -> None:
    service = WorldService(FailingStore())

    records: list[Any] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="ERROR")
    try:
        with pytest.raises(PersistenceError):
            service.create_world("Aldoria", DESCRIPTION)
    finally:
        logger.remove(sink_id)

    assert service.state.root is not None
    assert any("not saved" in record["message"] for record in records)
    assert any(record["extra"].get("op") == "create_world" for record in records)


def test_rejected_operation_logs_kind() -> None:
    service, _ = _service()
    service.create_world("Aldoria", DESCRIPTION)

    records: list[Any] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    try:
        with pytest.raises(RootDeletionForbiddenError):
            service.delete_location(0)
    finally:
        logger.remove(sink_id)

    assert any("kind=RootDeletionForbidden" in record["message"] for record in records)
    assert any(record["extra"].get("entity_id") == 0 for record in records)


def test_service_loads_initial_state_from_store() -> None:
    seeded, _ = _service()
    seeded.create_world("Aldoria", DESCRIPTION)

    service = WorldService(RecordingStore(seeded.state))

    assert service.get_world()["name"] == "Aldoria"
