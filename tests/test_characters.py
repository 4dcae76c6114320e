from __future__ import annotations

import pytest

from rpg_world.domain.errors import LocationNotFoundError, NotFoundError, WorldMissingError
from rpg_world.domain.models import WorldState
from rpg_world.world import characters, locations

DESCRIPTION = "x" * 120


def _world() -> WorldState:
    state = WorldState()
    locations.create_world(state, "Aldoria", DESCRIPTION)
    locations.create_location(state, 0, "Capital", DESCRIPTION)
    return state


def test_create_character_requires_world() -> None:
    with pytest.raises(WorldMissingError):
        characters.create_character(WorldState(), "Mira", "curious", "thief", location_id=0)


def test_create_character_allocates_ids_from_one() -> None:
    state = _world()

    first = characters.create_character(state, "Mira", "curious", "thief", location_id=1)
    second = characters.create_character(state, "Doran", "gruff", "smith", location_id=0)

    assert (first.id, second.id) == (1, 2)
    assert [c.name for c in characters.list_characters(state)] == ["Mira", "Doran"]


def test_create_character_rejects_unknown_location() -> None:
    state = _world()

    with pytest.raises(LocationNotFoundError):
        characters.create_character(state, "Mira", "curious", "thief", location_id=9)
    assert state.characters == []


def test_update_character_partial_and_validated_first() -> None:
    state = _world()
    mira = characters.create_character(state, "Mira", "curious", "thief", location_id=1)

    with pytest.raises(LocationNotFoundError):
        characters.update_character(state, mira.id, name="Changed", location_id=99)
    assert mira.name == "Mira"

    characters.update_character(state, mira.id, personality="bold", location_id=0)
    assert (mira.name, mira.personality, mira.location_id) == ("Mira", "bold", 0)

    with pytest.raises(NotFoundError):
        characters.update_character(state, 5, name="ghost")


def test_get_and_delete_character() -> None:
    state = _world()
    mira = characters.create_character(state, "Mira", "curious", "thief", location_id=1)

    assert characters.get_character(state, mira.id) is mira
    characters.delete_character(state, mira.id)

    assert state.characters == []
    with pytest.raises(NotFoundError):
        characters.get_character(state, mira.id)
    with pytest.raises(NotFoundError):
        characters.delete_character(state, mira.id)


def test_deleted_character_id_is_reused_only_when_it_was_the_max() -> None:
    state = _world()
    characters.create_character(state, "A", "p", "d", location_id=0)
    characters.create_character(state, "B", "p", "d", location_id=0)
    characters.delete_character(state, 2)

    assert characters.create_character(state, "C", "p", "d", location_id=0).id == 2
