from __future__ import annotations

from rpg_world.domain.errors import LocationNotFoundError, NotFoundError, WorldMissingError
from rpg_world.domain.ids import next_id
from rpg_world.domain.models import Character, WorldState
from rpg_world.domain.tree import find_by_id


def _check_location(state: WorldState, location_id: int | None) -> None:
    if location_id is None:
        return
    if find_by_id(state.root, location_id) is None:
        raise LocationNotFoundError(location_id)


def _index_of(state: WorldState, character_id: int) -> int:
    for index, character in enumerate(state.characters):
        if character.id == character_id:
            return index
    raise NotFoundError("character", character_id)


def create_character(
    state: WorldState,
    name: str,
    personality: str,
    description: str,
    location_id: int | None = None,
) -> Character:
    if not state.exists:
        raise WorldMissingError()
    _check_location(state, location_id)

    character = Character(
        id=next_id(existing.id for existing in state.characters),
        name=name,
        personality=personality,
        description=description,
        location_id=location_id,
    )
    state.characters.append(character)
    return character


def get_character(state: WorldState, character_id: int) -> Character:
    return state.characters[_index_of(state, character_id)]


def list_characters(state: WorldState) -> list[Character]:
    return list(state.characters)


def update_character(
    state: WorldState,
    character_id: int,
    name: str | None = None,
    personality: str | None = None,
    description: str | None = None,
    location_id: int | None = None,
) -> Character:
    character = get_character(state, character_id)
    _check_location(state, location_id)

    if name is not None:
        character.name = name
    if personality is not None:
        character.personality = personality
    if description is not None:
        character.description = description
    if location_id is not None:
        character.location_id = location_id
    return character


def delete_character(state: WorldState, character_id: int) -> Character:
    """Remove the character; plots that mention it keep the stale id."""
    return state.characters.pop(_index_of(state, character_id))
