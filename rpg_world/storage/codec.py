"""Conversion between :class:`WorldState` and its JSON document.

The document keeps the historical file layout::

    {"world": {"id": 0, "name": ..., "children": [...]},
     "characters": [{"id": 1, "locationId": 2, ...}],
     "plots": [{"id": 5, "characterIds": [1], ...}]}

Keys the models do not know (hand-added ``attributes`` on a character, for
example) are kept in each record's ``extra`` and written back unchanged.
"""

from __future__ import annotations

from typing import Any

import orjson

from rpg_world.domain.models import Character, Location, Plot, WorldState

_LOCATION_KEYS = frozenset({"id", "name", "description", "createdAt", "updatedAt", "children"})
_CHARACTER_KEYS = frozenset({"id", "name", "personality", "description", "locationId"})
_PLOT_KEYS = frozenset({"id", "name", "description", "time", "locationId", "characterIds"})
_WORLD_KEYS = frozenset({"world", "characters", "plots"})


def _unknown(data: dict[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


def _with_extra(payload: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    for key, value in extra.items():
        payload.setdefault(key, value)
    return payload


def location_to_dict(location: Location) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": location.id,
        "name": location.name,
        "description": location.description,
    }
    if location.created_at is not None:
        payload["createdAt"] = location.created_at
    if location.updated_at is not None:
        payload["updatedAt"] = location.updated_at
    _with_extra(payload, location.extra)
    if location.children:
        payload["children"] = [location_to_dict(child) for child in location.children]
    return payload


def location_from_dict(data: dict[str, Any]) -> Location:
    return Location(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        description=str(data.get("description", "")),
        children=[location_from_dict(child) for child in data.get("children") or []],
        created_at=data.get("createdAt"),
        updated_at=data.get("updatedAt"),
        extra=_unknown(data, _LOCATION_KEYS),
    )


def character_to_dict(character: Character) -> dict[str, Any]:
    payload = {
        "id": character.id,
        "name": character.name,
        "personality": character.personality,
        "description": character.description,
        "locationId": character.location_id,
    }
    return _with_extra(payload, character.extra)


def character_from_dict(data: dict[str, Any]) -> Character:
    location_id = data.get("locationId")
    return Character(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        personality=str(data.get("personality", "")),
        description=str(data.get("description", "")),
        location_id=int(location_id) if location_id is not None else None,
        extra=_unknown(data, _CHARACTER_KEYS),
    )


def plot_to_dict(plot: Plot) -> dict[str, Any]:
    payload = {
        "id": plot.id,
        "name": plot.name,
        "description": plot.description,
        "time": plot.time,
        "locationId": plot.location_id,
        "characterIds": list(plot.character_ids),
    }
    return _with_extra(payload, plot.extra)


def plot_from_dict(data: dict[str, Any]) -> Plot:
    return Plot(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        description=str(data.get("description", "")),
        time=str(data.get("time", "")),
        location_id=int(data["locationId"]),
        character_ids=[int(character_id) for character_id in data.get("characterIds") or []],
        extra=_unknown(data, _PLOT_KEYS),
    )


def world_to_dict(state: WorldState) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if state.root is not None:
        payload["world"] = location_to_dict(state.root)
    payload["characters"] = [character_to_dict(character) for character in state.characters]
    payload["plots"] = [plot_to_dict(plot) for plot in state.plots]
    return _with_extra(payload, state.extra)


def world_from_dict(data: dict[str, Any]) -> WorldState:
    world = data.get("world")
    return WorldState(
        root=location_from_dict(world) if world else None,
        characters=[character_from_dict(item) for item in data.get("characters") or []],
        plots=[plot_from_dict(item) for item in data.get("plots") or []],
        extra=_unknown(data, _WORLD_KEYS),
    )


def dumps_world(state: WorldState, *, indent: bool = True) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else orjson.OPT_SORT_KEYS
    return orjson.dumps(world_to_dict(state), option=option)


def loads_world(raw: bytes | str) -> WorldState:
    if not raw or not raw.strip():
        return WorldState()
    payload = orjson.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("Expected JSON object for world document")
    return world_from_dict(payload)
