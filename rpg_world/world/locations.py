from __future__ import annotations

from typing import Any

from rpg_world.domain.errors import (
    HasChildrenError,
    NotFoundError,
    RootDeletionForbiddenError,
    WorldAlreadyExistsError,
    WorldMissingError,
)
from rpg_world.domain.ids import next_location_id
from rpg_world.domain.models import ROOT_LOCATION_ID, Location, WorldState, utc_timestamp
from rpg_world.domain.tree import find_by_id, find_parent, flatten, path_summary
from rpg_world.storage.codec import location_to_dict


def require_root(state: WorldState) -> Location:
    if state.root is None:
        raise WorldMissingError()
    return state.root


def location_fields(location: Location) -> dict[str, Any]:
    """Node attributes without its children, in the stored (camelCase) shape."""
    payload = location_to_dict(location)
    payload.pop("children", None)
    return payload


def create_world(state: WorldState, name: str, description: str, timestamp: str | None = None) -> Location:
    if state.root is not None:
        raise WorldAlreadyExistsError()
    state.root = Location(
        id=ROOT_LOCATION_ID,
        name=name,
        description=description,
        created_at=timestamp or utc_timestamp(),
    )
    return state.root


def create_location(
    state: WorldState,
    parent_id: int,
    name: str,
    description: str,
    timestamp: str | None = None,
) -> Location:
    root = require_root(state)
    parent = find_by_id(root, parent_id)
    if parent is None:
        raise NotFoundError("parent location", parent_id)

    location = Location(
        id=next_location_id(root),
        name=name,
        description=description,
        created_at=timestamp or utc_timestamp(),
    )
    parent.children.append(location)
    return location


def update_location(
    state: WorldState,
    location_id: int,
    name: str | None = None,
    description: str | None = None,
    timestamp: str | None = None,
) -> Location:
    root = require_root(state)
    location = find_by_id(root, location_id)
    if location is None:
        raise NotFoundError("location", location_id)

    if name is not None:
        location.name = name
    if description is not None:
        location.description = description
    location.updated_at = timestamp or utc_timestamp()
    return location


def delete_location(state: WorldState, location_id: int, force: bool = False) -> Location:
    """Detach ``location_id`` from its parent together with its whole subtree."""
    root = require_root(state)
    if location_id == root.id:
        raise RootDeletionForbiddenError()

    parent = find_parent(root, location_id)
    if parent is None:
        raise NotFoundError("location", location_id)

    index = next(i for i, child in enumerate(parent.children) if child.id == location_id)
    location = parent.children[index]
    if location.children and not force:
        raise HasChildrenError(location_id, len(location.children))

    del parent.children[index]
    return location


def describe_location(state: WorldState, location_id: int) -> dict[str, Any]:
    root = require_root(state)
    location = find_by_id(root, location_id)
    if location is None:
        raise NotFoundError("location", location_id)

    result = location_fields(location)
    parent = find_parent(root, location_id)
    if parent is not None:
        result["parent"] = parent.summary()
    result["childrenCount"] = len(location.children)
    result["path"] = path_summary(root, location_id)
    return result


def list_locations(state: WorldState, include_details: bool = False) -> list[dict[str, Any]]:
    root = require_root(state)
    entries: list[dict[str, Any]] = []
    for flat in flatten(root):
        if not include_details:
            entries.append(
                {
                    "id": flat.location.id,
                    "name": flat.location.name,
                    "depth": flat.depth,
                    "path": " > ".join(str(step["name"]) for step in flat.path),
                }
            )
            continue

        entry = location_fields(flat.location)
        entry["depth"] = flat.depth
        if flat.parent_id is not None:
            entry["parentId"] = flat.parent_id
        entry["path"] = flat.path
        entries.append(entry)
    return entries
