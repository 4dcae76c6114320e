"""Traversal primitives for the location tree.

The tree stores no parent pointers; parents and paths are re-derived by
walking from the root. Children are always visited in insertion order and the
first match wins.
"""

from __future__ import annotations

from typing import Iterator

from rpg_world.domain.models import FlatLocation, Location


def iter_locations(root: Location | None) -> Iterator[Location]:
    """Yield every node in pre-order."""
    if root is None:
        return
    yield root
    for child in root.children:
        yield from iter_locations(child)


def find_by_id(root: Location | None, location_id: int) -> Location | None:
    if root is None:
        return None
    if root.id == location_id:
        return root
    for child in root.children:
        found = find_by_id(child, location_id)
        if found is not None:
            return found
    return None


def find_parent(root: Location | None, location_id: int) -> Location | None:
    """Return the node whose direct children include ``location_id``.

    Direct children are checked before descending, so a shallow match wins over
    a deeper one. The root itself has no parent.
    """
    if root is None or not root.children:
        return None

    for child in root.children:
        if child.id == location_id:
            return root

    for child in root.children:
        found = find_parent(child, location_id)
        if found is not None:
            return found
    return None


def path_to(root: Location | None, location_id: int) -> list[Location]:
    """Nodes from the root to ``location_id`` inclusive; empty if unknown."""
    if root is None:
        return []
    current = find_by_id(root, location_id)
    if current is None:
        return []

    path: list[Location] = []
    while current is not None and current.id != root.id:
        path.append(current)
        current = find_parent(root, current.id)
    path.append(root)
    path.reverse()
    return path


def path_summary(root: Location | None, location_id: int) -> list[dict[str, int | str]]:
    return [node.summary() for node in path_to(root, location_id)]


def flatten(root: Location | None) -> list[FlatLocation]:
    if root is None:
        return []

    flat: list[FlatLocation] = []

    def _visit(node: Location, depth: int, parent: Location | None, trail: list[dict[str, int | str]]) -> None:
        path = [*trail, node.summary()]
        flat.append(
            FlatLocation(
                location=node,
                depth=depth,
                parent_id=parent.id if parent is not None else None,
                path=path,
            )
        )
        for child in node.children:
            _visit(child, depth + 1, node, path)

    _visit(root, 0, None, [])
    return flat
