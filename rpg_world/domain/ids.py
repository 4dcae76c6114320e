from __future__ import annotations

from typing import Iterable

from rpg_world.domain.models import Location
from rpg_world.domain.tree import iter_locations


def next_id(existing_ids: Iterable[int]) -> int:
    """Return ``max(existing_ids) + 1``, or ``1`` for an empty collection."""
    return max(existing_ids, default=0) + 1


def next_location_id(root: Location) -> int:
    # Scan the whole tree, not just siblings, so ids stay globally unique.
    return next_id(node.id for node in iter_locations(root))
