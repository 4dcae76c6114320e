from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


ROOT_LOCATION_ID = 0


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Location:
    id: int
    name: str
    description: str
    children: list[Location] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    # Keys read from the world file that this model does not know about.
    extra: dict[str, Any] = field(default_factory=dict)

    def summary(self) -> dict[str, int | str]:
        return {"id": self.id, "name": self.name}


@dataclass
class Character:
    id: int
    name: str
    personality: str
    description: str
    location_id: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Plot:
    id: int
    name: str
    description: str
    time: str
    location_id: int
    character_ids: list[int] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class FlatLocation:
    location: Location
    depth: int
    parent_id: int | None
    path: list[dict[str, int | str]]


@dataclass
class DanglingReference:
    entity: str
    entity_id: int
    attribute: str
    missing_id: int


@dataclass
class WorldState:
    """The single world: one location tree plus the character and plot registries."""

    root: Location | None = None
    characters: list[Character] = field(default_factory=list)
    plots: list[Plot] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return self.root is not None
