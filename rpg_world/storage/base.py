from __future__ import annotations

from typing import Protocol

from sqlalchemy.orm import DeclarativeBase

from rpg_world.domain.models import WorldState


class Base(DeclarativeBase):
    pass


class WorldStore(Protocol):
    """Persistence contract for the whole world state."""

    def load(self) -> WorldState:
        """Return the stored world, or an empty one when nothing is stored yet."""

    def save(self, state: WorldState) -> None:
        """Durably write ``state``; raise ``PersistenceError`` on failure."""
