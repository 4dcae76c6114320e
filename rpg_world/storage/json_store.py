from __future__ import annotations

import os
from pathlib import Path

import orjson
from loguru import logger

from rpg_world.domain.errors import PersistenceError
from rpg_world.domain.models import WorldState
from rpg_world.storage.codec import dumps_world, loads_world


class JsonFileStore:
    """Keeps the whole world in one pretty-printed JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> WorldState:
        if not self.path.exists():
            logger.debug("World file {} does not exist, starting empty", self.path)
            return WorldState()
        try:
            raw = self.path.read_bytes()
            state = loads_world(raw)
        except (OSError, orjson.JSONDecodeError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(f"Failed to load world from {self.path}: {exc}") from exc
        logger.debug("Loaded world from {} ({} bytes)", self.path, len(raw))
        return state

    def save(self, state: WorldState) -> None:
        payload = dumps_world(state)
        # The target is only ever replaced whole, never written in place.
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path.exists():
                tmp_path.unlink()
            raise PersistenceError(f"Failed to save world to {self.path}: {exc}") from exc
        logger.debug("Saved world to {} ({} bytes)", self.path, len(payload))
