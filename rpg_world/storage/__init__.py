"""Persistence backends for the world state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rpg_world.storage.base import WorldStore
from rpg_world.storage.json_store import JsonFileStore
from rpg_world.storage.sqlite_store import SqliteSnapshotStore

if TYPE_CHECKING:
    from rpg_world.config.schema import StorageConfig


def build_store(storage: StorageConfig) -> WorldStore:
    path = storage.sqlite_path if storage.backend == "sqlite" else storage.json_path
    if path is None:
        raise ValueError("storage paths are unresolved; call resolve_paths() first")
    if storage.backend == "sqlite":
        return SqliteSnapshotStore(path)
    return JsonFileStore(path)


__all__ = ["JsonFileStore", "SqliteSnapshotStore", "WorldStore", "build_store"]
