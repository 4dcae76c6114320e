from __future__ import annotations

from datetime import datetime
from pathlib import Path

import orjson
from loguru import logger
from sqlalchemy import DateTime, Integer, String, Text, select, text as sa_text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, mapped_column

from rpg_world.domain.errors import PersistenceError
from rpg_world.domain.hashing import snapshot_hash
from rpg_world.domain.models import WorldState
from rpg_world.storage.base import Base
from rpg_world.storage.codec import dumps_world, loads_world
from rpg_world.storage.db import DatabaseService, build_sqlite_url

DEFAULT_WORLD_KEY = "default"


class WorldSnapshot(Base):
    __tablename__ = "world_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    world_key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    snapshot_json: Mapped[str] = mapped_column(Text, nullable=False)
    snapshot_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=sa_text("CURRENT_TIMESTAMP"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=sa_text("CURRENT_TIMESTAMP"),
        onupdate=sa_text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


class SqliteSnapshotStore:
    """Stores the serialized world as a single upserted row in SQLite.

    Saves are skipped when the snapshot hash matches the stored one, so repeated
    saves of an unchanged world never touch the database.
    """

    def __init__(self, db_path: str | Path, world_key: str = DEFAULT_WORLD_KEY) -> None:
        self.db_path = Path(db_path)
        self.world_key = world_key
        self._db: DatabaseService | None = None

    def _service(self) -> DatabaseService:
        if self._db is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            service = DatabaseService(build_sqlite_url(self.db_path))
            service.init_models()
            self._db = service
        return self._db

    def _stored_hash(self) -> str | None:
        with self._service().session_scope() as session:
            result = session.execute(
                select(WorldSnapshot.snapshot_hash).where(WorldSnapshot.world_key == self.world_key)
            )
            return result.scalar_one_or_none()

    def load(self) -> WorldState:
        if not self.db_path.exists():
            logger.debug("World database {} does not exist, starting empty", self.db_path)
            return WorldState()
        try:
            with self._service().session_scope() as session:
                result = session.execute(
                    select(WorldSnapshot.snapshot_json).where(WorldSnapshot.world_key == self.world_key)
                )
                snapshot_json = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load world from {self.db_path}: {exc}") from exc

        if snapshot_json is None:
            return WorldState()
        try:
            return loads_world(snapshot_json)
        except (orjson.JSONDecodeError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(f"Stored world snapshot in {self.db_path} is corrupt: {exc}") from exc

    def save(self, state: WorldState) -> None:
        snapshot_json = dumps_world(state, indent=False).decode("utf-8")
        digest = snapshot_hash(snapshot_json)
        try:
            if self._stored_hash() == digest:
                logger.debug("World snapshot unchanged (hash={}), skipping write", digest[:12])
                return

            stmt = (
                sqlite_insert(WorldSnapshot)
                .values(world_key=self.world_key, snapshot_json=snapshot_json, snapshot_hash=digest)
                .on_conflict_do_update(
                    index_elements=[WorldSnapshot.world_key],
                    set_={
                        "snapshot_json": snapshot_json,
                        "snapshot_hash": digest,
                        "updated_at": sa_text("CURRENT_TIMESTAMP"),
                    },
                )
            )
            with self._service().session_scope() as session:
                session.execute(stmt)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(f"Failed to save world to {self.db_path}: {exc}") from exc
        logger.debug("Saved world snapshot to {} (hash={})", self.db_path, digest[:12])

    def close(self) -> None:
        if self._db is not None:
            self._db.dispose()
            self._db = None
