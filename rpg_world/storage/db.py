from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from rpg_world.storage.base import Base


def build_sqlite_url(db_path: Path) -> str:
    resolved = db_path.resolve()
    return f"sqlite:///{resolved.as_posix()}"


class DatabaseService:
    def __init__(self, db_url: str):
        self.db_url = db_url
        self.engine: Engine = create_engine(db_url, future=True)
        self._sessionmaker = sessionmaker(self.engine, expire_on_commit=False)

    def init_models(self) -> None:
        from rpg_world.storage.sqlite_store import WorldSnapshot

        _ = WorldSnapshot
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        with self._sessionmaker() as session:
            try:
                yield session
                session.commit()
            except Exception:
                logger.exception("An error occurred during the session scope.")
                session.rollback()
                raise

    def dispose(self) -> None:
        self.engine.dispose()
