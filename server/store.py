"""
Board stores.

A store maps a session id to its board record::

    {"elements": [...], "connectors": [...], "updatedAt": "<ISO UTC>"}

``SqlBoardStore`` keeps records in a database through SQLAlchemy
(SQLite by default). ``MemoryBoardStore`` keeps them in process memory
and is what ``open_store`` falls back to when the database cannot be
reached, so the service keeps answering with boards that only live
until restart.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, JSON, String, create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


DEFAULT_DATABASE_URL = "sqlite:///wireboard.db"

Base = declarative_base()


class BoardStoreError(Exception):
    """Raised when the backing database fails during a request."""


class BoardRecord(Base):
    __tablename__ = "boards"

    session_id = Column(String(128), primary_key=True)
    elements = Column(JSON, nullable=False, default=list)
    connectors = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        updated = self.updated_at
        if updated.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC
            updated = updated.replace(tzinfo=timezone.utc)
        return {
            "elements": self.elements,
            "connectors": self.connectors,
            "updatedAt": updated.isoformat(),
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryBoardStore:
    """In-memory session -> board record map."""

    durable = False

    def __init__(self):
        self._boards: dict[str, dict] = {}

    def get(self, session_id: str) -> Optional[dict]:
        return self._boards.get(session_id)

    def put(self, session_id: str, elements: list, connectors: list) -> dict:
        record = {
            "elements": elements,
            "connectors": connectors,
            "updatedAt": _now().isoformat(),
        }
        self._boards[session_id] = record
        return record

    def delete(self, session_id: str) -> bool:
        return self._boards.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._boards)


class SqlBoardStore:
    """
    Board records in a SQL database.

    The table is created on construction, so an unreachable database
    raises ``SQLAlchemyError`` here rather than on the first request.
    """

    durable = True

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL):
        self.database_url = database_url
        self.engine = _create_engine(database_url)
        Base.metadata.create_all(bind=self.engine)
        self._session = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get(self, session_id: str) -> Optional[dict]:
        try:
            with self._session() as db:
                record = db.get(BoardRecord, session_id)
                return record.to_dict() if record is not None else None
        except SQLAlchemyError as e:
            raise BoardStoreError(f"Failed to read board {session_id}: {e}") from e

    def put(self, session_id: str, elements: list, connectors: list) -> dict:
        try:
            with self._session() as db:
                record = db.get(BoardRecord, session_id)
                if record is None:
                    record = BoardRecord(session_id=session_id)
                    db.add(record)
                record.elements = elements
                record.connectors = connectors
                record.updated_at = _now()
                db.commit()
                return record.to_dict()
        except SQLAlchemyError as e:
            raise BoardStoreError(f"Failed to save board {session_id}: {e}") from e

    def delete(self, session_id: str) -> bool:
        try:
            with self._session() as db:
                record = db.get(BoardRecord, session_id)
                if record is None:
                    return False
                db.delete(record)
                db.commit()
                return True
        except SQLAlchemyError as e:
            raise BoardStoreError(f"Failed to delete board {session_id}: {e}") from e

    def __len__(self) -> int:
        with self._session() as db:
            return db.scalar(select(func.count()).select_from(BoardRecord))

    def close(self):
        self.engine.dispose()


def _create_engine(database_url: str):
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each one gets its own empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def open_store(database_url: Optional[str] = DEFAULT_DATABASE_URL):
    """
    Open the database store, or fall back to memory.

    Args:
        database_url: SQLAlchemy URL; None or empty selects the memory store

    Returns:
        A SqlBoardStore, or a MemoryBoardStore if the database is unavailable
    """
    if not database_url:
        logger.info("No database configured, using in-memory store")
        return MemoryBoardStore()

    try:
        store = SqlBoardStore(database_url)
    except SQLAlchemyError as e:
        logger.warning(
            f"Database unavailable ({e}), using in-memory store "
            f"(boards are lost on restart)"
        )
        return MemoryBoardStore()

    logger.info(f"Using database store at {store.engine.url.render_as_string(hide_password=True)}")
    return store
