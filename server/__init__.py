"""
Board service.

Small HTTP store for board snapshots keyed by session id.
"""

from .app import create_app, BoardPayload
from .store import (
    MemoryBoardStore,
    SqlBoardStore,
    BoardStoreError,
    open_store,
    DEFAULT_DATABASE_URL,
)

__all__ = [
    "create_app",
    "BoardPayload",
    "MemoryBoardStore",
    "SqlBoardStore",
    "BoardStoreError",
    "open_store",
    "DEFAULT_DATABASE_URL",
]
