"""
Board service application.

Routes:
    GET    /api/health                -> {"status": "ok", "database": <bool>}
    GET    /api/board/{session_id}    -> stored board, or an empty one
    POST   /api/board/{session_id}    -> overwrite, returns the stored record
    DELETE /api/board/{session_id}    -> {"ok": true}

``database`` in the health response tells whether boards survive a
restart (database store) or only live in memory.
"""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .store import BoardStoreError, MemoryBoardStore

logger = logging.getLogger(__name__)


class BoardPayload(BaseModel):
    """Full board snapshot as sent by the client."""
    elements: List[Any]
    connectors: List[Any]


def create_app(store=None) -> FastAPI:
    """
    Build the service around a store.

    Args:
        store: A MemoryBoardStore or SqlBoardStore (a fresh in-memory
               store by default)
    """
    store = store if store is not None else MemoryBoardStore()

    app = FastAPI(title="Wireboard Board Service", version="0.1.0")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health():
        return {"status": "ok", "database": store.durable}

    @app.get("/api/board/{session_id}")
    def get_board(session_id: str):
        try:
            record = store.get(session_id)
        except BoardStoreError as e:
            logger.error(str(e))
            raise HTTPException(status_code=500, detail=str(e))
        if record is None:
            return {"elements": [], "connectors": []}
        return record

    @app.post("/api/board/{session_id}")
    def save_board(session_id: str, payload: BoardPayload):
        try:
            record = store.put(session_id, payload.elements, payload.connectors)
        except BoardStoreError as e:
            logger.error(str(e))
            raise HTTPException(status_code=500, detail=str(e))
        logger.debug(
            f"Saved board {session_id}: {len(payload.elements)} elements, "
            f"{len(payload.connectors)} connectors"
        )
        return record

    @app.delete("/api/board/{session_id}")
    def delete_board(session_id: str):
        try:
            deleted = store.delete(session_id)
        except BoardStoreError as e:
            logger.error(str(e))
            raise HTTPException(status_code=500, detail=str(e))
        if deleted:
            logger.debug(f"Deleted board {session_id}")
        return {"ok": True}

    return app
