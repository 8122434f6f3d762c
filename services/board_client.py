"""
Board service client.

Thin HTTP wrapper around the session-scoped board store:

    GET    /api/board/{session_id}  -> {"elements": [...], "connectors": [...]}
    POST   /api/board/{session_id}  (full snapshot, overwrites)
    DELETE /api/board/{session_id}  -> {"ok": true}

Every transport or decoding problem is raised as BoardServiceError so
callers only have one failure type to handle.
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 5.0


class BoardServiceError(Exception):
    """The board service could not be reached or returned garbage."""
    pass


class BoardClient:
    """
    Client for one board session.

    Example:
        client = BoardClient("http://localhost:5000", session_id)
        snapshot = client.load()
        client.save(board.to_dict())
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL,
                 session_id: str = "",
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session_id = session_id
        self.timeout = timeout
        self._http = session or requests.Session()

    @property
    def board_url(self) -> str:
        return f"{self.base_url}/api/board/{self.session_id}"

    def health(self) -> bool:
        """True if the service answers its health check."""
        try:
            data = self._request("GET", f"{self.base_url}/api/health")
        except BoardServiceError:
            return False
        return isinstance(data, dict) and data.get("status") == "ok"

    def load(self) -> dict:
        """Fetch the stored snapshot (an empty board for unknown sessions)."""
        data = self._request("GET", self.board_url)
        logger.debug(f"Loaded board {self.session_id}")
        return data

    def save(self, snapshot: dict) -> dict:
        """Overwrite the stored snapshot with this one."""
        data = self._request("POST", self.board_url, json={
            "elements": snapshot.get("elements", []),
            "connectors": snapshot.get("connectors", []),
        })
        logger.debug(f"Saved board {self.session_id}")
        return data

    def delete(self) -> bool:
        """Remove the stored board."""
        data = self._request("DELETE", self.board_url)
        return isinstance(data, dict) and bool(data.get("ok"))

    def _request(self, method: str, url: str, **kwargs):
        try:
            response = self._http.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise BoardServiceError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise BoardServiceError(f"{method} {url} returned invalid JSON: {e}") from e
