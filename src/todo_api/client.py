from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 10.0


# PUBLIC_INTERFACE
class TodoApiClient:
    """
    Thin HTTP client for the Todo API.

    Every call returns the decoded JSON body; non-2xx responses raise
    `httpx.HTTPStatusError`. Pass `http_client` to reuse an existing
    `httpx.Client` (for example FastAPI's TestClient); its base URL must point
    at the server root.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        root = (base_url or os.getenv("TODO_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=root,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        self._prefix = "/api"

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self._prefix}{path}"
        logger.debug("API Request: %s %s", method, url)
        try:
            response = self._client.request(method, url, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("API Response Error: %s %s", e.response.status_code, e.response.text)
            raise
        except httpx.HTTPError as e:
            logger.error("API Request Error: %s", e)
            raise
        logger.debug("API Response: %s %s", response.status_code, url)
        return response.json()

    def get_todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/todos")

    def get_todo(self, todo_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/todos/{todo_id}")

    def create_todo(self, text: str, completed: Optional[bool] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"text": text}
        if completed is not None:
            body["completed"] = completed
        return self._request("POST", "/todos", json=body)

    def update_todo(self, todo_id: str, **changes: Any) -> Dict[str, Any]:
        """Send a partial update, e.g. `update_todo(id, completed=True)`."""
        return self._request("PUT", f"/todos/{todo_id}", json=changes)

    def delete_todo(self, todo_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/todos/{todo_id}")

    def health_check(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TodoApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
