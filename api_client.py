"""Async client for the todo HTTP API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from models import Task
from store import StoreError, parse_tasks

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The API could not be reached or did not answer with success."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TodoApiClient:
    """
    Thin wrapper over the /api/todos endpoints.

    Transport errors, timeouts, non-2xx responses and undecodable bodies all
    surface as BackendError; callers do not need to tell them apart.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TodoApiClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise BackendError(f"{method} {url} failed: {e}") from e
        if not response.is_success:
            logger.warning("%s %s: HTTP %d", method, url, response.status_code)
            raise BackendError(
                f"{method} {url}: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def fetch_all(self) -> list[Task]:
        response = await self._request("GET", "/todos")
        try:
            return parse_tasks(response.content, "GET /todos")
        except StoreError as e:
            raise BackendError(str(e)) from e

    async def create(self, name: str, description: str = "") -> Task:
        response = await self._request(
            "POST", "/todos", json={"name": name, "description": description}
        )
        try:
            return Task.model_validate_json(response.content)
        except ValidationError as e:
            raise BackendError(f"Unexpected create response: {e.error_count()} error(s)") from e

    async def delete(self, task_id: int) -> None:
        await self._request("DELETE", f"/todos/{task_id}")
