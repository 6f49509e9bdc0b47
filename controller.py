"""
Client-side todo state with remote/local failover.

The controller starts out talking to the HTTP API. The first time any API
call fails it switches to the local store for the rest of the session and
finishes the current action there, so an add or delete is never dropped.
There is no way back to the API short of creating a new controller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from api_client import BackendError, TodoApiClient
from models import Task, default_tasks, next_id_after
from store import LocalTaskStore, StoreError

logger = logging.getLogger(__name__)


class BackendMode(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
    # The local store failed too; changes live only in this process.
    MEMORY = "memory"


class TodoController:
    def __init__(self, api: TodoApiClient, local_store: LocalTaskStore) -> None:
        self.api = api
        self.local_store = local_store
        self.mode = BackendMode.REMOTE
        self.tasks: list[Task] = []
        self.next_id = 1
        self.expanded_index: int | None = None

    @property
    def use_backend(self) -> bool:
        return self.mode is BackendMode.REMOTE

    def index_of(self, task_id: int) -> int | None:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return None

    # ---- state machine ----

    def _fail_over(self, action: str) -> None:
        if self.mode is not BackendMode.REMOTE:
            return
        logger.warning("Backend unavailable during %s, switching to local storage", action)
        self.mode = BackendMode.LOCAL
        if action != "load":
            # Later local puts and removes build on the last view of the server's list.
            self._write_local(lambda store: store.save(self.tasks, self.next_id))

    def _replace(self, tasks: list[Task], next_id: int) -> None:
        self.tasks = list(tasks)
        self.next_id = max(next_id, next_id_after(self.tasks))
        if self.expanded_index is not None and self.expanded_index >= len(self.tasks):
            self.expanded_index = None

    def _append(self, task: Task) -> None:
        self.tasks.append(task)
        self.next_id = max(self.next_id, task.id + 1)

    def _repair_selection(self, removed_index: int) -> None:
        if self.expanded_index is None:
            return
        if self.expanded_index == removed_index:
            self.expanded_index = None
        elif self.expanded_index > removed_index:
            self.expanded_index -= 1

    def _write_local(self, write: Callable[[LocalTaskStore], object]) -> None:
        if self.mode is not BackendMode.LOCAL:
            return
        try:
            write(self.local_store)
        except StoreError as e:
            logger.warning("Local store write failed (%s), keeping todos in memory only", e)
            self.mode = BackendMode.MEMORY

    # ---- load ----

    async def load(self) -> None:
        """Populate the list from the API, or from the local store once the API is gone."""
        self.expanded_index = None
        if self.use_backend:
            if await self._refresh_from_remote():
                return
            self._fail_over("load")
        if self.mode is BackendMode.LOCAL:
            self._load_local()

    async def _refresh_from_remote(self) -> bool:
        try:
            tasks = await self.api.fetch_all()
        except BackendError:
            return False
        self._replace(tasks, next_id_after(tasks))
        return True

    def _load_local(self) -> None:
        try:
            tasks = self.local_store.read_tasks()
            stored_next = self.local_store.read_next_id()
        except StoreError as e:
            logger.warning("Local store unreadable (%s), starting from defaults", e)
            tasks, stored_next = None, None
        if tasks is not None:
            self._replace(tasks, stored_next or 1)
            return
        self._replace(default_tasks(), 1)
        self._write_local(lambda store: store.save(self.tasks, self.next_id))

    # ---- add ----

    async def add(self, name: str, description: str = "") -> Task | None:
        """Create a todo. Blank names are ignored and return None."""
        name = name.strip()
        description = (description or "").strip()
        if not name:
            return None
        if self.use_backend:
            task = await self._remote_add(name, description)
            if task is not None:
                return task
            self._fail_over("add")
        return self._local_add(name, description)

    async def _remote_add(self, name: str, description: str) -> Task | None:
        try:
            task = await self.api.create(name, description)
        except BackendError:
            return None
        self.expanded_index = None
        if not await self._refresh_from_remote():
            # The server has the todo but we could not re-read the list.
            self._append(task)
            self._fail_over("add")
        return task

    def _local_add(self, name: str, description: str) -> Task:
        task = Task(id=self.next_id, name=name, description=description)
        self._append(task)
        self.expanded_index = None
        self._write_local(lambda store: store.put(task.id, task.name, task.description))
        return task

    # ---- delete ----

    async def delete(self, task_id: int) -> bool:
        """Delete a todo by id. Returns False when no such todo exists."""
        if self.use_backend:
            if await self._remote_delete(task_id):
                return True
            self._fail_over("delete")
        return self._local_delete(task_id)

    async def _remote_delete(self, task_id: int) -> bool:
        index = self.index_of(task_id)
        try:
            await self.api.delete(task_id)
        except BackendError:
            return False
        if index is not None:
            self._repair_selection(index)
        if not await self._refresh_from_remote():
            self.tasks = [t for t in self.tasks if t.id != task_id]
            self._fail_over("delete")
        return True

    def _local_delete(self, task_id: int) -> bool:
        index = self.index_of(task_id)
        if index is None:
            logger.info("Todo id=%s not found", task_id)
            return False
        del self.tasks[index]
        self._repair_selection(index)
        self._write_local(lambda store: store.remove(task_id))
        return True

    # ---- selection ----

    def toggle_selection(self, index: int) -> int | None:
        """Expand the todo at index, or collapse it if it is already expanded."""
        if not 0 <= index < len(self.tasks):
            return self.expanded_index
        self.expanded_index = None if self.expanded_index == index else index
        return self.expanded_index
