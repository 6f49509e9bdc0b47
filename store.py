from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from models import Task, default_tasks, next_id_after

logger = logging.getLogger(__name__)

TODOS_KEY = "todos"
NEXT_ID_KEY = "nextTodoId"

_task_list = TypeAdapter(list[Task])


class StoreError(Exception):
    """A backing file could not be read, parsed or written."""


class TaskStore(Protocol):
    """
    Persistence contract shared by the server file store and the client's
    local fallback store. Insertion order is preserved across list() calls.
    """

    def list(self) -> list[Task]: ...

    def put(self, task_id: int | None, name: str, description: str = "") -> Task: ...

    def remove(self, task_id: int) -> bool: ...


def parse_tasks(raw: str | bytes, source: object = "<string>") -> list[Task]:
    try:
        return _task_list.validate_json(raw)
    except ValidationError as e:
        raise StoreError(f"Invalid task data in {source}: {e.error_count()} error(s)") from e
    except ValueError as e:
        raise StoreError(f"Undecodable task data in {source}: {e}") from e


def dump_tasks(tasks: list[Task], indent: int | None = None) -> str:
    return json.dumps([t.model_dump() for t in tasks], indent=indent)


def _read_bytes(path: Path) -> bytes | None:
    # Raw bytes, so bad encodings surface from the JSON parsers as parse errors.
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StoreError(f"Cannot read {path}: {e}") from e


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise StoreError(f"Cannot write {path}: {e}") from e


def _new_task(task_id: int, name: str, description: str, existing: list[Task]) -> Task:
    if any(t.id == task_id for t in existing):
        raise ValueError(f"Task id {task_id} is already taken")
    return Task(id=task_id, name=name, description=description)


class FileTaskStore:
    """
    The server's task list: one JSON array in one file.

    Every call reads the whole file and writes it back. There is no locking,
    so concurrent writers race and the last one wins.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def initialize(self) -> bool:
        """Create the file with the default tasks. Returns False if it already existed."""
        if self.path.exists():
            return False
        self._write(default_tasks())
        logger.info("Created %s with default tasks", self.path)
        return True

    def _read(self) -> list[Task]:
        raw = _read_bytes(self.path)
        if raw is None:
            return []
        return parse_tasks(raw, self.path)

    def _write(self, tasks: list[Task]) -> None:
        _write_text(self.path, dump_tasks(tasks, indent=2))

    def list(self) -> list[Task]:
        return self._read()

    def put(self, task_id: int | None, name: str, description: str = "") -> Task:
        tasks = self._read()
        if task_id is None:
            task_id = next_id_after(tasks)
        task = _new_task(task_id, name, description, tasks)
        tasks.append(task)
        self._write(tasks)
        return task

    def remove(self, task_id: int) -> bool:
        tasks = self._read()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            return False
        self._write(kept)
        return True


class KeyValueFile:
    """String values under string keys in a single JSON object file, like browser localStorage."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self, discard_invalid: bool = False) -> dict[str, str]:
        raw = _read_bytes(self.path)
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            data = None
        if isinstance(data, dict):
            return data
        if discard_invalid:
            logger.warning("Discarding unreadable contents of %s", self.path)
            return {}
        raise StoreError(f"{self.path} does not hold a JSON object")

    def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        # A write starts over on garbage rather than failing forever on it.
        data = self._load(discard_invalid=True)
        data[key] = value
        _write_text(self.path, json.dumps(data, indent=2))


class LocalTaskStore:
    """
    Client-side fallback store.

    The task list and the next-id counter live under separate keys
    (``todos`` and ``nextTodoId``) so either can be read or written alone.
    """

    def __init__(self, path: str | Path) -> None:
        self.items = KeyValueFile(path)

    @property
    def path(self) -> Path:
        return self.items.path

    def read_tasks(self) -> list[Task] | None:
        """The stored list, or None when nothing has been stored yet."""
        raw = self.items.get_item(TODOS_KEY)
        if raw is None:
            return None
        return parse_tasks(raw, f"{self.path}[{TODOS_KEY}]")

    def read_next_id(self) -> int | None:
        raw = self.items.get_item(NEXT_ID_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-numeric %s=%r", NEXT_ID_KEY, raw)
            return None

    def write_tasks(self, tasks: list[Task]) -> None:
        self.items.set_item(TODOS_KEY, dump_tasks(tasks))

    def write_next_id(self, next_id: int) -> None:
        self.items.set_item(NEXT_ID_KEY, str(next_id))

    def save(self, tasks: list[Task], next_id: int) -> None:
        self.write_tasks(tasks)
        self.write_next_id(next_id)

    def _next_id(self, tasks: list[Task]) -> int:
        return max(self.read_next_id() or 1, next_id_after(tasks))

    def list(self) -> list[Task]:
        return self.read_tasks() or []

    def put(self, task_id: int | None, name: str, description: str = "") -> Task:
        tasks = self.list()
        if task_id is None:
            task_id = self._next_id(tasks)
        task = _new_task(task_id, name, description, tasks)
        tasks.append(task)
        self.save(tasks, self._next_id(tasks))
        return task

    def remove(self, task_id: int) -> bool:
        tasks = self.list()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            return False
        # The counter never moves backwards, so removed ids are not reused.
        self.save(kept, self._next_id(tasks))
        return True
