from typing import Iterable

from pydantic import BaseModel


class Task(BaseModel):
    id: int
    name: str
    description: str = ""


class TaskIn(BaseModel):
    name: str | None = None
    description: str | None = None


def default_tasks() -> list[Task]:
    return [
        Task(id=1, name="todo 1", description=""),
        Task(id=2, name="todo 2", description=""),
    ]


def next_id_after(tasks: Iterable[Task]) -> int:
    """One past the largest id, or 1 for an empty list."""
    return max((t.id for t in tasks), default=0) + 1
