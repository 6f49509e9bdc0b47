from typing import NamedTuple, Sequence

from models import Task


class RenderedRow(NamedTuple):
    index: int
    name: str
    description: str | None  # None unless the row is expanded


def render(tasks: Sequence[Task], expanded_index: int | None) -> list[RenderedRow]:
    return [
        RenderedRow(
            index=i,
            name=task.name,
            description=(task.description or "") if i == expanded_index else None,
        )
        for i, task in enumerate(tasks)
    ]


def format_rows(rows: Sequence[RenderedRow]) -> str:
    if not rows:
        return "  (no todos)"
    lines = []
    for row in rows:
        marker = "v" if row.description is not None else ">"
        lines.append(f"{row.index + 1:>3} {marker} {row.name}")
        if row.description is not None:
            lines.append(f"        {row.description}")
    return "\n".join(lines)
