#!/usr/bin/env python3
"""
Interactive todo client.

Commands:
  add NAME [| DESCRIPTION]   add a todo
  del N                      delete the Nth todo
  N                          expand or collapse the Nth todo
  ls                         redraw the list
  quit                       exit
"""
import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from api_client import TodoApiClient
from controller import BackendMode, TodoController
from logging_setup import setup_logging
from render import format_rows, render
from store import LocalTaskStore

load_dotenv()

API_URL     = os.getenv("TODO_API_URL", "http://localhost:3000/api")
LOCAL_STORE = Path(os.getenv("TODO_LOCAL_STORE", Path.home() / ".todo-local.json"))
LOG_LEVEL   = os.getenv("TODO_LOG_LEVEL", "WARNING")


def screen(controller: TodoController) -> str:
    header = "todos" if controller.mode is BackendMode.REMOTE else f"todos ({controller.mode.value})"
    return f"{header}\n{format_rows(render(controller.tasks, controller.expanded_index))}"


def _position(controller: TodoController, arg: str) -> int | None:
    try:
        index = int(arg) - 1
    except ValueError:
        return None
    return index if 0 <= index < len(controller.tasks) else None


async def handle_command(controller: TodoController, line: str) -> str | None:
    """Run one command line. Returns the text to show, or None to exit."""
    cmd, _, arg = line.strip().partition(" ")
    arg = arg.strip()

    if cmd in ("quit", "exit", "q"):
        return None
    if cmd == "add":
        name, _, description = arg.partition("|")
        if await controller.add(name, description) is None:
            return "todo name is required"
        return screen(controller)
    if cmd == "del":
        index = _position(controller, arg)
        if index is None:
            return f"no todo at {arg!r}"
        await controller.delete(controller.tasks[index].id)
        return screen(controller)
    if cmd in ("", "ls"):
        return screen(controller)
    index = _position(controller, cmd)
    if index is not None:
        controller.toggle_selection(index)
        return screen(controller)
    return f"unknown command {cmd!r}"


async def run() -> None:
    async with TodoApiClient(API_URL) as api:
        controller = TodoController(api, LocalTaskStore(LOCAL_STORE))
        await controller.load()
        print(screen(controller))
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            output = await handle_command(controller, line)
            if output is None:
                break
            print(output)


def main():
    setup_logging(LOG_LEVEL)
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
