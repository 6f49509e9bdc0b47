import logging
import os
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
load_dotenv()

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from models import Task, TaskIn
from store import FileTaskStore, StoreError, TaskStore

BASE_DIR   = Path(__file__).parent
DATA_FILE  = Path(os.getenv("TODO_DATA_FILE", BASE_DIR / "todos.json"))
STATIC_DIR = Path(os.getenv("TODO_STATIC_DIR", BASE_DIR / "static"))

logger = logging.getLogger(__name__)

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.on_event("startup")
def startup():
    FileTaskStore(DATA_FILE).initialize()


def get_store() -> TaskStore:
    return FileTaskStore(DATA_FILE)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


@app.get("/api/todos", response_model=list[Task])
def list_todos(store: Annotated[TaskStore, Depends(get_store)]):
    try:
        return store.list()
    except StoreError:
        logger.exception("Error reading todos")
        return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch todos")


@app.post("/api/todos", status_code=status.HTTP_201_CREATED, response_model=Task)
def create_todo(req: TaskIn, store: Annotated[TaskStore, Depends(get_store)]):
    name = (req.name or "").strip()
    if not name:
        return error(status.HTTP_400_BAD_REQUEST, "Todo name is required")
    try:
        task = store.put(None, name, (req.description or "").strip())
    except StoreError:
        logger.exception("Error writing todos")
        return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create todo")
    logger.info("Created todo id=%s", task.id)
    return task


@app.delete("/api/todos/{todo_id}")
def delete_todo(todo_id: str, store: Annotated[TaskStore, Depends(get_store)]):
    try:
        task_id = int(todo_id)
    except ValueError:
        return error(status.HTTP_404_NOT_FOUND, "Todo not found")
    try:
        removed = store.remove(task_id)
    except StoreError:
        logger.exception("Error deleting todo id=%s", task_id)
        return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete todo")
    if not removed:
        return error(status.HTTP_404_NOT_FOUND, "Todo not found")
    logger.info("Deleted todo id=%s", task_id)
    return {"success": True}


# Mounted last so the API routes above take precedence over static files.
if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
