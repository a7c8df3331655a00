"""Document and task API endpoints."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from orgflow.api.changes import commit
from orgflow.api.models import AddTaskRequest, DocumentResponse, TaskResponse
from orgflow.core.task import Task
from orgflow.document.document import Document
from orgflow.errors import FormatError
from orgflow.factory import get_connection_manager, get_document_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _document_response() -> DocumentResponse:
    store = get_document_store()
    tasks, notes = store.size()
    return DocumentResponse(
        path=str(store.path),
        tasks=tasks,
        notes=notes,
        load_errors=[str(e) for e in store.load_errors],
        writable=store.writable,
    )


@router.get("/document", response_model=DocumentResponse)
async def get_document() -> DocumentResponse:
    """Return document path and task/note counts."""
    return _document_response()


@router.post("/document/reload", response_model=DocumentResponse)
async def reload_document() -> DocumentResponse:
    """Force a reload from disk, e.g. after editing the file by hand."""
    store = get_document_store()
    await asyncio.to_thread(store.reload)
    await get_connection_manager().notify_document_changed(store.size())
    return _document_response()


@router.get("/tasks", response_model=list[TaskResponse])
async def list_tasks(
    project: str | None = None,
    no_project: bool = False,
    sort: str | None = None,
) -> list[TaskResponse]:
    """List tasks of the document.

    Args:
        project: Only tasks carrying this project tag (with or without ``+``)
        no_project: Only tasks without any project tag
        sort: ``status`` lists open tasks before completed ones

    Returns:
        Tasks with their index in the document
    """
    if sort not in (None, "status"):
        raise HTTPException(status_code=400, detail=f"Unknown sort: {sort}")
    if project is not None and not project.startswith("+"):
        project = f"+{project}"

    store = get_document_store()
    selected = store.select_tasks(
        project=project,
        no_project=no_project,
        sort_by_status=sort == "status",
    )
    return [TaskResponse.from_task(index, task) for index, task in selected]


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def add_task(request: AddTaskRequest) -> TaskResponse:
    """Add a task from quick-entry text; it is stamped as created today.

    Raises:
        HTTPException: 400 if the text is not a valid task line
    """
    try:
        task = Task.with_today(request.text)
    except FormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    def append(document: Document) -> TaskResponse:
        document.append_task(task)
        return TaskResponse.from_task(len(document.tasks) - 1, task)

    response = await commit(append)
    logger.info(f"Added task {response.index}: {response.line}")
    return response


@router.post("/tasks/{index}/toggle", response_model=TaskResponse)
async def toggle_task(index: int) -> TaskResponse:
    """Toggle completion of the task at index.

    Raises:
        HTTPException: 404 if there is no task at index
    """

    def toggle(document: Document) -> TaskResponse:
        if not 0 <= index < len(document.tasks):
            raise IndexError(f"Task not found: {index}")
        task = document.tasks[index]
        task.toggle_completion()
        return TaskResponse.from_task(index, task)

    return await commit(toggle)
