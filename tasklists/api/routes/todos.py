"""Aggregate document routes."""

from typing import Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ...domain.exceptions import AggregateDocumentError, NotADocumentError
from ...domain.models import Todo
from ...services.todo_service import TodoService
from ...container import get_container

router = APIRouter(prefix="/todos", tags=["todos"])


class TodoResponse(BaseModel):
    """Todo response model."""

    marker: str
    task: Optional[str] = None
    text: str
    indentation: str = ""


class TodoGroupResponse(BaseModel):
    """Todos of one source document."""

    path: str
    label: str
    todos: list[TodoResponse] = Field(default_factory=list)


class TodoListResponse(BaseModel):
    """Todo list response model."""

    groups: list[TodoGroupResponse]
    total: int


class AggregateResponse(BaseModel):
    """Aggregation run response model."""

    documents_scanned: int
    groups: int
    todos: int
    changed: bool


class SyncResponse(BaseModel):
    """Reverse sync run response model."""

    documents_patched: int
    lines_patched: int
    skipped_paths: list[str] = Field(default_factory=list)


def get_todo_service() -> TodoService:
    """Get TodoService from container."""
    return get_container().todo_service


def _todo_to_response(todo: Todo) -> TodoResponse:
    return TodoResponse(
        marker=todo.marker,
        task=todo.task.name.lower() if todo.task else None,
        text=todo.text,
        indentation=todo.indentation,
    )


@router.get("", response_model=TodoListResponse)
async def list_todos() -> TodoListResponse:
    """List the todos in the aggregate document, grouped by document."""
    try:
        aggregate = await get_todo_service().read_aggregate()
    except (AggregateDocumentError, NotADocumentError) as e:
        raise HTTPException(status_code=500, detail=str(e))

    return TodoListResponse(
        groups=[
            TodoGroupResponse(
                path=group.path,
                label=group.label,
                todos=[_todo_to_response(t) for t in group.todos],
            )
            for group in aggregate.groups
        ],
        total=aggregate.todo_count,
    )


@router.post("/aggregate", response_model=AggregateResponse)
async def aggregate_todos() -> AggregateResponse:
    """Rebuild the aggregate document now."""
    try:
        result = await get_todo_service().update_todos()
    except (AggregateDocumentError, NotADocumentError) as e:
        raise HTTPException(status_code=500, detail=str(e))

    return AggregateResponse(
        documents_scanned=result.documents_scanned,
        groups=result.groups,
        todos=result.todos,
        changed=result.changed,
    )


@router.post("/sync", response_model=SyncResponse)
async def sync_todos() -> SyncResponse:
    """Push marker edits in the aggregate back to source documents."""
    try:
        result = await get_todo_service().sync_todos()
    except (AggregateDocumentError, NotADocumentError) as e:
        raise HTTPException(status_code=500, detail=str(e))

    return SyncResponse(
        documents_patched=result.documents_patched,
        lines_patched=result.lines_patched,
        skipped_paths=result.skipped_paths,
    )
