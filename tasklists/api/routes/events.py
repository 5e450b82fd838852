"""Change notification routes."""

from typing import Any, Optional
from fastapi import APIRouter
from pydantic import BaseModel

from ...domain.models import DocumentEvent, EventKind
from ...container import get_container

router = APIRouter(prefix="/events", tags=["events"])


class EventRequest(BaseModel):
    """Document change notification."""

    kind: EventKind
    path: str = ""
    old_path: Optional[str] = None


@router.post("", status_code=202)
async def post_event(request: EventRequest) -> dict[str, Any]:
    """Queue a run for a created, deleted, renamed or modified document."""
    queue = get_container().event_queue
    queue.submit(
        DocumentEvent(kind=request.kind, path=request.path, old_path=request.old_path)
    )
    return {"status": "queued", "pending": queue.pending}


@router.get("/pending")
async def pending_events() -> dict[str, Any]:
    """Report the event queue state."""
    queue = get_container().event_queue
    return {
        "pending": queue.pending,
        "running": queue.is_running,
        "runs": queue.runs,
    }
