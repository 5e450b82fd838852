"""API route modules."""

from .events import router as events_router
from .todos import router as todos_router

__all__ = ["events_router", "todos_router"]
