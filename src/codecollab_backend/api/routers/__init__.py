"""Route definitions for public HTTP endpoints."""

from codecollab_backend.api.routers.auth import router as auth_router
from codecollab_backend.api.routers.feedback import router as feedback_router
from codecollab_backend.api.routers.groups import router as groups_router
from codecollab_backend.api.routers.questions import router as questions_router
from codecollab_backend.api.routers.system import router as system_router

__all__ = [
    "auth_router",
    "feedback_router",
    "groups_router",
    "questions_router",
    "system_router",
]
