"""HTTP routes, one router per concern."""

from tenkai.routes.ai import router as ai_router
from tenkai.routes.auth import router as auth_router
from tenkai.routes.git import router as git_router
from tenkai.routes.local import router as local_router
from tenkai.routes.root import router as root_router
from tenkai.routes.settings import router as settings_router

__all__ = [
    "ai_router",
    "auth_router",
    "git_router",
    "local_router",
    "root_router",
    "settings_router",
]
