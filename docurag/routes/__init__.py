"""FastAPI routes package."""

from docurag.routes.actions import router as actions_router
from docurag.routes.health import router as health_router
from docurag.routes.page import router as page_router

__all__ = ["actions_router", "health_router", "page_router"]
