"""Routes package for API endpoints."""

from .optimization_routes import router as optimization_router
from .schedule_routes import router as schedule_router

__all__ = ["optimization_router", "schedule_router"]
