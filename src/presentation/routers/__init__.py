"""External-facing routers outside the versioned API (system endpoints)."""

from src.presentation.routers.system import system_router

__all__ = ["system_router"]
