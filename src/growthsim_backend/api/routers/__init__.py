"""Route definitions for public HTTP and WebSocket endpoints."""

from growthsim_backend.api.routers.rounds import router as rounds_router
from growthsim_backend.api.routers.session import router as session_router

__all__ = ["rounds_router", "session_router"]
