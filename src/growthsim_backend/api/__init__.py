"""API layer exposing the round coordinator over HTTP and WebSocket."""

from growthsim_backend.api.app import create_api

__all__ = ["create_api"]
