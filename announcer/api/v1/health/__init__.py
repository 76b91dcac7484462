"""Health check endpoints."""

from announcer.api.v1.health.router import router

__all__ = ["router"]
