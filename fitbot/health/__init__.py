"""FitBot health endpoints."""

from .router import router as health_router

__all__ = ["health_router"]
