"""HTTP API for CineScout."""

from .routes import get_guide_cache, get_orchestrator, router

__all__ = [
    "get_guide_cache",
    "get_orchestrator",
    "router",
]
