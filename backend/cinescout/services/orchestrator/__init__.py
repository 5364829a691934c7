"""Trip orchestrator: resolve, cache, generate, enrich."""

from .service import GuideBuildError, TripOrchestrator

__all__ = [
    "GuideBuildError",
    "TripOrchestrator",
]
