"""API routes for CineScout.

- GET /trip?query=...        cinematic travel guide for a city or a vibe
- GET /guides/explore        most recently generated guides (explore wall)

Services are built once at startup and reach the handlers through
FastAPI dependencies, so tests can swap them with ``dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from cinescout.models import CacheEntry, TravelGuide
from cinescout.services import CacheReadError, GuideCache, TripOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_QUERY_LENGTH = 300
DEFAULT_EXPLORE_LIMIT = 12


def get_orchestrator(request: Request) -> TripOrchestrator:
    return request.app.state.services.orchestrator


def get_guide_cache(request: Request) -> GuideCache:
    return request.app.state.services.cache


@router.get("/trip", response_model=TravelGuide, response_model_exclude_none=True)
async def plan_trip(
    query: Optional[str] = Query(None, description="City name or vibe description"),
    orchestrator: TripOrchestrator = Depends(get_orchestrator),
) -> TravelGuide:
    """Build (or serve from cache) the cinematic guide for ``query``.

    Errors:
    - 400 when ``query`` is missing, blank or too long
    - 500 when the guide could not be generated
    """
    if query is None or not query.strip():
        raise HTTPException(
            status_code=400,
            detail='The "query" parameter is required (e.g. /api/trip?query=Kyoto).',
        )
    if len(query.strip()) > MAX_QUERY_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"The query is too long (maximum {MAX_QUERY_LENGTH} characters).",
        )
    return await orchestrator.plan_trip(query)


@router.get("/guides/explore", response_model=list[CacheEntry], response_model_exclude_none=True)
async def explore_guides(
    limit: int = Query(DEFAULT_EXPLORE_LIMIT, ge=1, le=50),
    cache: GuideCache = Depends(get_guide_cache),
) -> list[CacheEntry]:
    """Latest guides from the cache, newest first."""
    try:
        return await cache.recent(limit)
    except Exception as e:
        logger.error(f"[CACHE] Could not list recent guides: {e}")
        raise CacheReadError(str(e)) from e
