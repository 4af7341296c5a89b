"""Main FastAPI application with hexagonal architecture."""

from __future__ import annotations

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from bowling_stats.cache import SnapshotCache
from bowling_stats.config import cache_config_from_env, stats_config_from_env

from . import __version__
from .api.rest.routes import get_store, router as dashboard_router
from .application.ports.score_store import ScoreStorePort
from .infrastructure.adapters.store_adapter import HostedStoreAdapter

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: the app owns the store adapter and the snapshot cache
    app.state.store = HostedStoreAdapter()
    app.state.snapshot_cache = SnapshotCache(cache_config_from_env())
    app.state.stats_config = stats_config_from_env()
    yield
    # Shutdown
    app.state.snapshot_cache.clear()


app = FastAPI(
    title="Bowling League Dashboard API",
    description="Rankings, trends and fun statistics for a bowling league",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    store_configured: bool


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "Bowling League Dashboard API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "dashboard": "GET /api/dashboard",
            "recent_averages": "GET /api/recent-averages",
            "date_groups": "GET /api/history/dates",
            "highlights": "GET /api/highlights",
            "synergy": "GET /api/members/{member_id}/synergy",
            "inconsistency": "GET /api/fun/inconsistency",
            "lucky_lanes": "GET /api/fun/lucky-lanes",
            "comebacks": "GET /api/fun/comebacks",
            "near_misses": "GET /api/fun/near-misses",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check(store: ScoreStorePort = Depends(get_store)):
    """Check API health and store configuration status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        store_configured=store.configured,
    )


app.include_router(dashboard_router)
