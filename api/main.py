"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from api.routes import game, stats
from api.stats_store import get_stats_store, set_stats_store
from config import config
from war.errors import InvariantViolationError

logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the table rules and connect the stats backend before serving."""
    rules = game.get_engine().rules
    logger.info(
        "Serving War: %d cards, %s wars, forced war every %s moves, %dms cooldown",
        rules.total_cards,
        rules.war_policy,
        rules.forced_war_interval or "-",
        rules.cooldown_ms,
    )
    store = await get_stats_store()
    logger.info("Stats backend: %s", type(store).__name__)
    yield
    await store.close()
    set_stats_store(None)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Too many requests from one client."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _invariant_violation_handler(request: Request, exc: InvariantViolationError) -> JSONResponse:
    """Corrupted game state: the game cannot continue."""
    logger.error(
        "Invariant violation on %s: expected %d cards, found %d",
        request.url.path,
        exc.expected,
        exc.actual,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Game state is corrupted, start a new game"},
    )


app = FastAPI(
    title="War",
    description="Stateless War card game engine API",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(InvariantViolationError, _invariant_violation_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
