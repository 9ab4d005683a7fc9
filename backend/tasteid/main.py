"""
TasteID - Main FastAPI Application

Profile grids of media collections:
- Up to nine collections per user on a 3x3 grid
- Dense item ordering with a cover image taken from the first item
- Swipe-to-save into "My Likes" and the saved-items list
- Movie, TV, anime, manga, game, book and art search
- JWT Authentication behind an OAuth provider bridge
- Rate Limiting
- Structured Logging
- Prometheus Metrics
"""

from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .api import api_router
from .exceptions import TasteIDError, UnauthorizedError
from .services.collections import GRID_SIZE
from .utils.database import engine, init_db
from .services.search_cache import SearchCacheService
from .utils.logging import (
    setup_logging,
    get_logger,
    configure_uvicorn_logging,
    bind_request_context,
    clear_request_context,
)
from .utils.metrics import setup_metrics
from .utils.rate_limit import limiter

# Setup structured logging
setup_logging(log_level=settings.LOG_LEVEL)
configure_uvicorn_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    # Startup
    logger.info("Starting TasteID backend", version=settings.VERSION)

    logger.info("Initializing database")
    init_db()

    logger.info("Checking Redis connection")
    if SearchCacheService().health_check():
        logger.info("Redis connection successful")
    else:
        logger.warning("Redis connection failed - search results will not be cached")

    logger.info("Search providers", **configured_search_providers())
    logger.info("TasteID backend started successfully")

    yield

    # Shutdown
    logger.info("Shutting down TasteID backend")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # TasteID API

    Curate movies, shows, anime, manga, games, books and art into a 3x3
    profile grid, then swipe through collections.

    ## Collections

    - A user owns at most nine collections, one per grid slot
    - New collections take the lowest free slot
    - Items keep a gap-free order; the first item's image is the cover

    ## Saving

    - Swiping right saves the item into "My Likes" (created on demand)
    - Saved items are also kept in a per-user quick-lookup list

    ## Search

    - `GET /api/v1/search/{media_type}?query=...`
    - Upstream failures fall back to curated results or an empty list

    ## Errors

    Domain errors return `{"detail": ..., "code": ...}` where `code` is one of
    `validation_error`, `capacity_exceeded`, `not_found`, `unauthorized`,
    `forbidden`.
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Provider session exchange, token refresh"},
        {"name": "users", "description": "Profiles, onboarding and username checks"},
        {"name": "collections", "description": "Grid collections and their items"},
        {"name": "saved-items", "description": "Swipe-to-save and the saved-items list"},
        {"name": "search", "description": "Media metadata search"},
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Setup Prometheus metrics
setup_metrics(app)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(TasteIDError)
async def domain_error_handler(request: Request, exc: TasteIDError):
    """Map domain errors to their HTTP status with a stable code"""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    logger.info(
        "Request rejected",
        method=request.method,
        url=str(request.url),
        code=exc.code,
        detail=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


# Middleware for logging requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests under a request id echoed in X-Request-ID"""
    request_id = bind_request_context(request.headers.get("X-Request-ID"))
    logger.info(
        "Request received",
        method=request.method,
        url=str(request.url),
        client=request.client.host if request.client else None
    )

    try:
        response = await call_next(request)
    finally:
        clear_request_context()

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        request_id=request_id,
    )

    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/", tags=["root"])
def root():
    """Service banner"""
    return {
        "message": "TasteID API",
        "version": settings.VERSION,
        "docs": "/docs",
        "grid_size": GRID_SIZE,
    }


def database_reachable() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        return False


def configured_search_providers() -> dict:
    """Which optional upstream credentials are present; unset ones degrade to fallbacks"""
    return {
        "tmdb": bool(settings.TMDB_READ_ACCESS_TOKEN),
        "igdb": bool(settings.IGDB_CLIENT_ID and settings.IGDB_ACCESS_TOKEN),
        "google_books_key": bool(settings.GOOGLE_BOOKS_KEY),
    }


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check():
    """
    Liveness plus dependency status

    Redis only caches search results, so a missing Redis degrades the
    service without making it unhealthy.
    """
    db_ok = database_reachable()
    redis_ok = SearchCacheService().health_check()

    if not db_ok:
        overall = "unhealthy"
    elif not redis_ok:
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "status": overall,
        "database": "connected" if db_ok else "disconnected",
        "redis": "connected" if redis_ok else "disconnected",
        "search_providers": configured_search_providers(),
        "version": settings.VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tasteid.main:app", host="0.0.0.0", port=8000, reload=True)
