"""FastAPI application entry-point for the Portfolio Tracker API.

Configures CORS, rate limiting, lifespan startup/shutdown, and mounts all
route modules.
Run with:  uvicorn src.api.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.api.responses import error_response
from src.api.routes import fx_rates, health, historical_data, position_sets, positions
from src.core.config import settings
from src.core.database import check_db_connection, close_db_connection
from src.core.exceptions import NotImplementedFeatureError
from src.portfolio.demo_data import initialize_database_on_startup

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan -- run once at startup / shutdown
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Verify the database and seed demo data on startup; close on shutdown."""
    # Startup
    if check_db_connection():
        logger.info("Database connection verified")
    else:
        logger.error("Database connection failed")

    try:
        if initialize_database_on_startup(settings.seed_demo_data):
            logger.info("Demo position set created")
    except Exception as exc:
        logger.error("Database initialization failed: %s", exc)

    yield
    # Shutdown
    close_db_connection()
    logger.info("Database connection closed")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
openapi_tags = [
    {"name": "Health", "description": "Health check endpoints"},
    {
        "name": "Position Sets",
        "description": "Named position sets: list, activate, delete, export, import",
    },
    {"name": "Positions", "description": "Positions of the active set"},
    {
        "name": "Historical Data",
        "description": "Freshness and counts of stored prices and FX rates",
    },
    {"name": "FX Rates", "description": "Stored FX rates by currency pair and date"},
]

app = FastAPI(
    title="Portfolio Tracker API",
    version="0.1.0",
    description=(
        "REST API for the Portfolio Tracker. Manages named position sets, "
        "the active set's holdings, and the freshness of stored price history."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

# Rate limiting
limiter = Limiter(key_func=get_remote_address, default_limits=["100/minute"])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(NotImplementedFeatureError)
async def not_implemented_handler(request: Request, exc: NotImplementedFeatureError):
    return error_response(501, str(exc))


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
_allowed_origins = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://localhost:8081",
]
if settings.allowed_origins:
    _allowed_origins.extend(
        o.strip() for o in settings.allowed_origins.split(",") if o.strip()
    )
if settings.debug:
    _allowed_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
# Health endpoints live at the root (no prefix)
app.include_router(health.router)

# All data endpoints sit under /api
app.include_router(position_sets.router, prefix="/api")
app.include_router(positions.router, prefix="/api")
app.include_router(historical_data.router, prefix="/api")
app.include_router(fx_rates.router, prefix="/api")
