"""
Craft Gateway — Application entry point.

Bootstraps FastAPI, wires up middleware and rate limiting, registers route
groups, and owns the in-memory state lifecycle (crafting instructions and
the discovery counter).

Extension points:
  - Add new route groups with app.include_router() below
  - Add new middleware in the middleware block
  - Change startup behaviour in the lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from craft_gateway.ai.prompts import load_crafting_instructions
from craft_gateway.core.body_limit import BodySizeLimitMiddleware
from craft_gateway.core.config import settings
from craft_gateway.core.errors import register_exception_handlers
from craft_gateway.core.rate_limit import TIERS, limiter
from craft_gateway.routes.craft import router as craft_router
from craft_gateway.routes.discovery import router as discovery_router
from craft_gateway.routes.health import router as health_router
from craft_gateway.services.discovery import DiscoveryCounter

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage startup and shutdown lifecycle.

    Startup fails (and the server exits) if the crafting instructions can't
    be loaded — serving crafts without them would return junk.
    """
    logger.info("Starting Craft Gateway (env: %s)", settings.environment)
    try:
        app.state.crafting_instructions = load_crafting_instructions()
    except Exception:
        logger.critical("Failed to load crafting instructions — refusing to start")
        raise
    app.state.discovery_counter = DiscoveryCounter()

    if limiter.enabled:
        for tier in TIERS.values():
            logger.info("Rate limit %-7s: %s per IP", tier.name, tier.limit)
    else:
        logger.warning("Rate limiting DISABLED (RATE_LIMIT_ENABLED=false)")

    yield

    logger.info(
        "Shutting down Craft Gateway (%d distinct discoveries dropped)",
        len(app.state.discovery_counter),
    )
    app.state.discovery_counter.clear()


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Craft Gateway",
    description=(
        "Rate-limited relay for a crafting game: combines items through the "
        "OpenAI API without exposing the key, and counts discoveries."
    ),
    version="0.1.0",
    lifespan=lifespan,
    # Disable docs in production to reduce attack surface
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
# Attach the limiter to app state so slowapi can find it.
# Routes opt-in with @limit_tier(...) + a request: Request parameter.
app.state.limiter = limiter
register_exception_handlers(app)


# ─── Middleware ─────────────────────────────────────────────────────────────────
# Bodies over MAX_BODY_BYTES get 413, whether declared or streamed.
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)


# CORS: the game front-end may be hosted anywhere; restrict in production
# by setting CORS_ORIGINS_STR. No cookies are involved, so no credentials.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, tags=["health"])
app.include_router(discovery_router)
app.include_router(craft_router)
