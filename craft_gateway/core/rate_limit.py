"""
rate_limit.py — Global rate limiter instance and the two limit tiers.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library)
with a fixed-window strategy and in-memory storage. Requests are keyed by
client IP address; state is local to this process.

Tiers:
  general — 100 per 15 minutes, one counter per client shared by every
            public endpoint (scope "general")
  strict  — 10 per minute, combination endpoint only (scope "strict")

Usage in routes:
    from fastapi import Request
    from craft_gateway.core.rate_limit import GENERAL, limit_tier

    @router.post("/some-endpoint")
    @limit_tier(GENERAL)
    async def my_endpoint(request: Request, payload: MyRequest):
        ...

Wire into app (in main.py):
    app.state.limiter = limiter
    register_exception_handlers(app)   # handles slowapi's RateLimitExceeded
"""

import logging
from dataclasses import dataclass

from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from craft_gateway.core.config import settings

logger = logging.getLogger(__name__)

GENERAL = "general"
STRICT = "strict"


@dataclass(frozen=True)
class RateLimitTier:
    name: str
    limit: str  # `limits` notation, e.g. "10 per minute"
    message: str

    @property
    def scope(self) -> str:
        return self.name

    @property
    def item(self) -> RateLimitItem:
        return parse(self.limit)


TIERS: dict[str, RateLimitTier] = {
    GENERAL: RateLimitTier(
        name=GENERAL,
        limit=settings.general_rate_limit,
        message="Too many requests, please try again later.",
    ),
    STRICT: RateLimitTier(
        name=STRICT,
        limit=settings.strict_rate_limit,
        message="Crafting too fast! Please wait a moment.",
    ),
}

# Fixed window: the count resets once the window has elapsed, and every hit
# (admitted or not) increments it.
limiter = Limiter(
    key_func=get_remote_address,
    strategy="fixed-window",
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


def limit_tier(tier: str):
    """Route decorator applying *tier*'s shared counter to an endpoint."""
    t = TIERS[tier]
    return limiter.shared_limit(t.limit, scope=t.scope, error_message=t.message)


def admit(client_id: str, tier: str) -> bool:
    """
    Count one request from *client_id* against *tier*.

    Returns True if the request is within the tier's limit. Hits the same
    storage keys as the route decorators, so both paths share one window.
    """
    t = TIERS[tier]
    if not limiter.enabled:
        return True
    allowed = limiter.limiter.hit(t.item, client_id, t.scope)
    if not allowed:
        logger.debug("Client %s over %s limit (%s)", client_id, t.name, t.limit)
    return allowed
