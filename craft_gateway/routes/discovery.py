"""
discovery.py — Discovery tracking endpoints.

Routes (general tier, 100 per 15 minutes per IP, shared):
  POST /api/track-discovery           — count one discovery of an item
  GET  /api/discovery-count/{item}    — how often an item was discovered

Counts are case-insensitive and live in memory only; a restart resets them.
"""

import logging

from fastapi import APIRouter, Depends, Request

from craft_gateway.core.errors import ValidationError
from craft_gateway.core.rate_limit import GENERAL, limit_tier
from craft_gateway.models.craft import (
    DiscoveryCountResponse,
    TrackDiscoveryRequest,
    TrackDiscoveryResponse,
)
from craft_gateway.services.discovery import DiscoveryCounter, get_discovery_counter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["discovery"])


@router.post("/track-discovery", response_model=TrackDiscoveryResponse)
@limit_tier(GENERAL)
async def track_discovery(
    request: Request,
    payload: TrackDiscoveryRequest,
    counter: DiscoveryCounter = Depends(get_discovery_counter),
):
    if payload.item is None or payload.item == "":
        raise ValidationError("item is required")

    count = counter.track(payload.item)
    return TrackDiscoveryResponse(success=True, count=count)


# `:path` so an encoded slash (%2F) in an item name still reaches this route.
@router.get("/discovery-count/{item:path}", response_model=DiscoveryCountResponse)
@limit_tier(GENERAL)
async def discovery_count(
    request: Request,
    item: str,
    counter: DiscoveryCounter = Depends(get_discovery_counter),
):
    """Unseen items report 0 — never 404."""
    return DiscoveryCountResponse(count=counter.peek(item))
