"""
Health / info endpoint.

Used by:
  - Hosting platforms' health checks
  - The game front-end to check proxy connectivity and discover routes

Reports whether the crafting instructions were loaded and whether the
completion API can be called, so callers can tell "proxy up" apart from
"proxy up but misconfigured".
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from craft_gateway.ai.completion_client import CompletionClient, get_completion_client
from craft_gateway.core.rate_limit import GENERAL, limit_tier

router = APIRouter()

ENDPOINTS = {
    "craft": "POST /api/craft",
    "trackDiscovery": "POST /api/track-discovery",
    "discoveryCount": "GET /api/discovery-count/:item",
}


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the process is serving
    message: str
    instructionsLoaded: bool
    aiConfigured: bool  # API key set, or mock mode on
    endpoints: dict[str, str]


@router.get("/", response_model=HealthResponse, summary="Proxy health check")
@limit_tier(GENERAL)
async def health_check(
    request: Request,
    client: CompletionClient = Depends(get_completion_client),
) -> HealthResponse:
    instructions = getattr(request.app.state, "crafting_instructions", "")
    return HealthResponse(
        status="ok",
        message="Infinite Craft Proxy Server (Secured)",
        instructionsLoaded=bool(instructions),
        aiConfigured=client.configured,
        endpoints=ENDPOINTS,
    )
