"""
craft.py — The combination endpoint.

Route:
  POST /api/craft — combine two items via the completion API (strict tier,
                    10/minute per IP; the general tier does not apply here)

This is the only route that spends money upstream, hence the tighter limit.
No authentication — the OpenAI key stays on the server, the client only
ever sees {name, emoji} or {error}.

  curl -X POST http://localhost:3000/api/craft \\
    -H 'Content-Type: application/json' \\
    -d '{"item1": "Water", "item2": "Fire"}'
"""

import logging

from fastapi import APIRouter, Depends, Request

from craft_gateway.ai.completion_client import CompletionClient, get_completion_client
from craft_gateway.core.rate_limit import STRICT, limit_tier
from craft_gateway.models.craft import CombinationResult, CraftRequest
from craft_gateway.services.combiner import combine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["craft"])


def get_crafting_instructions(request: Request) -> str:
    """FastAPI dependency — instructions loaded at startup."""
    return request.app.state.crafting_instructions


@router.post("/api/craft", response_model=CombinationResult, status_code=200)
@limit_tier(STRICT)
async def craft(
    request: Request,
    payload: CraftRequest,
    instructions: str = Depends(get_crafting_instructions),
    client: CompletionClient = Depends(get_completion_client),
):
    """
    Combine item1 and item2 into a new item.

    400 on invalid items, 429 when crafting too fast, 500 when the server
    has no API key or the AI reply is unusable.
    """
    return await combine(payload.item1, payload.item2, instructions=instructions, client=client)
