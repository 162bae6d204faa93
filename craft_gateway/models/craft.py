"""
craft.py — Pydantic models for the crafting and discovery endpoints.

Request fields are typed loosely on purpose: type and length checks live
in the services so they produce the API's own 400 messages rather than
FastAPI's generic 422.
"""

from typing import Any, Optional

from pydantic import BaseModel

# Longest item name accepted anywhere (craft inputs and discovery keys).
MAX_ITEM_LENGTH = 100


# ── Craft ─────────────────────────────────────────────────────────────────────

class CraftRequest(BaseModel):
    """Two items the player wants to combine."""

    item1: Optional[Any] = None
    item2: Optional[Any] = None


class CombinationResult(BaseModel):
    """The crafted item."""

    name:  str  # 1–3 words
    emoji: str  # exactly one emoji


# ── Discovery ─────────────────────────────────────────────────────────────────

class TrackDiscoveryRequest(BaseModel):
    item: Optional[Any] = None


class TrackDiscoveryResponse(BaseModel):
    success: bool
    count:   int


class DiscoveryCountResponse(BaseModel):
    count: int
