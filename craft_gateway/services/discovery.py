"""
In-memory discovery counter.

Counts how many times each item has been discovered by players. Keys are
normalised (trimmed + lowercased) so "Water", "water " and "WATER" share a
counter. Nothing is persisted: the counter is created in the FastAPI
lifespan, stored on app.state, and cleared on shutdown.

Routes get at it through the get_discovery_counter dependency, which tests
can replace with app.dependency_overrides.
"""

import logging
import threading

from fastapi import Request

from craft_gateway.core.errors import ValidationError
from craft_gateway.models.craft import MAX_ITEM_LENGTH

logger = logging.getLogger(__name__)


def normalize_item(item: object) -> str:
    """Return the counter key for *item*, or raise ValidationError."""
    if not isinstance(item, str):
        raise ValidationError("Invalid item name")
    key = item.strip().lower()
    if not key or len(key) > MAX_ITEM_LENGTH:
        raise ValidationError("Invalid item name")
    return key


class DiscoveryCounter:
    """
    Map of normalised item name → discovery count.

    The read-modify-write in track() runs under a lock so concurrent
    requests for the same item never lose an increment.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def track(self, item: str) -> int:
        """Record one discovery of *item* and return the new count."""
        key = normalize_item(item)
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
        return count

    def peek(self, item: str) -> int:
        """Current count for *item*; 0 if it has never been tracked."""
        key = normalize_item(item)
        with self._lock:
            return self._counts.get(key, 0)

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)


def get_discovery_counter(request: Request) -> DiscoveryCounter:
    """FastAPI dependency — the counter owned by the running app."""
    return request.app.state.discovery_counter
