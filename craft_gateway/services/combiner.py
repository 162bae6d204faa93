"""
combiner.py — Turns two item names into one crafted item.

HOW A COMBINATION WORKS
───────────────────────
1. Both items are validated (present, strings, ≤ MAX_ITEM_LENGTH chars).
2. The crafting instructions become the system message and
   "Combine: {item1} + {item2}" the user message.
3. The completion API is called once with low temperature and a tiny token
   budget, so identical inputs usually (not always) give the same item.
4. The reply is unwrapped from a ``` code fence if the model added one,
   then parsed as JSON.
5. Both `name` and `emoji` must be present; anything else is an
   UpstreamError (the client only ever sees a generic message).
6. If the model returned several emoji, only the first is kept.
"""

import json
import logging
import re

import emoji as emoji_lib

from craft_gateway.ai.completion_client import CompletionClient
from craft_gateway.ai.prompts import build_messages
from craft_gateway.core.config import settings
from craft_gateway.core.errors import UpstreamError, ValidationError
from craft_gateway.models.craft import MAX_ITEM_LENGTH, CombinationResult

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def validate_items(item1: object, item2: object) -> tuple[str, str]:
    """Return both items trimmed, or raise ValidationError."""
    if item1 is None or item2 is None or item1 == "" or item2 == "":
        raise ValidationError("item1 and item2 are required")
    if not isinstance(item1, str) or not isinstance(item2, str):
        raise ValidationError("Items must be strings")

    item1, item2 = item1.strip(), item2.strip()
    if not item1 or not item2:
        raise ValidationError("item1 and item2 are required")
    if len(item1) > MAX_ITEM_LENGTH or len(item2) > MAX_ITEM_LENGTH:
        raise ValidationError("Item names too long")
    return item1, item2


def extract_json_text(content: str) -> str:
    """Body of the first ``` fenced block, or *content* unchanged."""
    if "```" in content:
        m = _FENCE_RE.search(content)
        if m:
            return m.group(1).strip()
    return content


def first_emoji(value: str) -> str:
    """
    Keep only the first emoji in *value*.

    Works on whole emoji sequences (ZWJ families, flags, skin tones), not
    single code points. With no emoji at all the value is returned as is.
    """
    found = emoji_lib.emoji_list(value)
    if found:
        return found[0]["emoji"]
    return value


def parse_combination(content: str) -> CombinationResult:
    """
    Parse a raw model reply into a CombinationResult.

    Raises:
        UpstreamError: not a JSON object, or `name` / `emoji` missing.
    """
    text = extract_json_text(content)
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise UpstreamError(f"Reply is not valid JSON: {content[:200]!r}") from exc

    if not isinstance(data, dict):
        raise UpstreamError(f"Reply is not a JSON object: {content[:200]!r}")

    name, emoji = data.get("name"), data.get("emoji")
    if not isinstance(name, str) or not name.strip() or not isinstance(emoji, str) or not emoji:
        raise UpstreamError(f"Invalid response format: {content[:200]!r}")

    return CombinationResult(name=name.strip(), emoji=first_emoji(emoji))


async def combine(
    item1: object,
    item2: object,
    *,
    instructions: str,
    client: CompletionClient,
) -> CombinationResult:
    """
    Craft a new item from *item1* and *item2*.

    Raises:
        ValidationError:    bad input (400).
        ConfigurationError: no API key configured (500).
        UpstreamError:      the completion API failed or replied badly (500).
    """
    item1, item2 = validate_items(item1, item2)

    content = await client.complete(
        build_messages(instructions, item1, item2),
        response_key="combine",
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )
    result = parse_combination(content)
    logger.debug("Crafted %s + %s → %s %s", item1, item2, result.name, result.emoji)
    return result
