"""
Prompt material for the crafting engine.

The system instruction is kept in a plain text file so it can be tuned
without a code change. It is read once at startup (see main.lifespan);
failing to read it is fatal — the server must not craft without rules.
"""

import logging
from pathlib import Path

from craft_gateway.core.config import settings
from craft_gateway.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

BUNDLED_INSTRUCTIONS = Path(__file__).with_name("crafting_instructions.txt")

_COMBINE_TEMPLATE = "Combine: {item1} + {item2}"


def load_crafting_instructions(path: str | Path | None = None) -> str:
    """
    Read the crafting system instruction.

    Args:
        path: File to read. Defaults to CRAFTING_INSTRUCTIONS_PATH, or the
              file bundled with the package when that is unset.

    Raises:
        ConfigurationError: the file is missing, unreadable or empty.
    """
    source = Path(path or settings.crafting_instructions_path or BUNDLED_INSTRUCTIONS)
    try:
        text = source.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigurationError(f"Failed to load crafting instructions from {source}: {exc}") from exc

    if not text:
        raise ConfigurationError(f"Crafting instructions file {source} is empty")

    logger.info("Crafting instructions loaded from %s (%d chars)", source, len(text))
    return text


def build_messages(instructions: str, item1: str, item2: str) -> list[dict[str, str]]:
    """Chat messages for one combination request."""
    return [
        {"role": "system", "content": instructions},
        {"role": "user", "content": _COMBINE_TEMPLATE.format(item1=item1, item2=item2)},
    ]
