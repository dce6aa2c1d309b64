"""System prompt assembly with automatic context retrieval."""

import logging
import zoneinfo
from datetime import datetime

from src.config import settings
from src.memory.models import RetrievalResult, RetrievedMemory
from src.memory.retriever import auto_retrieve

logger = logging.getLogger(__name__)

MEMORIES_HEADING = "## Relevant memories"
NOTES_HEADING = "## Reference notes"


def _format_memory(memory: RetrievedMemory) -> str:
    label = f"{memory.time_ago}, {memory.channel}" if memory.channel else memory.time_ago
    return f"- [{label}] {memory.content}"


def build_retrieval_prompt(retrieval: RetrievalResult) -> str:
    """Format retrieval results as a system prompt section.

    Returns an empty string when there is nothing to inject.
    """
    parts: list[str] = []

    if retrieval.qdrant_memories:
        lines = "\n".join(_format_memory(m) for m in retrieval.qdrant_memories)
        parts.append(f"{MEMORIES_HEADING}\n{lines}")

    if retrieval.obsidian_notes:
        sections = "\n\n".join(f"### {n.path}\n{n.content}" for n in retrieval.obsidian_notes)
        parts.append(f"{NOTES_HEADING}\n{sections}")

    return "\n\n".join(parts)


async def _retrieve_context(user_message: str, channel: str) -> str:
    """Run auto-retrieval, degrading to no context on failure."""
    try:
        retrieval = await auto_retrieve(user_message, channel)
    except Exception:
        logger.exception("Context retrieval failed")
        return ""
    return build_retrieval_prompt(retrieval)


async def build_system_prompt(user_message: str = "", channel: str = "cli") -> list[dict]:
    """Assemble the dynamic system prompt blocks.

    Args:
        user_message: Current user message for retrieval. If empty, no
            retrieval is performed.
        channel: Where the message came from.

    Returns:
        List of content blocks for the LLM ``system`` parameter: the
        current time, then retrieved context when there is any.
    """
    tz = zoneinfo.ZoneInfo(settings.timezone)
    now = datetime.now(tz)
    blocks: list[dict] = [
        {
            "type": "text",
            "text": (
                f"Current time: {now.strftime('%A, %B %d, %Y %I:%M %p %Z')} "
                f"({settings.timezone})"
            ),
        },
    ]

    if user_message:
        context = await _retrieve_context(user_message, channel)
        if context:
            blocks.append({"type": "text", "text": context})

    return blocks
