"""Explicit memory recall tool.

Auto-retrieval runs before every turn; this tool lets the model dig
deeper on demand, e.g. with a lower score threshold.
"""

from pydantic import Field

from src.memory.retriever import auto_retrieve
from src.tools.base import ToolParams, ToolResult
from src.tools.registry import registry


class RecallParams(ToolParams):
    query: str = Field(description="What to search for in memory")
    min_score: float | None = Field(
        default=None,
        description="Minimum similarity (0-1). Defaults to the auto-retrieval threshold.",
        ge=0.0,
        le=1.0,
    )
    channel: str = Field(default="tool", description="Channel the request came from")


@registry.tool(
    name="recall",
    description=(
        "Search long-term memory (past conversations, facts, summaries) and "
        "reference notes. Use when the user asks 'what do you remember about X' "
        "or when you need context you don't have."
    ),
    category="memory",
    params_model=RecallParams,
)
async def recall(query: str, min_score: float | None = None, channel: str = "tool") -> ToolResult:
    result = await auto_retrieve(query, channel, min_score=min_score)
    memories = [
        {
            "content": m.content,
            "type": m.type,
            "channel": m.channel,
            "time_ago": m.time_ago,
            "score": m.score,
        }
        for m in result.qdrant_memories
    ]
    notes = [{"path": n.path, "content": n.content} for n in result.obsidian_notes]
    return ToolResult(data={"memories": memories, "notes": notes, "count": len(memories)})
