"""Turn typed memory payloads into prompt-ready text."""

from typing import assert_never

from src.memory.models import (
    ConversationPayload,
    FactPayload,
    MemoryPayload,
    SummaryPayload,
)

USER_LABEL = "User:"
ASSISTANT_LABEL = "Assistant:"


def classify(payload: MemoryPayload) -> str:
    """Render a memory payload as human-readable content."""
    match payload:
        case ConversationPayload():
            return (
                f"{USER_LABEL} {payload.user_message}\n"
                f"{ASSISTANT_LABEL} {payload.assistant_message}"
            )
        case FactPayload():
            if payload.key and payload.content:
                return f"{payload.key}: {payload.content}"
            return payload.content
        case SummaryPayload():
            return payload.content
        case _:
            assert_never(payload)
