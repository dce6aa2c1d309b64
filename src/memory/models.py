"""Data models for semantic memory retrieval."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.errors import ParseError

MemoryType = Literal["conversation", "fact", "summary"]


# -- Stored payloads ---------------------------------------------------------


class ConversationPayload(BaseModel):
    """One user/assistant exchange indexed in the ``conversations`` collection."""

    model_config = ConfigDict(frozen=True)

    type: Literal["conversation"] = "conversation"
    channel: str | None = None
    user_message: str = ""
    assistant_message: str = ""
    timestamp: str | None = None


class FactPayload(BaseModel):
    """A key/value fact from the ``knowledge`` collection."""

    model_config = ConfigDict(frozen=True)

    type: Literal["fact"] = "fact"
    key: str | None = None
    content: str = ""
    channel: str | None = None
    timestamp: str | None = None


class SummaryPayload(BaseModel):
    """A conversation summary from the ``knowledge`` collection."""

    model_config = ConfigDict(frozen=True)

    type: Literal["summary"] = "summary"
    content: str = ""
    channel: str | None = None
    timestamp: str | None = None


MemoryPayload = Annotated[
    ConversationPayload | FactPayload | SummaryPayload,
    Field(discriminator="type"),
]

_payload_adapter: TypeAdapter[MemoryPayload] = TypeAdapter(MemoryPayload)


def parse_payload(raw: dict[str, Any]) -> MemoryPayload:
    """Validate a raw Qdrant payload into a typed memory payload.

    Conversation points are indexed without a ``type`` field, so an untyped
    payload is read as a conversation when it carries ``user_message`` and
    as a fact otherwise.

    Raises:
        ParseError: The payload's ``type`` is not a known memory type, or a
            field has the wrong shape for that type.
    """
    data = dict(raw)
    if not data.get("type"):
        data["type"] = "conversation" if data.get("user_message") else "fact"

    try:
        return _payload_adapter.validate_python(data)
    except ValidationError as exc:
        if any(err["type"] == "union_tag_invalid" for err in exc.errors()):
            msg = f"Unrecognized memory payload type: {data.get('type')!r}"
        else:
            fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) for err in exc.errors())
            msg = f"Invalid {data['type']} payload fields: {fields}"
        raise ParseError(msg) from exc


# -- Search results ----------------------------------------------------------


class ScoredSearchHit(BaseModel):
    """A vector store hit. ``payload`` is the raw stored dict."""

    model_config = ConfigDict(frozen=True)

    score: float
    payload: dict[str, Any] = Field(default_factory=dict)


class RetrievedMemory(BaseModel):
    """A memory after classification and recency labeling."""

    model_config = ConfigDict(frozen=True)

    content: str
    score: float
    channel: str | None = None
    timestamp: str
    time_ago: str
    type: MemoryType


class ObsidianNote(BaseModel):
    """A reference note fetched from the Obsidian vault."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class RetrievalResult(BaseModel):
    """Everything auto-retrieval found for one conversational turn."""

    qdrant_memories: list[RetrievedMemory] = Field(default_factory=list)
    obsidian_notes: list[ObsidianNote] = Field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.qdrant_memories and not self.obsidian_notes
