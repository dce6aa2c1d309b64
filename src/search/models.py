"""Result types shared by all web search providers."""

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class WebSearchHit:
    title: str
    url: str
    snippet: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "snippet": self.snippet}


@dataclass(frozen=True)
class SearchAttempt:
    """One provider attempt made by the coordinator."""

    provider: str
    status: Literal["skipped", "failed", "succeeded", "unsuccessful"]
    error: str | None = None


@dataclass
class WebSearchOutcome:
    """What a provider (or the coordinator) answers for one query.

    ``text`` is human-readable and names the provider that answered.
    """

    success: bool
    text: str
    data: list[WebSearchHit] = field(default_factory=list)
    error: str | None = None
    provider: str | None = None
    attempts: list[SearchAttempt] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "text": self.text,
            "results": [hit.to_dict() for hit in self.data],
            "count": len(self.data),
        }


@dataclass
class WebPageOutcome:
    """Readable text of one fetched page, or why there is none."""

    success: bool
    text: str
    url: str
    title: str = ""
    content: str = ""
    truncated: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "text": self.text,
            "content": self.content,
            "length": len(self.content),
            "truncated": self.truncated,
        }
