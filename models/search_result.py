from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SEARCH_UNAVAILABLE_ANSWER = (
    "Sorry, we could not get any results from the external search service (Brave).\n"
    "Please try again in a moment."
)

LLM_APOLOGY_ANSWER = (
    "Sorry, an answer to your question cannot be generated right now.\n"
    "Please try again in a moment.\n"
    "(The web search itself succeeded, so please consult the sources listed below directly.)"
)

EMPTY_ANSWER_NOTICE = "The answer is empty right now. Please try again later."

FALLBACK_TEMPLATES = frozenset({SEARCH_UNAVAILABLE_ANSWER, LLM_APOLOGY_ANSWER})

MAX_CONTENT_CHARS = 2000


@dataclass(frozen=True)
class Query:
    raw: str | None
    normalized: str


@dataclass(frozen=True)
class SourceDocument:
    """A ranked search hit. `id` is 1-based and follows the provider's order."""

    id: int
    title: str
    url: str
    snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "url": self.url, "snippet": self.snippet}


def is_fallback(answer: str | None, sources) -> bool:
    """
    Decide whether a result is a degraded fallback.

    A result is a fallback when it carries no sources or when its answer is one
    of the canned failure templates. Surrounding whitespace is ignored.
    """
    if not sources:
        return True
    return (answer or "").strip() in FALLBACK_TEMPLATES


@dataclass(frozen=True)
class AnswerResult:
    answer: str
    sources: tuple[SourceDocument, ...] = ()
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    def __post_init__(self):
        # Accept any sequence but store a tuple so cached values cannot be mutated
        if not isinstance(self.sources, tuple):
            object.__setattr__(self, "sources", tuple(self.sources))

    @property
    def is_fallback(self) -> bool:
        return is_fallback(self.answer, self.sources)

    @classmethod
    def search_unavailable(cls) -> "AnswerResult":
        return cls(answer=SEARCH_UNAVAILABLE_ANSWER, sources=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "answer": self.answer,
            "sources": [s.to_dict() for s in self.sources],
            "fallback": self.is_fallback,
            "created_at": self.created_at,
        }
