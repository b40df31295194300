"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, Field


class SourceDTO(BaseModel):
    id: int
    title: str
    url: str
    snippet: str = ""


class SearchResponseDTO(BaseModel):
    query: str | None = None
    normalized_query: str = ""
    answer: str | None = None
    sources: list[SourceDTO] = Field(default_factory=list)
    fallback: bool = False
    trace_id: str | None = None

    @classmethod
    def empty(cls, query: str | None, trace_id: str | None) -> "SearchResponseDTO":
        """Empty state for a missing or blank query; the pipeline is skipped."""
        return cls(query=query, trace_id=trace_id)

    @classmethod
    def from_answer_result(cls, query: str, normalized_query: str, result, trace_id: str | None):
        """Convert AnswerResult to DTO."""
        return cls(
            query=query,
            normalized_query=normalized_query,
            answer=result.answer,
            sources=[
                SourceDTO(id=s.id, title=s.title, url=s.url, snippet=s.snippet) for s in result.sources
            ],
            fallback=result.is_fallback,
            trace_id=trace_id,
        )


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
