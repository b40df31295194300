"""
Models package for search pipeline value objects.
"""

from .request_context import TRACE_ID_HEADER, RequestContext, new_trace_id
from .search_result import (
    EMPTY_ANSWER_NOTICE,
    LLM_APOLOGY_ANSWER,
    MAX_CONTENT_CHARS,
    SEARCH_UNAVAILABLE_ANSWER,
    AnswerResult,
    Query,
    SourceDocument,
    is_fallback,
)

__all__ = [
    "AnswerResult",
    "EMPTY_ANSWER_NOTICE",
    "LLM_APOLOGY_ANSWER",
    "MAX_CONTENT_CHARS",
    "Query",
    "RequestContext",
    "SEARCH_UNAVAILABLE_ANSWER",
    "SourceDocument",
    "TRACE_ID_HEADER",
    "is_fallback",
    "new_trace_id",
]
