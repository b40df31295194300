"""Web search, page fetching and result caching for the search pipeline."""

from .contracts import OutcomeKind, SearchOutcome
from .query_normalizer import build_query, normalize

__all__ = ["OutcomeKind", "SearchOutcome", "build_query", "normalize"]
