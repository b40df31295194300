"""Query normalization: the cache key and dedup granularity of the pipeline."""

from models.search_result import Query


def normalize(raw: str | None) -> str:
    """
    Canonicalize a raw user query.

    Trims, lowercases (str.lower leaves scripts without case untouched) and
    collapses every whitespace run to a single space. Idempotent.

    Args:
        raw: Query as typed by the user, or None

    Returns:
        Normalized query; "" for None or blank input
    """
    if raw is None:
        return ""
    return " ".join(raw.strip().lower().split())


def build_query(raw: str | None) -> Query:
    return Query(raw=raw, normalized=normalize(raw))
