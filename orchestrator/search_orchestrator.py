"""
SearchOrchestrator - end-to-end pipeline with fallback-aware cache-aside.

    normalize -> cache lookup -> (non-fallback hit: return)
              -> sources -> (none: search-unavailable fallback)
              -> contents -> answer -> result -> (cache unless fallback)

Stages run one after another; only content fetching fans out. Concurrent
requests for the same key are not coalesced, each runs until one result
lands in the cache.
"""

import time

from models.search_result import AnswerResult
from orchestrator.answer_generator import AnswerGenerator
from tools.web.cache import ResultCache
from tools.web.content_fetcher import ContentFetcher
from tools.web.query_normalizer import normalize
from tools.web.source_repository import SourceRepository
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)


class SearchOrchestrator:
    """
    Composes retrieval, fetching and answer generation into one call.

    Example usage:
        orchestrator = SearchOrchestrator(repository, fetcher, generator, cache)
        result = orchestrator.search("  Spring   Boot ", trace_id="ab12cd34")
        print(result.answer, [s.url for s in result.sources])
    """

    def __init__(
        self,
        source_repository: SourceRepository,
        content_fetcher: ContentFetcher,
        answer_generator: AnswerGenerator,
        cache: ResultCache,
    ):
        self.source_repository = source_repository
        self.content_fetcher = content_fetcher
        self.answer_generator = answer_generator
        self.cache = cache

    def search(self, raw_query: str | None, trace_id: str | None = None) -> AnswerResult:
        """
        Answer a raw query. This method NEVER raises.

        Args:
            raw_query: Query as typed by the user
            trace_id: Correlation id of the inbound request

        Returns:
            AnswerResult, possibly a fallback (which is never cached)
        """
        key = normalize(raw_query)
        try:
            cached = self.cache.get(key, trace_id=trace_id)
            if cached is not None and not cached.is_fallback:
                logger.info(f"Cache hit for query: '{key}'", extra=log_extra(trace_id, query=key))
                return cached

            result = self._run_pipeline(key, trace_id)

            if result.is_fallback:
                logger.info(
                    "Fallback result, not caching",
                    extra=log_extra(trace_id, query=key, source_count=len(result.sources)),
                )
            else:
                self.cache.put(key, result, trace_id=trace_id)
            return result

        except Exception as e:
            logger.error(
                f"Search pipeline failed unexpectedly: {e}",
                exc_info=True,
                extra=log_extra(trace_id, query=key, error_type=type(e).__name__),
            )
            return AnswerResult.search_unavailable()

    def _run_pipeline(self, key: str, trace_id: str | None) -> AnswerResult:
        total_start = time.monotonic()
        logger.info(f"Search pipeline start: '{key}'", extra=log_extra(trace_id, query=key))

        search_start = time.monotonic()
        sources = self.source_repository.get_sources(key, trace_id=trace_id)
        search_ms = int((time.monotonic() - search_start) * 1000)

        if not sources:
            logger.warning(
                "No sources found, returning search-unavailable fallback",
                extra=log_extra(trace_id, query=key, search_ms=search_ms),
            )
            return AnswerResult.search_unavailable()

        fetch_start = time.monotonic()
        contents = self.content_fetcher.fetch_contents(sources, trace_id=trace_id)
        fetch_ms = int((time.monotonic() - fetch_start) * 1000)

        llm_start = time.monotonic()
        answer = self.answer_generator.generate_answer(key, sources, contents, trace_id=trace_id)
        llm_ms = int((time.monotonic() - llm_start) * 1000)

        result = AnswerResult(answer=answer, sources=tuple(sources))
        logger.info(
            "Search pipeline summary",
            extra=log_extra(
                trace_id,
                query=key,
                sources=len(sources),
                search_ms=search_ms,
                fetch_ms=fetch_ms,
                llm_ms=llm_ms,
                total_ms=int((time.monotonic() - total_start) * 1000),
                fallback=result.is_fallback,
            ),
        )
        return result
