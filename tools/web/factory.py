"""Factory for wiring the search pipeline from environment configuration."""

import concurrent.futures
import threading

from api.base_client import BaseAIClient
from config.config import Config, ModelType
from orchestrator.answer_generator import DEFAULT_LLM_POLICY, LLMAnswerGenerator
from orchestrator.retry import RetryPolicy
from orchestrator.search_orchestrator import SearchOrchestrator
from utils.logger import get_logger

from .brave_client import BraveSearchClient
from .cache import InMemoryTTLCache, ResultCache
from .content_fetcher import HtmlContentFetcher
from .source_repository import DEFAULT_SEARCH_POLICY, BraveSourceRepository

logger = get_logger(__name__)

# Process-shared resources; never created per request
_cache_instance: ResultCache | None = None
_fetch_executor: concurrent.futures.ThreadPoolExecutor | None = None
_llm_executor: concurrent.futures.ThreadPoolExecutor | None = None
_shutdown_event = threading.Event()
_closeables: list = []
_lock = threading.Lock()


def create_llm_client(config: Config) -> BaseAIClient:
    """
    Initialize the language-model client selected by MODEL_TYPE.

    Raises:
        ValueError: If the model type is unsupported or its API key is missing
    """
    if config.MODEL_TYPE == ModelType.OPENAI.value:
        from api.openai_client import OpenAIClient

        if not config.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY not set in environment")
        return OpenAIClient(api_key=config.OPENAI_API_KEY, model_name=config.DEFAULT_MODEL)

    if config.MODEL_TYPE == ModelType.GEMINI.value:
        from api.google_gemini_client import GeminiClient

        if not config.GOOGLE_GEMINI_API_KEY:
            raise ValueError("GOOGLE_GEMINI_API_KEY not set in environment")
        return GeminiClient(api_key=config.GOOGLE_GEMINI_API_KEY, model_name=config.DEFAULT_MODEL)

    raise ValueError(f"Unsupported MODEL_TYPE: {config.MODEL_TYPE}. Must be 'openai' or 'gemini'")


def create_search_orchestrator_from_env(
    config: Config | None = None, llm_client: BaseAIClient | None = None
) -> SearchOrchestrator:
    """
    Create a SearchOrchestrator from environment variables.

    Environment variables: see config.config.Config. SEARCH_API_KEY and the
    key of the selected MODEL_TYPE are required.

    Args:
        config: Preloaded configuration (defaults to Config())
        llm_client: Optional prebuilt language-model client

    Returns:
        Configured SearchOrchestrator sharing process-wide pools and cache

    Raises:
        ValueError: If required keys are missing
    """
    global _cache_instance, _fetch_executor, _llm_executor

    config = config or Config()
    if not config.SEARCH_API_KEY:
        raise ValueError("SEARCH_API_KEY not set in environment")
    llm_client = llm_client or create_llm_client(config)

    with _lock:
        if _cache_instance is None:
            _cache_instance = ResultCache(
                InMemoryTTLCache(
                    ttl_seconds=config.RESULT_CACHE_TTL_SECONDS,
                    max_entries=config.RESULT_CACHE_MAX_ENTRIES,
                )
            )
        if _fetch_executor is None:
            _fetch_executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=config.FETCH_THREAD_POOL_SIZE, thread_name_prefix="page-fetch"
            )
        if _llm_executor is None:
            _llm_executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=config.LLM_THREAD_POOL_SIZE, thread_name_prefix="llm-call"
            )
        _shutdown_event.clear()

    search_client = BraveSearchClient(api_key=config.SEARCH_API_KEY, base_url=config.SEARCH_BASE_URL)
    fetcher = HtmlContentFetcher(
        executor=_fetch_executor,
        http_timeout_s=config.FETCH_HTTP_TIMEOUT_MS / 1000,
        task_timeout_s=config.FETCH_FUTURE_TIMEOUT_MS / 1000,
    )
    _closeables.extend([search_client, fetcher])

    repository = BraveSourceRepository(
        client=search_client,
        policy=RetryPolicy(
            max_attempts=DEFAULT_SEARCH_POLICY.max_attempts,
            initial_backoff_s=DEFAULT_SEARCH_POLICY.initial_backoff_s,
            multiplier=DEFAULT_SEARCH_POLICY.multiplier,
            deadline_s=config.SEARCH_TIMEOUT_SECONDS,
        ),
        result_count=config.SEARCH_RESULT_COUNT,
        cancel_event=_shutdown_event,
    )
    generator = LLMAnswerGenerator(
        client=llm_client,
        executor=_llm_executor,
        timeout_s=config.LLM_TIMEOUT_SECONDS,
        policy=RetryPolicy(
            max_attempts=config.LLM_MAX_ATTEMPTS,
            initial_backoff_s=DEFAULT_LLM_POLICY.initial_backoff_s,
            multiplier=DEFAULT_LLM_POLICY.multiplier,
        ),
        cancel_event=_shutdown_event,
    )

    logger.info(
        f"Search pipeline ready with {config.get_model_info()}",
        extra={
            "extra_fields": {
                "fetch_pool_size": config.FETCH_THREAD_POOL_SIZE,
                "llm_pool_size": config.LLM_THREAD_POOL_SIZE,
                "cache_ttl_s": config.RESULT_CACHE_TTL_SECONDS,
            }
        },
    )
    return SearchOrchestrator(
        source_repository=repository,
        content_fetcher=fetcher,
        answer_generator=generator,
        cache=_cache_instance,
    )


def shutdown_shared_resources() -> None:
    """Interrupt pending backoff sleeps, stop worker pools and close HTTP clients."""
    global _fetch_executor, _llm_executor

    _shutdown_event.set()
    with _lock:
        for executor in (_fetch_executor, _llm_executor):
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)
        _fetch_executor = None
        _llm_executor = None
        while _closeables:
            _closeables.pop().close()
    logger.info("Search pipeline resources released")
