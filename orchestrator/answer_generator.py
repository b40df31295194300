"""
AnswerGenerator - grounded answer synthesis with timeout, retry and fallback.

The model call runs on a dedicated executor so the calling thread can stop
waiting after `timeout_s`. Failed attempts are retried with exponential
backoff; when every attempt fails the caller gets the apology template.
"""

import concurrent.futures
import threading
import time
from abc import ABC, abstractmethod

from api.base_client import BaseAIClient
from models.search_result import EMPTY_ANSWER_NOTICE, LLM_APOLOGY_ANSWER, SourceDocument
from orchestrator.retry import RetryPolicy, interruptible_sleep
from tools.web.research_pack import build_answer_prompt
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)

DEFAULT_LLM_TIMEOUT_S = 12.0
DEFAULT_LLM_POLICY = RetryPolicy(max_attempts=2, initial_backoff_s=0.3, multiplier=2.0)


class AnswerGenerator(ABC):
    """Turns a query plus grounding material into answer text. Never raises."""

    @abstractmethod
    def generate_answer(
        self,
        normalized_query: str,
        sources: list[SourceDocument],
        contents: list[str],
        trace_id: str | None = None,
    ) -> str:
        pass


class LLMAnswerGenerator(AnswerGenerator):
    """AnswerGenerator backed by any BaseAIClient."""

    def __init__(
        self,
        client: BaseAIClient,
        executor: concurrent.futures.Executor,
        timeout_s: float = DEFAULT_LLM_TIMEOUT_S,
        policy: RetryPolicy = DEFAULT_LLM_POLICY,
        cancel_event: threading.Event | None = None,
    ):
        """
        Args:
            client: Language-model client
            executor: Shared pool for model calls, separate from the fetch pool
            timeout_s: Bounded wait for one attempt
            policy: Total attempts and backoff between them
            cancel_event: Set on shutdown to interrupt backoff sleeps
        """
        self.client = client
        self.timeout_s = timeout_s
        self.policy = policy
        self._executor = executor
        self._cancel_event = cancel_event

    def generate_answer(
        self,
        normalized_query: str,
        sources: list[SourceDocument],
        contents: list[str],
        trace_id: str | None = None,
    ) -> str:
        prompt = build_answer_prompt(normalized_query, sources, contents)
        model = getattr(self.client, "model_name", None)

        for attempt_index in range(self.policy.max_attempts):
            attempt = attempt_index + 1
            start = time.monotonic()
            future = None
            try:
                logger.info(
                    f"LLM call start (attempt {attempt})",
                    extra=log_extra(trace_id, attempt=attempt, query=normalized_query, model=model),
                )
                future = self._executor.submit(self.client.get_completion, prompt)
                answer, usage = future.result(timeout=self.timeout_s)
                elapsed_ms = int((time.monotonic() - start) * 1000)
                logger.info(
                    f"LLM call success (attempt {attempt})",
                    extra=log_extra(
                        trace_id,
                        attempt=attempt,
                        elapsed_ms=elapsed_ms,
                        answer_length=len(answer) if answer else 0,
                        **(usage or {}),
                    ),
                )
                if answer is None or not answer.strip():
                    return EMPTY_ANSWER_NOTICE
                return answer

            except concurrent.futures.TimeoutError:
                future.cancel()
                logger.warning(
                    f"LLM call timed out (attempt {attempt})",
                    extra=log_extra(
                        trace_id,
                        attempt=attempt,
                        elapsed_ms=int((time.monotonic() - start) * 1000),
                        timeout_s=self.timeout_s,
                    ),
                )
            except Exception as e:
                if future is not None:
                    future.cancel()
                logger.warning(
                    f"LLM call failed (attempt {attempt}): {e}",
                    extra=log_extra(
                        trace_id,
                        attempt=attempt,
                        elapsed_ms=int((time.monotonic() - start) * 1000),
                        error_type=type(e).__name__,
                    ),
                )

            if self.policy.has_attempts_left(attempt_index):
                delay = self.policy.backoff_for(attempt_index)
                logger.debug(
                    f"LLM retry sleep {delay:.3f}s before next attempt",
                    extra=log_extra(trace_id, delay_s=delay),
                )
                if not interruptible_sleep(delay, self._cancel_event):
                    logger.warning("LLM retry sleep interrupted, aborting retries", extra=log_extra(trace_id))
                    break

        logger.error(
            f"LLM call failed after {self.policy.max_attempts} attempts",
            extra=log_extra(trace_id, query=normalized_query, attempts=self.policy.max_attempts),
        )
        return LLM_APOLOGY_ANSWER
