"""Source retrieval with retry, backoff, overall deadline and empty fallback."""

import threading
import time
from abc import ABC, abstractmethod

from models.search_result import SourceDocument
from orchestrator.retry import Deadline, RetryPolicy, interruptible_sleep
from utils.logger import get_logger, log_extra

from .brave_client import BraveSearchClient
from .contracts import OutcomeKind, SearchOutcome

logger = get_logger(__name__)

DEFAULT_RESULT_COUNT = 3
DEFAULT_SEARCH_POLICY = RetryPolicy(max_attempts=3, initial_backoff_s=0.2, multiplier=2.0, deadline_s=8.0)


class SourceRepository(ABC):
    """Produces ranked sources for a normalized query. Never raises."""

    @abstractmethod
    def get_sources(self, normalized_query: str, trace_id: str | None = None) -> list[SourceDocument]:
        pass


class BraveSourceRepository(SourceRepository):
    """
    Brave-backed source repository.

    Server faults and timeouts are retried with exponential backoff; client
    faults stop immediately. When attempts run out or the overall deadline
    passes, the result degrades to an empty list.
    """

    def __init__(
        self,
        client: BraveSearchClient,
        policy: RetryPolicy = DEFAULT_SEARCH_POLICY,
        result_count: int = DEFAULT_RESULT_COUNT,
        cancel_event: threading.Event | None = None,
    ):
        """
        Args:
            client: Search provider wrapper returning tagged outcomes
            policy: Attempts, backoff and overall deadline for one lookup
            result_count: `count` parameter sent to the provider
            cancel_event: Set on shutdown to interrupt backoff sleeps
        """
        self.client = client
        self.policy = policy
        self.result_count = result_count
        self._cancel_event = cancel_event

    def get_sources(self, normalized_query: str, trace_id: str | None = None) -> list[SourceDocument]:
        start = time.monotonic()
        logger.info(
            f"Search requested: '{normalized_query}'",
            extra=log_extra(trace_id, query=normalized_query),
        )

        outcome = self._search_with_retry(normalized_query, trace_id)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if outcome is None or not outcome.ok:
            reason = outcome.detail if outcome is not None else "deadline_exceeded"
            logger.warning(
                f"Brave search failed, falling back to empty sources: {reason}",
                extra=log_extra(
                    trace_id,
                    query=normalized_query,
                    outcome=outcome.kind.value if outcome is not None else OutcomeKind.TIMEOUT_FAULT.value,
                    elapsed_ms=elapsed_ms,
                ),
            )
            return []

        sources = list(outcome.sources)
        logger.info(
            f"Brave search done: {len(sources)} results",
            extra=log_extra(
                trace_id, query=normalized_query, result_count=len(sources), elapsed_ms=elapsed_ms
            ),
        )
        return sources

    def _search_with_retry(self, query: str, trace_id: str | None) -> SearchOutcome | None:
        deadline = Deadline(self.policy.deadline_s)
        outcome: SearchOutcome | None = None

        for attempt_index in range(self.policy.max_attempts):
            remaining = deadline.remaining()
            if remaining is not None and remaining <= 0:
                return SearchOutcome.timeout_fault("overall search deadline exceeded")

            outcome = self.client.search(
                query, count=self.result_count, trace_id=trace_id, timeout_s=remaining
            )
            if outcome.ok:
                return outcome

            logger.info(
                f"Brave attempt {attempt_index + 1} failed: {outcome.kind.value}",
                extra=log_extra(
                    trace_id,
                    attempt=attempt_index + 1,
                    outcome=outcome.kind.value,
                    status=outcome.status_code,
                ),
            )
            if not outcome.retryable or not self.policy.has_attempts_left(attempt_index):
                return outcome

            delay = self.policy.backoff_for(attempt_index)
            remaining = deadline.remaining()
            if remaining is not None and delay >= remaining:
                return SearchOutcome.timeout_fault("overall search deadline exceeded during backoff")
            if not interruptible_sleep(delay, self._cancel_event):
                return SearchOutcome.timeout_fault("retry sleep interrupted")

        return outcome
