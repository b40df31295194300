"""Brave Search API client.

Every call returns a SearchOutcome instead of raising, so the retry loop in
SourceRepository can match on the outcome kind:

- 2xx with a JSON body  -> OK (missing web.results means zero sources)
- 4xx                   -> CLIENT_FAULT
- 5xx / network / bad JSON -> SERVER_FAULT
- connect or read timeout, or body still streaming at the deadline -> TIMEOUT_FAULT
"""

import json
import time
from typing import Any

import httpx

from models.request_context import TRACE_ID_HEADER
from models.search_result import SourceDocument
from utils.logger import get_logger, log_extra

from .contracts import SearchOutcome

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.search.brave.com"
SEARCH_PATH = "/res/v1/web/search"
SUBSCRIPTION_HEADER = "X-Subscription-Token"
CONNECT_TIMEOUT_S = 2.0
READ_TIMEOUT_S = 3.0
MAX_LOGGED_BODY_CHARS = 500


def parse_sources(payload: Any) -> list[SourceDocument]:
    """
    Map a Brave response body into ranked SourceDocuments.

    Ids are assigned 1..n in the order the provider returned them.
    """
    web = payload.get("web") if isinstance(payload, dict) else None
    results = web.get("results") if isinstance(web, dict) else None
    if not isinstance(results, list):
        return []

    sources: list[SourceDocument] = []
    for idx, item in enumerate(results, start=1):
        if not isinstance(item, dict):
            item = {}
        sources.append(
            SourceDocument(
                id=idx,
                title=str(item.get("title") or ""),
                url=str(item.get("url") or ""),
                snippet=str(item.get("description") or ""),
            )
        )
    return sources


class BraveSearchClient:
    """Thin synchronous wrapper around the Brave web search endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the Brave client.

        Args:
            api_key: Brave subscription token
            base_url: API base URL (overridable for tests and proxies)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        if not api_key:
            raise ValueError("SEARCH_API_KEY not set in environment")

        self.api_key = api_key
        self._client = httpx.Client(
            base_url=base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(READ_TIMEOUT_S, connect=CONNECT_TIMEOUT_S),
            transport=transport,
        )

    def search(
        self,
        query: str,
        count: int = 3,
        trace_id: str | None = None,
        timeout_s: float | None = None,
    ) -> SearchOutcome:
        """
        Issue one search request and classify the response.

        Args:
            query: Normalized search string
            count: Number of results requested
            trace_id: Forwarded as X-Trace-Id when present
            timeout_s: Wall-clock budget for the whole attempt (remaining overall
                deadline). Caps connect/read timeouts and is checked while the
                body streams in, so a trickling response cannot outlive it.

        Returns:
            SearchOutcome describing success or the fault class
        """
        headers = {SUBSCRIPTION_HEADER: self.api_key}
        if trace_id:
            headers[TRACE_ID_HEADER] = trace_id

        timeout = httpx.USE_CLIENT_DEFAULT
        ends_at = None
        if timeout_s is not None:
            timeout = httpx.Timeout(
                min(READ_TIMEOUT_S, timeout_s), connect=min(CONNECT_TIMEOUT_S, timeout_s)
            )
            ends_at = time.monotonic() + timeout_s

        try:
            with self._client.stream(
                "GET",
                SEARCH_PATH,
                params={"q": query, "count": count},
                headers=headers,
                timeout=timeout,
            ) as response:
                status = response.status_code
                body = _read_within(response, ends_at)
        except httpx.TimeoutException as e:
            return SearchOutcome.timeout_fault(f"{type(e).__name__}: {e}")
        except httpx.HTTPError as e:
            return SearchOutcome.server_fault(f"{type(e).__name__}: {e}")

        if body is None:
            logger.warning(
                "Brave response still streaming at deadline, aborted",
                extra=log_extra(trace_id, status=status, timeout_s=timeout_s),
            )
            return SearchOutcome.timeout_fault("search response exceeded the overall deadline")

        if 400 <= status < 500:
            logger.warning(
                f"Brave 4xx error (status={status})",
                extra=log_extra(trace_id, status=status, body=_preview(body)),
            )
            return SearchOutcome.client_fault(status, detail=f"Brave client error {status}")
        if status >= 500:
            logger.warning(
                f"Brave 5xx error (status={status})",
                extra=log_extra(trace_id, status=status, body=_preview(body)),
            )
            return SearchOutcome.server_fault(f"Brave server error {status}", status_code=status)
        if not 200 <= status < 300:
            return SearchOutcome.server_fault(f"Unexpected status {status}", status_code=status)

        try:
            payload = json.loads(body)
        except ValueError as e:
            return SearchOutcome.server_fault(f"Malformed response body: {e}", status_code=status)

        sources = parse_sources(payload)
        logger.debug(
            f"Brave response parsed: {len(sources)} results",
            extra=log_extra(trace_id, query=query, result_count=len(sources)),
        )
        return SearchOutcome.success(sources, status_code=status)

    def close(self) -> None:
        self._client.close()


def _read_within(response: httpx.Response, ends_at: float | None) -> bytes | None:
    """Read the streamed body, or return None once `ends_at` passes."""
    chunks = []
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        if ends_at is not None and time.monotonic() >= ends_at:
            return None
    return b"".join(chunks)


def _preview(body: bytes) -> str:
    return body[:MAX_LOGGED_BODY_CHARS].decode("utf-8", errors="replace")
