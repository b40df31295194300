"""Parallel page-text fetching with per-task deadlines."""

import concurrent.futures
import time
from abc import ABC, abstractmethod

import httpx
from bs4 import BeautifulSoup

from models.search_result import MAX_CONTENT_CHARS, SourceDocument
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)

DEFAULT_HTTP_TIMEOUT_S = 3.0
DEFAULT_TASK_TIMEOUT_S = 4.0
USER_AGENT = "Mozilla/5.0 (compatible; ai-search/1.0)"
NOISE_TAGS = ["script", "style", "noscript", "template", "iframe", "svg", "canvas"]
ACCEPTED_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "text/xml", "application/xml", "text/plain")


class ContentFetchError(Exception):
    """A single page could not be fetched or parsed."""


class ContentFetcher(ABC):
    """Fetches page text for ranked sources, index-aligned with the input."""

    @abstractmethod
    def fetch_contents(self, sources: list[SourceDocument], trace_id: str | None = None) -> list[str]:
        pass


def extract_visible_text(html: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    """Strip markup and non-content elements, collapse whitespace, truncate."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()
    text = " ".join(soup.get_text(" ", strip=True).split())
    return text[:max_chars]


class HtmlContentFetcher(ContentFetcher):
    """
    Fetches pages concurrently on a shared, bounded executor.

    Each page gets its own HTTP timeout plus a task deadline measured from
    dispatch. Workers check that deadline while the body streams in, so an
    expired fetch gives its pool thread back. Any failure or expired deadline
    yields "" for that index only.
    """

    def __init__(
        self,
        executor: concurrent.futures.Executor,
        http_client: httpx.Client | None = None,
        http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        task_timeout_s: float = DEFAULT_TASK_TIMEOUT_S,
        max_chars: int = MAX_CONTENT_CHARS,
    ):
        """
        Args:
            executor: Shared worker pool (never created per request)
            http_client: Optional preconfigured client (tests pass a MockTransport)
            http_timeout_s: Connect/read timeout for one page
            task_timeout_s: Deadline for one page, measured from dispatch
            max_chars: Truncation length of extracted text
        """
        self._executor = executor
        self._http_timeout_s = http_timeout_s
        self._task_timeout_s = task_timeout_s
        self._max_chars = max_chars
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(http_timeout_s),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def fetch_contents(self, sources: list[SourceDocument], trace_id: str | None = None) -> list[str]:
        dispatched_at = time.monotonic()
        ends_at = dispatched_at + self._task_timeout_s
        futures = [
            self._executor.submit(self._fetch_page_text, s.url, ends_at, trace_id) for s in sources
        ]

        contents: list[str] = []
        for index, future in enumerate(futures):
            remaining = max(0.0, ends_at - time.monotonic())
            try:
                text = future.result(timeout=remaining)
            except concurrent.futures.TimeoutError:
                # A running worker stops on its own at ends_at; this only drops queued ones
                future.cancel()
                logger.warning(
                    f"Page fetch timed out for source index={index}",
                    extra=log_extra(trace_id, index=index, url=sources[index].url),
                )
                text = ""
            except Exception as e:
                logger.warning(
                    f"Page fetch failed for source index={index}: {e}",
                    extra=log_extra(
                        trace_id, index=index, url=sources[index].url, error_type=type(e).__name__
                    ),
                )
                text = ""
            contents.append(text or "")

        logger.info(
            f"Fetched {sum(1 for c in contents if c)}/{len(contents)} pages",
            extra=log_extra(trace_id, elapsed_ms=int((time.monotonic() - dispatched_at) * 1000)),
        )
        return contents

    def _fetch_page_text(self, url: str, ends_at: float, trace_id: str | None = None) -> str:
        start = time.monotonic()
        try:
            text = self._download_and_extract(url, ends_at)
        except Exception as e:
            logger.warning(
                f"Failed to fetch page text: {url}",
                extra=log_extra(
                    trace_id,
                    url=url,
                    elapsed_ms=int((time.monotonic() - start) * 1000),
                    reason=f"{type(e).__name__}: {e}",
                ),
            )
            return ""

        logger.debug(
            f"Page fetch success: {url}",
            extra=log_extra(
                trace_id, url=url, elapsed_ms=int((time.monotonic() - start) * 1000), text_len=len(text)
            ),
        )
        return text

    def _download_and_extract(self, url: str, ends_at: float) -> str:
        if not url:
            raise ContentFetchError("empty url")
        if time.monotonic() >= ends_at:
            raise ContentFetchError("task deadline passed before the fetch started")

        timeout = min(self._http_timeout_s, ends_at - time.monotonic())
        with self._http.stream("GET", url, timeout=max(timeout, 0.001)) as response:
            response.raise_for_status()

            content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
            if content_type and content_type not in ACCEPTED_CONTENT_TYPES:
                raise ContentFetchError(f"unsupported content type {content_type!r}")

            chunks = []
            for chunk in response.iter_bytes():
                if time.monotonic() >= ends_at:
                    raise ContentFetchError("task deadline passed while reading the body")
                chunks.append(chunk)
            html = b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")

        return extract_visible_text(html, self._max_chars)

    def close(self) -> None:
        self._http.close()
