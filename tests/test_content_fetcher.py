import concurrent.futures
import time

import httpx

from models.search_result import MAX_CONTENT_CHARS, SourceDocument
from tools.web.content_fetcher import HtmlContentFetcher, extract_visible_text


def html_page(body: str) -> httpx.Response:
    return httpx.Response(
        200,
        text=f"<html><head><script>var x = 1;</script></head><body>{body}</body></html>",
        headers={"content-type": "text/html; charset=utf-8"},
    )


def make_fetcher(executor, handler, task_timeout_s=4.0):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return HtmlContentFetcher(executor=executor, http_client=http, task_timeout_s=task_timeout_s)


def test_contents_align_with_sources(executor, sample_sources):
    pages = {
        "https://example.com/a": html_page("<p>alpha text</p>"),
        "https://example.com/b": html_page("<p>beta text</p>"),
        "https://example.com/c": html_page("<p>gamma text</p>"),
    }
    fetcher = make_fetcher(executor, lambda request: pages[str(request.url)])

    contents = fetcher.fetch_contents(sample_sources)

    assert len(contents) == 3
    assert "alpha text" in contents[0]
    assert "beta text" in contents[1]
    assert "gamma text" in contents[2]


def test_failed_fetch_yields_empty_string_at_its_index(executor, sample_sources):
    def handler(request):
        if request.url.path == "/b":
            raise httpx.ConnectError("connection refused", request=request)
        return html_page(f"<p>page {request.url.path}</p>")

    contents = make_fetcher(executor, handler).fetch_contents(sample_sources)

    assert len(contents) == 3
    assert contents[1] == ""
    assert "page /a" in contents[0]
    assert "page /c" in contents[2]


def test_http_error_status_yields_empty_string(executor, sample_sources):
    def handler(request):
        if request.url.path == "/a":
            return httpx.Response(404, text="missing")
        return html_page("<p>ok</p>")

    contents = make_fetcher(executor, handler).fetch_contents(sample_sources)
    assert contents[0] == ""
    assert contents[1] == "ok"


def test_non_html_content_yields_empty_string(executor, sample_sources):
    def handler(request):
        if request.url.path == "/c":
            return httpx.Response(200, content=b"%PDF-1.7", headers={"content-type": "application/pdf"})
        return html_page("<p>ok</p>")

    contents = make_fetcher(executor, handler).fetch_contents(sample_sources)
    assert contents[2] == ""
    assert contents[0] == "ok"


def test_slow_page_times_out_without_affecting_others(executor, sample_sources):
    def handler(request):
        if request.url.path == "/a":
            time.sleep(1.0)
        return html_page(f"<p>page {request.url.path}</p>")

    start = time.monotonic()
    contents = make_fetcher(executor, handler, task_timeout_s=0.3).fetch_contents(sample_sources)
    elapsed = time.monotonic() - start

    assert contents[0] == ""
    assert "page /b" in contents[1]
    assert "page /c" in contents[2]
    assert elapsed < 1.0


def test_completion_order_does_not_change_output_order(executor, sample_sources):
    delays = {"/a": 0.2, "/b": 0.1, "/c": 0.0}

    def handler(request):
        time.sleep(delays[request.url.path])
        return html_page(f"<p>page {request.url.path}</p>")

    contents = make_fetcher(executor, handler).fetch_contents(sample_sources)
    assert contents == ["page /a", "page /b", "page /c"]


def test_text_is_truncated_to_max_length(executor, sample_sources):
    long_body = "<p>" + ("word " * 1000) + "</p>"
    contents = make_fetcher(executor, lambda r: html_page(long_body)).fetch_contents(sample_sources[:1])
    assert len(contents[0]) == MAX_CONTENT_CHARS


def test_empty_source_list_returns_empty_list(executor):
    fetcher = make_fetcher(executor, lambda r: html_page("<p>unused</p>"))
    assert fetcher.fetch_contents([]) == []


def test_extract_visible_text_drops_scripts_and_styles():
    html = "<html><style>p{}</style><body><p>Hello</p>\n\n<div>  World </div><script>x()</script></body></html>"
    assert extract_visible_text(html) == "Hello World"


def trickling_html(interval_s: float, chunks: int):
    yield b"<html><body><p>"
    for _ in range(chunks):
        time.sleep(interval_s)
        yield b"x"


def test_expired_fetch_releases_its_worker_for_later_requests():
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    slow = SourceDocument(id=1, title="slow", url="https://slow.example/page")
    fast = SourceDocument(id=1, title="fast", url="https://fast.example/page")

    def handler(request):
        if request.url.host == "slow.example":
            return httpx.Response(
                200, headers={"content-type": "text/html"}, content=trickling_html(0.05, 200)
            )
        return html_page("<p>fast page</p>")

    fetcher = make_fetcher(pool, handler, task_timeout_s=0.5)
    try:
        assert fetcher.fetch_contents([slow]) == [""]
        time.sleep(0.2)
        assert fetcher.fetch_contents([fast]) == ["fast page"]
    finally:
        pool.shutdown(wait=True, cancel_futures=True)
