from models.search_result import (
    LLM_APOLOGY_ANSWER,
    SEARCH_UNAVAILABLE_ANSWER,
    AnswerResult,
    SourceDocument,
)
from orchestrator.answer_generator import AnswerGenerator
from orchestrator.search_orchestrator import SearchOrchestrator
from tools.web.cache import InMemoryTTLCache, ResultCache
from tools.web.content_fetcher import ContentFetcher
from tools.web.query_normalizer import normalize
from tools.web.source_repository import SourceRepository

SOURCES = [SourceDocument(id=1, title="Spring Boot Guide", url="https://example.com", snippet="intro")]
CONTENTS = ["page body excerpt"]
ANSWER = "Spring Boot is an opinionated framework [1]."


class FakeRepository(SourceRepository):
    def __init__(self, sources):
        self.sources = sources
        self.calls: list[tuple[str, str | None]] = []

    def get_sources(self, normalized_query, trace_id=None):
        self.calls.append((normalized_query, trace_id))
        return list(self.sources)


class FakeFetcher(ContentFetcher):
    def __init__(self, contents):
        self.contents = contents
        self.calls = []

    def fetch_contents(self, sources, trace_id=None):
        self.calls.append(list(sources))
        return list(self.contents)


class FakeGenerator(AnswerGenerator):
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def generate_answer(self, normalized_query, sources, contents, trace_id=None):
        self.calls.append((normalized_query, list(sources), list(contents)))
        return self.answer


class ExplodingFetcher(ContentFetcher):
    def fetch_contents(self, sources, trace_id=None):
        raise RuntimeError("unexpected")


def build(sources=SOURCES, contents=CONTENTS, answer=ANSWER, fetcher=None):
    repository = FakeRepository(sources)
    fetcher = fetcher or FakeFetcher(contents)
    generator = FakeGenerator(answer)
    cache = ResultCache(InMemoryTTLCache(ttl_seconds=600))
    orchestrator = SearchOrchestrator(repository, fetcher, generator, cache)
    return orchestrator, repository, fetcher, generator, cache


def test_equivalent_queries_run_the_pipeline_once():
    orchestrator, repository, fetcher, generator, cache = build()

    first = orchestrator.search("spring boot")
    second = orchestrator.search(" Spring  boot  ")

    assert first.answer == ANSWER
    assert second is first
    assert repository.calls == [("spring boot", None)]
    assert fetcher.calls == [SOURCES]
    assert generator.calls == [("spring boot", SOURCES, CONTENTS)]
    assert cache.get(normalize(" Spring  boot  ")) is first


def test_empty_sources_skip_later_stages_and_are_not_cached():
    orchestrator, repository, fetcher, generator, cache = build(sources=[])

    first = orchestrator.search("outage test")
    second = orchestrator.search("outage test")

    for result in (first, second):
        assert result.sources == ()
        assert result.answer == SEARCH_UNAVAILABLE_ANSWER
        assert result.is_fallback
    assert len(repository.calls) == 2
    assert fetcher.calls == []
    assert generator.calls == []
    assert cache.get("outage test") is None


def test_llm_apology_is_returned_but_not_cached():
    orchestrator, repository, _, generator, cache = build(answer=LLM_APOLOGY_ANSWER)

    result = orchestrator.search("spring boot")
    orchestrator.search("spring boot")

    assert result.answer == LLM_APOLOGY_ANSWER
    assert list(result.sources) == SOURCES
    assert result.is_fallback
    assert len(repository.calls) == 2
    assert len(generator.calls) == 2
    assert cache.get("spring boot") is None


def test_fallback_in_cache_is_treated_as_miss():
    orchestrator, repository, _, _, cache = build()
    cache._store.set("spring boot", AnswerResult.search_unavailable())

    result = orchestrator.search("Spring Boot")

    assert result.answer == ANSWER
    assert len(repository.calls) == 1


def test_trace_id_is_passed_to_every_stage():
    orchestrator, repository, _, _, _ = build()
    orchestrator.search("spring boot", trace_id="trace-01")
    assert repository.calls == [("spring boot", "trace-01")]


def test_unexpected_stage_error_degrades_to_fallback():
    orchestrator, _, _, generator, cache = build(fetcher=ExplodingFetcher())

    result = orchestrator.search("spring boot")

    assert result.is_fallback
    assert generator.calls == []
    assert cache.get("spring boot") is None


def test_none_query_is_normalized_to_empty_key():
    orchestrator, repository, _, _, _ = build(sources=[])
    result = orchestrator.search(None)
    assert result.is_fallback
    assert repository.calls == [("", None)]
