"""Tests for the refresh job state machine."""

import asyncio
import json
import threading

import httpx
import pytest

from blogrefresh.generation import MockLLMProvider
from blogrefresh.config.models import DEFAULT_BLOCKED_DOMAINS
from blogrefresh.pipeline import InvalidTransition, RecordOutcome, RefreshJob, RefreshState
from blogrefresh.scraping import REFERENCE_PROFILE, ContentExtractor, RateLimiter, ReferenceSearcher

from .conftest import article_html, make_transport

SEARCH_URL = "https://google.serper.dev/search"


def search_routes(links):
    payload = {"organic": [{"link": url} for url in links]}
    return {SEARCH_URL: lambda request: httpx.Response(200, json=payload)}


def refresh_job(refresh_config, store, routes, llm=None, calls=None) -> RefreshJob:
    transport = make_transport(routes, calls)
    searcher = ReferenceSearcher(
        api_key="key",
        endpoint=SEARCH_URL,
        blocked_domains=list(DEFAULT_BLOCKED_DOMAINS),
        transport=transport,
    )
    return RefreshJob(
        refresh_config,
        store,
        searcher,
        llm or MockLLMProvider(),
        extractor=ContentExtractor(REFERENCE_PROFILE, transport=transport),
        reference_limiter=RateLimiter(0),
        record_limiter=RateLimiter(0),
    )


class TestStateMachine:
    def test_happy_path(self):
        outcome = RecordOutcome(article_id=1, title="t")
        for state in (
            RefreshState.SEARCHING,
            RefreshState.SCRAPING_REFERENCES,
            RefreshState.REWRITING,
            RefreshState.SAVED,
        ):
            outcome.advance(state)
        assert outcome.state.is_terminal

    def test_skip_records_origin(self):
        outcome = RecordOutcome(article_id=1, title="t")
        outcome.advance(RefreshState.SEARCHING)
        outcome.skip("nothing found")
        assert outcome.state == RefreshState.SKIPPED
        assert outcome.skipped_from == RefreshState.SEARCHING
        assert outcome.reason == "nothing found"

    def test_cannot_jump_states(self):
        outcome = RecordOutcome(article_id=1, title="t")
        with pytest.raises(InvalidTransition):
            outcome.advance(RefreshState.REWRITING)

    def test_terminal_states_are_final(self):
        outcome = RecordOutcome(article_id=1, title="t")
        outcome.skip("x")
        with pytest.raises(InvalidTransition):
            outcome.advance(RefreshState.SEARCHING)


def test_saves_rewrite_with_references(refresh_config, store):
    store.add("Chatbots 101", "https://beyondchats.com/blogs/chatbots-101/", "Original chatbot text")
    routes = search_routes(["https://a.com/1", "https://b.com/2", "https://c.com/3"])
    routes["https://a.com/1"] = article_html("Alpha reference")
    routes["https://b.com/2"] = article_html("Beta reference")
    llm = MockLLMProvider(response="## Better\n\n- one\n- two")

    report = refresh_job(refresh_config, store, routes, llm).run_sync(None)

    article = store.get_article(None, 1)
    assert report.count(RefreshState.SAVED) == 1
    assert article.references == ["https://a.com/1", "https://b.com/2"]
    assert article.updated_content == (
        "## Better\n\n- one\n- two\n\n---\n\n**References:**\n1. https://a.com/1\n2. https://b.com/2"
    )
    assert llm.calls == [("rewrite", "Original chatbot text", ["https://a.com/1", "https://b.com/2"])]


def test_only_blocked_results_skip_without_rewrite(refresh_config, store):
    store.add("Chatbots 101", "https://beyondchats.com/blogs/chatbots-101/")
    routes = search_routes(["https://www.youtube.com/watch?v=1", "https://en.wikipedia.org/wiki/Chatbot"])
    llm = MockLLMProvider()

    report = refresh_job(refresh_config, store, routes, llm).run_sync(None)

    outcome = report.outcomes[0]
    assert outcome.state == RefreshState.SKIPPED
    assert outcome.skipped_from == RefreshState.SEARCHING
    assert llm.calls == []
    assert not store.get_article(None, 1).updated_content


def test_unscrapable_references_skip(refresh_config, store):
    store.add("Chatbots 101", "https://beyondchats.com/blogs/chatbots-101/")
    routes = search_routes(["https://a.com/1", "https://b.com/2"])
    routes["https://a.com/1"] = httpx.Response(403)
    llm = MockLLMProvider()

    report = refresh_job(refresh_config, store, routes, llm).run_sync(None)

    assert report.outcomes[0].skipped_from == RefreshState.SCRAPING_REFERENCES
    assert llm.calls == []


def test_empty_rewrite_skips(refresh_config, store):
    store.add("Chatbots 101", "https://beyondchats.com/blogs/chatbots-101/")
    routes = search_routes(["https://a.com/1"])
    routes["https://a.com/1"] = article_html("Alpha reference")

    report = refresh_job(refresh_config, store, routes, MockLLMProvider(response="")).run_sync(None)

    assert report.outcomes[0].skipped_from == RefreshState.REWRITING
    assert store.saved_refreshes == []


def test_failure_on_one_record_does_not_stop_the_run(refresh_config, store):
    store.add("No results", "https://beyondchats.com/blogs/a/")
    store.add("Has results", "https://beyondchats.com/blogs/b/")

    def search(request):
        query = json.loads(request.content)["q"]
        links = [] if "No results" in query else [{"link": "https://a.com/1"}]
        return httpx.Response(200, json={"organic": links})

    routes = {SEARCH_URL: search, "https://a.com/1": article_html("Alpha reference")}

    report = refresh_job(refresh_config, store, routes).run_sync(None)

    assert [o.state for o in report.outcomes] == [RefreshState.SKIPPED, RefreshState.SAVED]
    assert store.saved_refreshes == [2]


def test_gateway_error_body_does_not_stop_the_run(refresh_config, store):
    store.add("First", "https://beyondchats.com/blogs/a/")
    store.add("Second", "https://beyondchats.com/blogs/b/")
    routes = {SEARCH_URL: lambda request: httpx.Response(502, json=["bad gateway"])}

    report = refresh_job(refresh_config, store, routes).run_sync(None)

    assert [o.state for o in report.outcomes] == [RefreshState.SKIPPED, RefreshState.SKIPPED]
    assert all(o.skipped_from == RefreshState.SEARCHING for o in report.outcomes)
    assert [o.reason for o in report.outcomes] == ["HTTP 502", "HTTP 502"]
    assert store.saved_refreshes == []


def test_rewrite_runs_off_the_event_loop_thread(refresh_config, store):
    store.add("Topic", "https://beyondchats.com/blogs/topic/")
    routes = {**search_routes(["https://a.com/1"]), "https://a.com/1": article_html("Alpha reference")}
    threads = []

    class ThreadRecordingProvider(MockLLMProvider):
        def rewrite_article(self, original_content, references):
            threads.append(threading.get_ident())
            return super().rewrite_article(original_content, references)

    report = refresh_job(refresh_config, store, routes, llm=ThreadRecordingProvider()).run_sync(None)

    assert report.outcomes[0].state == RefreshState.SAVED
    assert threads and threads[0] != threading.get_ident()


def test_refreshed_records_are_never_candidates(refresh_config, store):
    store.add("Done", "https://beyondchats.com/blogs/done/", updated_content="Already new", references=["https://x.com"])
    calls = []

    report = refresh_job(refresh_config, store, search_routes(["https://a.com/1"]), calls=calls).run_sync(None)

    assert report.candidates == 0
    assert calls == []
    done = store.get_article(None, 1)
    assert done.updated_content == "Already new"
    assert done.references == ["https://x.com"]


def test_already_refreshed_record_is_skipped(refresh_config, store):
    article = store.add("Done", "https://beyondchats.com/blogs/done/", updated_content="Already new")
    job = refresh_job(refresh_config, store, search_routes(["https://a.com/1"]))

    outcome = asyncio.run(job.process_record(None, article))
    assert outcome.state == RefreshState.SKIPPED
    assert outcome.skipped_from == RefreshState.PENDING


def test_dry_run_does_not_save(refresh_config, store):
    store.add("Chatbots 101", "https://beyondchats.com/blogs/chatbots-101/")
    routes = search_routes(["https://a.com/1"])
    routes["https://a.com/1"] = article_html("Alpha reference")

    report = refresh_job(refresh_config, store, routes).run_sync(None, dry_run=True)

    assert report.outcomes[0].skipped_from == RefreshState.REWRITING
    assert report.outcomes[0].references == ["https://a.com/1"]
    assert store.saved_refreshes == []


def test_limit_caps_candidates(refresh_config, store):
    for n in range(3):
        store.add(f"Post {n}", f"https://beyondchats.com/blogs/{n}/")

    report = refresh_job(refresh_config, store, search_routes([])).run_sync(None, limit=2)

    assert report.candidates == 2
    assert len(report.outcomes) == 2
