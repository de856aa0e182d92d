"""Tests for the reference search client."""

import asyncio
import json

import httpx

from blogrefresh.config.models import DEFAULT_BLOCKED_DOMAINS
from blogrefresh.scraping import ReferenceSearcher, is_blocked

ENDPOINT = "https://google.serper.dev/search"


def searcher(handler, api_key="test-key", **kwargs) -> ReferenceSearcher:
    return ReferenceSearcher(
        api_key=api_key,
        endpoint=ENDPOINT,
        blocked_domains=list(DEFAULT_BLOCKED_DOMAINS),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def organic(*links):
    return {"organic": [{"title": f"Result {i}", "link": url} for i, url in enumerate(links)]}


class TestIsBlocked:
    def test_exact_and_subdomains(self):
        assert is_blocked("https://youtube.com/watch?v=1", ["youtube.com"])
        assert is_blocked("https://www.youtube.com/watch?v=1", ["youtube.com"])
        assert is_blocked("https://en.wikipedia.org/wiki/Chatbot", ["wikipedia.org"])

    def test_lookalike_hosts_pass(self):
        assert not is_blocked("https://notyoutube.com/post", ["youtube.com"])
        assert not is_blocked("https://blog.example.com/youtube.com-tips", ["youtube.com"])

    def test_url_without_host_is_blocked(self):
        assert is_blocked("not a url", ["youtube.com"])


class TestSearch:
    def test_sends_query_and_key(self):
        seen = {}

        def handler(request):
            seen["key"] = request.headers["X-API-KEY"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=organic("https://a.com/1"))

        asyncio.run(searcher(handler).search("Chatbots in healthcare"))

        assert seen["key"] == "test-key"
        assert seen["body"] == {"q": "Chatbots in healthcare blog article", "num": 10}

    def test_first_two_survivors_in_rank_order(self):
        payload = organic(
            "https://www.youtube.com/watch?v=x",
            "https://a.com/1",
            "https://beyondchats.com/blogs/self/",
            "https://b.com/2",
            "https://c.com/3",
        )
        result = asyncio.run(searcher(lambda r: httpx.Response(200, json=payload)).search("q"))

        assert result.links == ["https://a.com/1", "https://b.com/2"]
        assert result.total_results == 5
        assert result.success

    def test_only_blocked_domains_yields_nothing(self):
        payload = organic(
            "https://www.reddit.com/r/x",
            "https://www.linkedin.com/pulse/y",
            "https://www.amazon.com/dp/z",
        )
        result = asyncio.run(searcher(lambda r: httpx.Response(200, json=payload)).search("q"))
        assert result.links == []

    def test_missing_organic_and_bad_entries(self):
        payload = {"organic": [{"title": "no link"}, "junk", {"link": "https://ok.com/a"}]}
        result = asyncio.run(searcher(lambda r: httpx.Response(200, json=payload)).search("q"))
        assert result.links == ["https://ok.com/a"]

        result = asyncio.run(searcher(lambda r: httpx.Response(200, json={})).search("q"))
        assert result.links == []

    def test_api_error_yields_nothing(self):
        handler = lambda r: httpx.Response(403, json={"message": "Unauthorized."})
        result = asyncio.run(searcher(handler).search("q"))
        assert result.links == []
        assert not result.success
        assert result.error == "Unauthorized."

    def test_non_object_error_body_yields_nothing(self):
        for body in (["bad gateway"], "bad gateway", {"message": ["nested"]}):
            handler = lambda r, body=body: httpx.Response(502, json=body)
            result = asyncio.run(searcher(handler).search("q"))
            assert result.links == []
            assert not result.success
            assert result.error == "HTTP 502"

    def test_malformed_json_yields_nothing(self):
        result = asyncio.run(searcher(lambda r: httpx.Response(200, text="<html>")).search("q"))
        assert result.links == []
        assert not result.success

    def test_no_api_key_skips_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=organic("https://a.com/1"))

        result = asyncio.run(searcher(handler, api_key=None).search("q"))
        assert result.links == []
        assert calls == []
