"""Tests for prompt construction and the chat-completion provider."""

from types import SimpleNamespace

from blogrefresh.generation import OpenAIProvider, append_references, build_rewrite_prompt, create_llm_provider
from blogrefresh.scraping import ReferenceArticle

import pytest


REFS = [
    ReferenceArticle(url="https://a.com/1", content="Alpha content"),
    ReferenceArticle(url="https://b.com/2", content="Beta content"),
]


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=message)],
            usage=SimpleNamespace(total_tokens=42),
        )


def provider(completions: FakeCompletions) -> OpenAIProvider:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIProvider(api_key="k", client=client)


class TestPrompt:
    def test_labels_references_with_urls(self):
        prompt = build_rewrite_prompt("Original body", REFS)
        assert "ORIGINAL ARTICLE:\nOriginal body" in prompt
        assert "Reference 1 (https://a.com/1):\nAlpha content" in prompt
        assert "\n\n---\n\nReference 2 (https://b.com/2):\nBeta content" in prompt
        assert "Return ONLY the improved article content" in prompt

    def test_truncates_original_and_references(self):
        original = "o" * 5000
        refs = [ReferenceArticle(url="https://a.com/1", content="r" * 6000)]
        prompt = build_rewrite_prompt(original, refs)

        assert "o" * 3000 in prompt
        assert "o" * 3001 not in prompt
        header = "Reference 1 (https://a.com/1):\n"
        assert header + "r" * (4000 - len(header)) in prompt
        assert "r" * (4001 - len(header)) not in prompt

    def test_append_references(self):
        text = append_references("Body", ["https://a.com/1", "https://b.com/2"])
        assert text == "Body\n\n---\n\n**References:**\n1. https://a.com/1\n2. https://b.com/2"


class TestOpenAIProvider:
    def test_single_user_message(self):
        completions = FakeCompletions(content="  ## New\n\nBody  ")
        result = provider(completions).rewrite_article("Original", REFS)

        assert result.success
        assert result.content == "## New\n\nBody"
        request = completions.requests[0]
        assert request["model"] == "openai/gpt-oss-20b"
        assert request["temperature"] == 0.7
        assert request["max_tokens"] == 4000
        assert len(request["messages"]) == 1
        assert request["messages"][0]["role"] == "user"

    def test_tracks_usage(self):
        llm = provider(FakeCompletions(content="Body"))
        llm.rewrite_article("Original", REFS)
        assert llm.get_usage_stats()["total_tokens"] == 42
        assert llm.get_usage_stats()["api_calls"] == 1

    def test_empty_completion(self):
        result = provider(FakeCompletions(content=None)).rewrite_article("Original", REFS)
        assert result.content == ""
        assert not result.success

    def test_api_error(self):
        result = provider(FakeCompletions(error=RuntimeError("rate limited"))).rewrite_article("Original", REFS)
        assert result.content == ""
        assert result.error == "rate limited"


class TestCreateProvider:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            create_llm_provider({"provider": "groq", "api_key": None, "api_key_env": "GROQ_API_KEY"})

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_llm_provider({"provider": "mystery", "api_key": "k"})

    def test_uses_refresh_prompt_caps(self):
        llm = create_llm_provider(
            {"provider": "groq", "api_key": "k", "model": "m", "base_url": "https://api.groq.com/openai/v1"},
            {"original_prompt_chars": 100, "reference_prompt_chars": 200},
        )
        assert llm.model == "m"
        assert llm.original_chars == 100
        assert llm.reference_chars == 200
