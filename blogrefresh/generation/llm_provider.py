"""LLM provider interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI
from rich.console import Console

from ..scraping.models import ReferenceArticle
from .models import RewriteResult
from .prompts import build_rewrite_prompt

console = Console()


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def rewrite_article(
        self,
        original_content: str,
        references: Sequence[ReferenceArticle],
    ) -> RewriteResult:
        """
        Rewrite an article using reference material.

        Args:
            original_content: Text of the stored article
            references: Scraped reference pages

        Returns:
            RewriteResult with empty content on failure
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class OpenAIProvider(LLMProvider):
    """Chat-completion provider for any OpenAI-compatible API (Groq by default)."""

    def __init__(
        self,
        api_key: str,
        model: str = "openai/gpt-oss-20b",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        original_chars: int = 3000,
        reference_chars: int = 4000,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            api_key: Provider API key
            model: Model name to use
            base_url: OpenAI-compatible base URL
            client: Prebuilt client (for testing)
        """
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.original_chars = original_chars
        self.reference_chars = reference_chars
        self.total_tokens = 0
        self.api_calls = 0

    def rewrite_article(
        self,
        original_content: str,
        references: Sequence[ReferenceArticle],
    ) -> RewriteResult:
        """Rewrite an article with one chat-completion request."""
        prompt = build_rewrite_prompt(
            original_content,
            references,
            original_chars=self.original_chars,
            reference_chars=self.reference_chars,
        )

        try:
            self.api_calls += 1
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            console.print(f"[red]   LLM error: {e}[/red]")
            return RewriteResult(success=False, error=str(e))

        tokens = 0
        if response.usage:
            tokens = response.usage.total_tokens
            self.total_tokens += tokens

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()

        if not content:
            return RewriteResult(success=False, error="Empty completion", tokens_used=tokens)

        return RewriteResult(content=content, tokens_used=tokens)

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing."""

    def __init__(self, response: Optional[str] = None) -> None:
        """Initialize mock provider; ``response=""`` simulates an empty completion."""
        self.response = response
        self.calls: List[tuple] = []

    def rewrite_article(
        self,
        original_content: str,
        references: Sequence[ReferenceArticle],
    ) -> RewriteResult:
        """Mock rewrite."""
        self.calls.append(("rewrite", original_content, [ref.url for ref in references]))

        if self.response is None:
            content = f"## Updated\n\n{original_content[:200]}"
        else:
            content = self.response

        if not content:
            return RewriteResult(success=False, error="Empty completion")
        return RewriteResult(content=content, tokens_used=100)

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "model": "mock",
        }


def create_llm_provider(llm_config: Dict[str, Any], refresh_config: Optional[Dict[str, Any]] = None) -> LLMProvider:
    """Build the configured provider; raises ValueError when it can't be used."""
    refresh_config = refresh_config or {}
    provider = llm_config.get("provider", "groq")

    if provider not in ("groq", "openai"):
        raise ValueError(f"Unknown LLM provider: {provider}")

    api_key = llm_config.get("api_key")
    if not api_key:
        raise ValueError(f"No API key found for LLM provider '{provider}' (set {llm_config.get('api_key_env')})")

    return OpenAIProvider(
        api_key=api_key,
        model=llm_config.get("model", "openai/gpt-oss-20b"),
        base_url=llm_config.get("base_url"),
        temperature=llm_config.get("temperature", 0.7),
        max_tokens=llm_config.get("max_tokens", 4000),
        original_chars=refresh_config.get("original_prompt_chars", 3000),
        reference_chars=refresh_config.get("reference_prompt_chars", 4000),
    )
