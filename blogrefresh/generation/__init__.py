"""Article rewriting with a language model."""

from .llm_provider import LLMProvider, MockLLMProvider, OpenAIProvider, create_llm_provider
from .models import RewriteResult
from .prompts import append_references, build_rewrite_prompt, format_references

__all__ = [
    "LLMProvider",
    "MockLLMProvider",
    "OpenAIProvider",
    "RewriteResult",
    "append_references",
    "build_rewrite_prompt",
    "create_llm_provider",
    "format_references",
]
