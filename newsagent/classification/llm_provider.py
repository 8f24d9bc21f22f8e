"""LLM provider interface and implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Union

from openai import OpenAI

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def complete(self, prompt: str, max_tokens: int = 1024) -> str:
        """
        Send a single-turn prompt and return the response text.

        Args:
            prompt: Prompt text
            max_tokens: Maximum tokens to generate

        Returns:
            Response text

        Raises:
            Exception: Any transport or API error; callers decide how to degrade.
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Model name, call count and token usage so far."""
        pass


# Dollars per million tokens
MODEL_PRICES = {
    "gpt-4o": (2.50, 10.00),
    "gpt-4o-mini": (0.15, 0.60),
    "gpt-4.1-mini": (0.40, 1.60),
}


class OpenAIProvider(LLMProvider):
    """Chat completions through the openai client or a compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: float = 60.0,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: API key for the endpoint
            model: Chat model name
            base_url: Base URL of an OpenAI-compatible endpoint
            timeout: Per-request timeout in seconds
        """
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1)
        self.model = model
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.api_calls = 0

    def complete(self, prompt: str, max_tokens: int = 1024) -> str:
        """Run one single-turn chat completion."""
        self.api_calls += 1
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2,
            max_tokens=max_tokens,
        )

        usage = response.usage
        if usage:
            self.prompt_tokens += usage.prompt_tokens or 0
            self.completion_tokens += usage.completion_tokens or 0

        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()

    def get_usage_stats(self) -> Dict:
        """Token counts and cost for this provider's calls so far."""
        estimated_cost = None
        prices = MODEL_PRICES.get(self.model)
        if prices:
            prompt_price, completion_price = prices
            estimated_cost = round(
                (self.prompt_tokens * prompt_price + self.completion_tokens * completion_price) / 1e6,
                6,
            )

        return {
            "model": self.model,
            "api_calls": self.api_calls,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "estimated_cost": estimated_cost,
        }


Response = Union[str, Exception, Callable[[str], str]]


class MockLLMProvider(LLMProvider):
    """Mock LLM provider returning scripted responses.

    Each call consumes the next scripted response. A response can be a string,
    an exception instance (raised), or a callable taking the prompt. When the
    script runs out, ``default`` is returned.
    """

    def __init__(self, responses: Optional[List[Response]] = None, default: str = "[]") -> None:
        """Initialize mock provider."""
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[str] = []

    def complete(self, prompt: str, max_tokens: int = 1024) -> str:
        """Return the next scripted response."""
        self.calls.append(prompt)
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "model": "mock",
            "api_calls": len(self.calls),
            "prompt_tokens": 0,
            "completion_tokens": 0,
            "estimated_cost": 0.0,
        }
