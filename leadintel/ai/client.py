"""Anthropic Claude API wrapper."""

import logging

import anthropic

from leadintel.config import settings
from leadintel.exceptions import LLMError

logger = logging.getLogger(__name__)


class LLMClient:
    """Async text-generation client, built once and shared by its users.

    The underlying Anthropic client is created on first use and reused for
    every call made through this instance.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise LLMError("ANTHROPIC_API_KEY not set")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 2048,
        system: str | None = None,
        temperature: float = 0.7,
    ) -> str:
        """Send a single user prompt and return the concatenated text response."""
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            message = await self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            logger.error("Claude request failed (%s): %s", self.model, e)
            raise LLMError(str(e)) from e

        text = "".join(block.text for block in message.content if block.type == "text")
        if not text:
            raise LLMError("Unexpected response type: no text content")
        return text


def build_llm_client() -> LLMClient:
    """LLM client configured from settings."""
    return LLMClient(api_key=settings.anthropic_api_key, model=settings.llm_model)
