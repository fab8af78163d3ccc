"""Tests for settings and the Claude client wrapper."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from leadintel.ai.client import LLMClient
from leadintel.config import Settings
from leadintel.exceptions import LLMError


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SYNTHESIS_MAX_CONCURRENT", raising=False)
        s = Settings(_env_file=None)
        assert s.synthesis_max_concurrent == 3
        assert s.outreach_ready_min_score == 6
        assert s.hot_lead_min_score == 8

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SYNTHESIS_MAX_CONCURRENT", "5")
        monkeypatch.setenv("SENDER_COMPANY", "Acme Gov")
        s = Settings(_env_file=None)
        assert s.synthesis_max_concurrent == 5
        assert s.sender_company == "Acme Gov"

    def test_sqlite_path(self):
        assert Settings(_env_file=None, database_url="sqlite:////tmp/leads.db").sqlite_path.name == "leads.db"
        assert Settings(_env_file=None, database_url="sqlite:///:memory:").sqlite_path is None
        assert Settings(_env_file=None, database_url="postgresql://localhost/leads").sqlite_path is None


def _text_block(text):
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


class TestLLMClient:
    def test_generate_joins_text_blocks(self):
        api = MagicMock()
        api.messages.create = AsyncMock(return_value=MagicMock(content=[_text_block("Hello "), _text_block("there")]))
        client = LLMClient(api_key="sk-test", model="claude-test", client=api)

        assert asyncio.run(client.generate("Hi", max_tokens=100, system="Be brief")) == "Hello there"

        kwargs = api.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 100
        assert kwargs["system"] == "Be brief"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    def test_missing_key(self):
        with pytest.raises(LLMError, match="ANTHROPIC_API_KEY not set"):
            asyncio.run(LLMClient(api_key="").generate("Hi"))

    def test_api_error_wrapped(self):
        api = MagicMock()
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        api.messages.create = AsyncMock(side_effect=anthropic.APIConnectionError(request=request))
        client = LLMClient(api_key="sk-test", client=api)

        with pytest.raises(LLMError) as exc_info:
            asyncio.run(client.generate("Hi"))
        assert isinstance(exc_info.value.__cause__, anthropic.APIError)

    def test_empty_response(self):
        api = MagicMock()
        api.messages.create = AsyncMock(return_value=MagicMock(content=[]))
        with pytest.raises(LLMError):
            asyncio.run(LLMClient(api_key="sk-test", client=api).generate("Hi"))
