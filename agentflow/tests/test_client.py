"""
Tests for the OpenAI-backed agent capability.

The AsyncOpenAI client is replaced with an AsyncMock so no network call
is made.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from openai import APIConnectionError

from agentflow.shared.config import get_config
from agentflow.shared.contracts.agent_result import FailureKind
from agentflow.shared.contracts.roles import AgentRole, GenerationParams
from agentflow.shared.llm.capability import AgentCapability
from agentflow.shared.llm.client import OpenAIAgentCapability


ROLE = AgentRole(name="billing_support", instruction="You are a Billing Specialist.", temperature=0.2)


# ============================================================================
# Test Fixtures
# ============================================================================


def _completion(content):
    """Build a minimal chat completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _make_capability(create):
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    config = get_config(model="test-model", max_retries=3, retry_min_wait=0, retry_max_wait=0)
    return OpenAIAgentCapability(client=client, config=config)


def _connection_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return APIConnectionError(request=request)


# ============================================================================
# TestOpenAIAgentCapability
# ============================================================================


class TestOpenAIAgentCapability:
    """Tests for result mapping, retries and request construction."""

    def test_satisfies_protocol(self):
        assert isinstance(_make_capability(AsyncMock()), AgentCapability)

    @pytest.mark.asyncio
    async def test_success(self):
        create = AsyncMock(return_value=_completion("  Your invoice is attached.\n"))
        capability = _make_capability(create)

        result = await capability.invoke(ROLE, "Where is my invoice?", timeout=5.0)

        assert result.ok
        assert result.text == "Your invoice is attached."
        assert result.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_request_uses_role_and_overrides(self):
        create = AsyncMock(return_value=_completion("ok"))
        capability = _make_capability(create)

        await capability.invoke(
            ROLE, "hello", timeout=5.0, overrides=GenerationParams(max_tokens=50)
        )

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 50
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are a Billing Specialist."},
            {"role": "user", "content": "hello"},
        ]

    @pytest.mark.asyncio
    async def test_empty_content_is_invalid_response(self):
        capability = _make_capability(AsyncMock(return_value=_completion("   ")))

        result = await capability.invoke(ROLE, "hello", timeout=5.0)

        assert result.kind == FailureKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_missing_content_is_invalid_response(self):
        capability = _make_capability(AsyncMock(return_value=_completion(None)))

        result = await capability.invoke(ROLE, "hello", timeout=5.0)

        assert result.kind == FailureKind.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_slow_call_times_out(self):
        async def slow(**kwargs):
            await asyncio.sleep(1.0)
            return _completion("late")

        capability = _make_capability(AsyncMock(side_effect=slow))

        result = await capability.invoke(ROLE, "hello", timeout=0.1)

        assert result.kind == FailureKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self):
        """A connection error is retried and the next attempt succeeds."""
        create = AsyncMock(side_effect=[_connection_error(), _completion("recovered")])
        capability = _make_capability(create)

        result = await capability.invoke(ROLE, "hello", timeout=5.0)

        assert result.ok
        assert result.text == "recovered"
        assert create.await_count == 2

    @pytest.mark.asyncio
    async def test_retries_exhausted_is_provider_error(self):
        create = AsyncMock(side_effect=_connection_error())
        capability = _make_capability(create)

        result = await capability.invoke(ROLE, "hello", timeout=5.0)

        assert result.kind == FailureKind.PROVIDER_ERROR
        assert create.await_count == 3

    @pytest.mark.asyncio
    async def test_non_transient_error_is_not_retried(self):
        create = AsyncMock(side_effect=ValueError("bad request"))
        capability = _make_capability(create)

        result = await capability.invoke(ROLE, "hello", timeout=5.0)

        assert result.kind == FailureKind.PROVIDER_ERROR
        assert "bad request" in result.message
        assert create.await_count == 1
