"""
OpenAI-backed agent capability with retry logic.

Provides a cached async client instance and an AgentCapability that wraps
chat completions with automatic retries using tenacity, bounded by the
per-call timeout.
"""

import asyncio
import logging
import os
import time
from typing import Any, Dict, List, Optional

from openai import (
    APIConnectionError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.contracts.agent_result import (
    AgentFailure,
    AgentResult,
    AgentSuccess,
    FailureKind,
)
from agentflow.shared.contracts.roles import AgentInvocation, AgentRole, GenerationParams


logger = logging.getLogger(__name__)

# Errors worth another attempt; everything else fails the call at once.
TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)

# Module-level cache for the OpenAI client
_client: Optional[AsyncOpenAI] = None


def get_cached_client() -> AsyncOpenAI:
    """
    Returns a cached instance of the async OpenAI client.

    Uses the OPENAI_API_KEY environment variable for authentication.
    The client is created once and reused for all subsequent calls.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = AsyncOpenAI(api_key=api_key)
    return _client


def build_messages(invocation: AgentInvocation) -> List[Dict[str, str]]:
    """Build the chat messages for one invocation."""
    return [
        {"role": "system", "content": invocation.role.instruction},
        {"role": "user", "content": invocation.input},
    ]


class OpenAIAgentCapability:
    """
    AgentCapability backed by the OpenAI Chat Completions API.

    Args:
        client: Optional AsyncOpenAI instance. If not provided, the cached
            client is created on first use.
        config: Retry and model settings. Uses DEFAULT_CONFIG if not provided.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        config: Optional[OrchestratorConfig] = None,
    ):
        self._client = client
        self._config = config or DEFAULT_CONFIG

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_cached_client()
        return self._client

    async def invoke(
        self,
        role: AgentRole,
        input: str,
        timeout: float,
        overrides: Optional[GenerationParams] = None,
    ) -> AgentResult:
        invocation = AgentInvocation(role=role, input=input, timeout=timeout, overrides=overrides)
        _log = f"[role={role.name}] [capability=openai] "

        start_time = time.perf_counter()
        try:
            content = await asyncio.wait_for(self._complete(invocation), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{_log}Call timed out after {timeout:.1f}s")
            return AgentFailure(
                kind=FailureKind.TIMEOUT,
                message=f"no response within {timeout:.1f}s",
            )
        except Exception as e:
            logger.warning(f"{_log}Provider error: {type(e).__name__}: {e}")
            return AgentFailure(
                kind=FailureKind.PROVIDER_ERROR,
                message=f"{type(e).__name__}: {e}",
            )
        duration_ms = (time.perf_counter() - start_time) * 1000

        if not content or not content.strip():
            logger.warning(f"{_log}Empty completion after {duration_ms:.0f}ms")
            return AgentFailure(
                kind=FailureKind.INVALID_RESPONSE,
                message="provider returned empty content",
            )

        logger.info(f"{_log}LLM responded | duration={duration_ms:.0f}ms, chars={len(content)}")
        return AgentSuccess(text=content.strip(), latency_ms=duration_ms)

    async def _complete(self, invocation: AgentInvocation) -> Optional[str]:
        params = invocation.params
        request: Dict[str, Any] = {
            "model": params.model or self._config.model,
            "messages": build_messages(invocation),
        }
        if params.temperature is not None:
            request["temperature"] = params.temperature
        if params.max_tokens is not None:
            request["max_tokens"] = params.max_tokens

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._config.max_retries),
            wait=wait_exponential(
                multiplier=1,
                min=self._config.retry_min_wait,
                max=self._config.retry_max_wait,
            ),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info(
                        f"[role={invocation.role.name}] [capability=openai] "
                        f"Retrying | attempt={attempt.retry_state.attempt_number}"
                    )
                response = await self.client.chat.completions.create(**request)

        return response.choices[0].message.content
