"""
Scripted agent capability.

An offline AgentCapability that answers from canned replies keyed by role
name. Used by the test suite and by the API when AGENTFLOW_MOCK_LLM is
set, so the whole engine can run without network access.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from agentflow.shared.contracts.agent_result import (
    AgentFailure,
    AgentResult,
    AgentSuccess,
    FailureKind,
)
from agentflow.shared.contracts.roles import AgentInvocation, AgentRole, GenerationParams


logger = logging.getLogger(__name__)

Reply = Union[str, AgentFailure, Callable[[AgentInvocation], Union[str, AgentResult]]]


@dataclass
class ScriptedReply:
    """
    A canned reply with an optional artificial delay.

    Attributes:
        reply: Text, a failure, or a callable computing either from the call
        delay: Seconds to wait before answering
        raises: Exception to raise instead of answering (contract breach)
    """

    reply: Reply = ""
    delay: float = 0.0
    raises: Optional[Exception] = None


class ScriptedAgentCapability:
    """
    AgentCapability answering from a script.

    Args:
        script: Replies keyed by role name. Plain values are wrapped in a
            ScriptedReply with no delay.
        default: Reply for roles missing from the script. When None, the
            reply echoes the role name and the start of the input.
    """

    def __init__(
        self,
        script: Optional[Dict[str, Union[Reply, ScriptedReply]]] = None,
        default: Optional[Reply] = None,
    ):
        self._script: Dict[str, ScriptedReply] = {}
        for name, entry in (script or {}).items():
            self.set(name, entry)
        self._default = default
        self.calls: List[AgentInvocation] = []
        self.completed: List[str] = []

    def set(self, role_name: str, entry: Union[Reply, ScriptedReply]) -> None:
        if not isinstance(entry, ScriptedReply):
            entry = ScriptedReply(reply=entry)
        self._script[role_name] = entry

    def calls_for(self, role_name: str) -> List[AgentInvocation]:
        return [c for c in self.calls if c.role.name == role_name]

    async def invoke(
        self,
        role: AgentRole,
        input: str,
        timeout: float,
        overrides: Optional[GenerationParams] = None,
    ) -> AgentResult:
        invocation = AgentInvocation(role=role, input=input, timeout=timeout, overrides=overrides)
        self.calls.append(invocation)
        entry = self._script.get(role.name, ScriptedReply(reply=self._default_reply))

        start_time = time.perf_counter()
        if entry.delay:
            if entry.delay > timeout:
                await asyncio.sleep(timeout)
                return AgentFailure(
                    kind=FailureKind.TIMEOUT,
                    message=f"no response within {timeout:.1f}s",
                )
            await asyncio.sleep(entry.delay)

        if entry.raises is not None:
            raise entry.raises

        reply = entry.reply
        if callable(reply):
            reply = reply(invocation)
        self.completed.append(role.name)

        if isinstance(reply, (AgentSuccess, AgentFailure)):
            return reply
        duration_ms = (time.perf_counter() - start_time) * 1000
        if not reply.strip():
            return AgentFailure(
                kind=FailureKind.INVALID_RESPONSE,
                message="provider returned empty content",
            )
        return AgentSuccess(text=reply.strip(), latency_ms=duration_ms)

    def _default_reply(self, invocation: AgentInvocation) -> Union[str, AgentResult]:
        if self._default is not None:
            if callable(self._default):
                return self._default(invocation)
            return self._default
        preview = " ".join(invocation.input.split())[:80]
        return f"[{invocation.role.name}] {preview}"
