"""
Agent capability interface.

Every orchestration component talks to text generation only through
this protocol. Implementations must honour the timeout, must report every
failure as an AgentFailure instead of raising, and must be safe to call
concurrently.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from agentflow.shared.contracts.agent_result import AgentFailure, AgentResult, FailureKind
from agentflow.shared.contracts.roles import AgentRole, GenerationParams


logger = logging.getLogger(__name__)


@runtime_checkable
class AgentCapability(Protocol):
    async def invoke(
        self,
        role: AgentRole,
        input: str,
        timeout: float,
        overrides: Optional[GenerationParams] = None,
    ) -> AgentResult:
        ...


async def invoke_guarded(
    capability: AgentCapability,
    role: AgentRole,
    input: str,
    timeout: float,
    overrides: Optional[GenerationParams] = None,
) -> AgentResult:
    """
    Invoke a capability, converting any escaped exception into a failure.

    Cancellation is not an Exception and still propagates.
    """
    try:
        return await capability.invoke(role, input, timeout, overrides)
    except Exception as e:
        logger.exception(f"[role={role.name}] Capability raised instead of returning a failure: {e}")
        return AgentFailure(
            kind=FailureKind.PROVIDER_ERROR,
            message=f"{type(e).__name__}: {e}",
        )
