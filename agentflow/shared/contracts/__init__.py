"""Value objects exchanged between the orchestration engines and agents."""

from agentflow.shared.contracts.agent_result import (
    AGENT_RESULT_ADAPTER,
    AgentFailure,
    AgentResult,
    AgentSuccess,
    FailureKind,
    failure_placeholder,
)
from agentflow.shared.contracts.roles import (
    AgentInvocation,
    AgentRole,
    GenerationParams,
    RoleRegistry,
)

__all__ = [
    "AGENT_RESULT_ADAPTER",
    "AgentFailure",
    "AgentResult",
    "AgentSuccess",
    "FailureKind",
    "failure_placeholder",
    "AgentInvocation",
    "AgentRole",
    "GenerationParams",
    "RoleRegistry",
]
