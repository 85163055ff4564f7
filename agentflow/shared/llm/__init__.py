"""Agent capability adapters."""

from agentflow.shared.llm.capability import AgentCapability, invoke_guarded
from agentflow.shared.llm.client import OpenAIAgentCapability, get_cached_client
from agentflow.shared.llm.mock import ScriptedAgentCapability, ScriptedReply

__all__ = [
    "AgentCapability",
    "invoke_guarded",
    "OpenAIAgentCapability",
    "get_cached_client",
    "ScriptedAgentCapability",
    "ScriptedReply",
]
