"""
Shared infrastructure for all engines.

Modules:
- contracts: Agent roles and the AgentResult tagged union
- llm: Agent capability protocol, OpenAI adapter and scripted adapter
- logging: Structured JSON logging
- config: Timeouts and retry settings
- errors: Configuration error hierarchy
"""

from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig, get_config
from agentflow.shared.errors import AgentflowError, ConfigurationError
from agentflow.shared.llm.capability import AgentCapability, invoke_guarded
from agentflow.shared.logging.config import setup_logging, log_state_transition

__all__ = [
    "DEFAULT_CONFIG",
    "OrchestratorConfig",
    "get_config",
    "AgentflowError",
    "ConfigurationError",
    "AgentCapability",
    "invoke_guarded",
    "setup_logging",
    "log_state_transition",
]
