"""
Engine configuration.

Centralizes timeouts, retry and model settings for every orchestration
component, making it easy to tune behavior without touching the wiring.
"""

import os
from dataclasses import dataclass, fields
from typing import Any

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class OrchestratorConfig:
    """
    Configuration shared by the router, fan-out, pipeline and capstone.

    Attributes:
        model: Default LLM model when a role does not name one
        classification_timeout: Per-call timeout for the router's classifier
        specialist_timeout: Per-call timeout for a dispatched specialist
        task_timeout: Per-call timeout for one task inside a fan-out batch
        batch_timeout: Wall-clock limit for a whole fan-out batch
        aggregator_timeout: Per-call timeout for the aggregator agent
        step_timeout: Per-call timeout for one pipeline step
        request_timeout: Wall-clock limit for a whole capstone request
        max_retries: Attempts for transient provider errors
        retry_min_wait: Minimum backoff between attempts (seconds)
        retry_max_wait: Maximum backoff between attempts (seconds)
    """

    # LLM configuration
    model: str = "gpt-4.1-mini"

    # Per-call timeouts (seconds)
    classification_timeout: float = 15
    specialist_timeout: float = 60
    task_timeout: float = 60
    aggregator_timeout: float = 60
    step_timeout: float = 60

    # Wall-clock limits (seconds)
    batch_timeout: float = 90
    request_timeout: float = 300

    # Retry configuration (used by tenacity in llm/client.py)
    max_retries: int = 3
    retry_min_wait: float = 2
    retry_max_wait: float = 10


# Default configuration instance
DEFAULT_CONFIG = OrchestratorConfig(
    model=os.environ.get("AGENTFLOW_MODEL") or OrchestratorConfig.model,
)


def get_config(**overrides: Any) -> OrchestratorConfig:
    """
    Create a configuration with optional overrides.

    Args:
        **overrides: Field values to replace; None values are ignored.

    Returns:
        OrchestratorConfig with the given overrides applied

    Raises:
        TypeError: If an override names an unknown field
    """
    known = {f.name for f in fields(OrchestratorConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown config fields: {sorted(unknown)}")

    values = {name: getattr(DEFAULT_CONFIG, name) for name in known}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return OrchestratorConfig(**values)


def use_mock_llm() -> bool:
    """Whether the API should serve the scripted offline capability."""
    return os.environ.get("AGENTFLOW_MOCK_LLM", "").lower() in ("1", "true", "yes")
