"""
Schemas for the parallel fan-out orchestrator.

Defines the tasks that form one fan-out batch and the outcome of a batch:
the per-key result map handed to the aggregator plus the aggregate result.
"""

from dataclasses import dataclass
from typing import Dict, List

from pydantic import BaseModel, Field

from agentflow.shared.contracts.agent_result import AgentResult
from agentflow.shared.contracts.roles import AgentRole


@dataclass(frozen=True)
class ParallelTask:
    """
    One independent agent call inside a fan-out batch.

    Attributes:
        key: Label unique within the batch; becomes the aggregation map key
        role: Role to invoke
        input: Input text for this task
    """

    key: str
    role: AgentRole
    input: str


# Task key -> that task's result; every submitted key is present.
AggregationInput = Dict[str, AgentResult]


class BatchOutcome(BaseModel):
    """
    Result of one fan-out batch.

    `results` and `aggregate` are the (AggregationInput, AgentResult) pair:
    every task key mapped to its own result, and the aggregator's result
    (or the representative failure when every task failed).
    """

    results: Dict[str, AgentResult] = Field(
        default_factory=dict, description="Per-task results keyed by task key"
    )
    aggregate: AgentResult = Field(description="Aggregator result or batch failure")
    aggregated: bool = Field(
        default=False, description="Whether the aggregator agent was invoked"
    )
    degraded: bool = Field(
        default=False, description="True when at least one task failed"
    )
    notes: List[str] = Field(
        default_factory=list, description="Human-readable notes on missing data"
    )

    @property
    def ok(self) -> bool:
        return self.aggregate.ok

    @property
    def failed_keys(self) -> List[str]:
        return sorted(k for k, r in self.results.items() if not r.ok)
