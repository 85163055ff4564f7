"""
Schemas for the sequential pipeline.

Defines workflow steps, the LangGraph state that flows between step
nodes, and the pipeline result returned to callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, List, Optional, Sequence, TypedDict
import operator

from pydantic import BaseModel, Field

from agentflow.shared.contracts.agent_result import AgentResult
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError


@dataclass(frozen=True)
class WorkflowStep:
    """
    One stage of a pipeline.

    Attributes:
        ordinal: Position label; strictly increasing within a pipeline
        role: Role executing the stage
        description: Stage instruction prepended to the stage input
    """

    ordinal: int
    role: AgentRole
    description: str


def validate_steps(steps: Sequence[WorkflowStep]) -> List[WorkflowStep]:
    """
    Check a pipeline definition.

    Raises:
        ConfigurationError: If the pipeline is empty or ordinals do not
            strictly increase
    """
    ordered = list(steps)
    if not ordered:
        raise ConfigurationError("A pipeline needs at least one step")
    for previous, current in zip(ordered, ordered[1:]):
        if current.ordinal <= previous.ordinal:
            raise ConfigurationError(
                f"Pipeline ordinals must strictly increase: "
                f"{previous.ordinal} is followed by {current.ordinal}"
            )
    return ordered


class PipelineStatus(str, Enum):
    """Pipeline lifecycle. COMPLETED and DEGRADED are the only terminal states."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    DEGRADED = "degraded"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStatus.COMPLETED, PipelineStatus.DEGRADED)


# =============================================================================
# LangGraph State Schema
# =============================================================================


class PipelineState(TypedDict):
    """
    State schema for one pipeline run.

    `carried` is the text handed to the next step: the previous step's
    output, or a placeholder when that step failed.
    """

    request_id: Optional[str]
    initial_input: str
    carried: str
    last_success: Optional[str]
    last_success_ordinal: Optional[int]
    step_results: Annotated[List[dict], operator.add]
    notes: Annotated[List[str], operator.add]
    status: str
    degraded: bool
    output: Optional[str]
    partial: bool


# =============================================================================
# Result Models
# =============================================================================


class StepResult(BaseModel):
    """Result of one executed step."""

    ordinal: int = Field(description="Step ordinal")
    role: str = Field(description="Role name that executed the step")
    description: str = Field(description="Step description")
    result: AgentResult = Field(description="Agent result for this step")


class PipelineResult(BaseModel):
    """Outcome of a pipeline run; always carries one result per step."""

    status: PipelineStatus = Field(description="Terminal status")
    steps: List[StepResult] = Field(default_factory=list, description="Per-step results in order")
    output: str = Field(description="Final output, annotated when partial")
    partial: bool = Field(
        default=False, description="True when the final step did not succeed"
    )
    degraded: bool = Field(default=False, description="True when any step failed")
    notes: List[str] = Field(default_factory=list, description="Per-step failure notes")
