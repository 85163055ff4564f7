"""
Capstone response schemas.

Defines the structured result returned for every top-level request.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from agentflow.parallel.schemas import BatchOutcome
from agentflow.router.schemas import RoutingDecision
from agentflow.shared.contracts.agent_result import AgentFailure, AgentResult
from agentflow.workflow.schemas import PipelineResult


class BranchKind(str, Enum):
    """How a category is handled after routing."""

    SPECIALIST = "specialist"
    PARALLEL = "parallel"
    PIPELINE = "pipeline"


class ResponseStatus(str, Enum):
    COMPLETE = "complete"
    DEGRADED = "degraded"
    FAILED = "failed"


class BranchResult(BaseModel):
    """One agent result produced while handling a request."""

    branch: str = Field(description="'specialist', 'parallel', 'aggregate' or 'pipeline'")
    key: str = Field(description="Task key, role name or step label")
    result: AgentResult = Field(description="The agent result")


class ExecutionRecord(BaseModel):
    """
    Structured result of one capstone request.

    Always returned, including on failure; partial and degraded results
    are labeled through `status`, `degraded` and `notes`.
    """

    request_id: str = Field(description="Request identifier")
    input: str = Field(description="Original request text")
    status: ResponseStatus = Field(description="complete, degraded or failed")
    category: Optional[str] = Field(default=None, description="Routing category value")
    routing: Optional[RoutingDecision] = Field(default=None, description="Routing detail")
    branch: Optional[BranchKind] = Field(default=None, description="Branch that handled the request")
    branch_results: List[BranchResult] = Field(
        default_factory=list, description="Every agent result produced by the branch"
    )
    research: Optional[BatchOutcome] = Field(default=None, description="Fan-out outcome")
    pipeline: Optional[PipelineResult] = Field(default=None, description="Pipeline outcome")
    final_text: str = Field(default="", description="Final synthesized text")
    degraded: bool = Field(default=False, description="True when any constituent failed")
    notes: List[str] = Field(default_factory=list, description="Degradation and fallback notes")
    failure: Optional[AgentFailure] = Field(
        default=None, description="Why the request failed, when status is failed"
    )
