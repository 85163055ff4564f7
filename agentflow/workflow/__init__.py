"""
Sequential pipeline.

Chains a fixed, ordered list of agent steps, feeding each step's output
into the next, with fail-soft handling of individual step failures.
"""

from agentflow.workflow.pipeline import SequentialPipeline
from agentflow.workflow.schemas import (
    PipelineResult,
    PipelineStatus,
    StepResult,
    WorkflowStep,
)

__all__ = [
    "SequentialPipeline",
    "PipelineResult",
    "PipelineStatus",
    "StepResult",
    "WorkflowStep",
]
