"""
Sequential pipeline runner.

Runs a fixed, ordered list of steps where each step consumes the previous
step's output. The pipeline always terminates with one result per step and
a best-effort final output; individual step failures only degrade it.
"""

import logging
from typing import List, Optional, Sequence

from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.llm.capability import AgentCapability
from agentflow.workflow.graph.build import create_pipeline_graph
from agentflow.workflow.schemas import (
    PipelineResult,
    PipelineState,
    PipelineStatus,
    WorkflowStep,
    validate_steps,
)


logger = logging.getLogger(__name__)


class SequentialPipeline:
    """
    A compiled pipeline over a fixed step list.

    Args:
        steps: Ordered, non-empty step definitions with increasing ordinals
        capability: Agent capability used by every step
        settings: Timeouts. Uses DEFAULT_CONFIG if not provided.

    Raises:
        ConfigurationError: If the step list is empty or out of order
    """

    def __init__(
        self,
        steps: Sequence[WorkflowStep],
        capability: AgentCapability,
        settings: Optional[OrchestratorConfig] = None,
    ):
        self.steps: List[WorkflowStep] = validate_steps(steps)
        self._settings = settings or DEFAULT_CONFIG
        self._graph = create_pipeline_graph(self.steps, capability, self._settings)

    def initial_state(self, initial_input: str, request_id: Optional[str] = None) -> PipelineState:
        return {
            "request_id": request_id,
            "initial_input": initial_input,
            "carried": initial_input,
            "last_success": None,
            "last_success_ordinal": None,
            "step_results": [],
            "notes": [],
            "status": PipelineStatus.PENDING.value,
            "degraded": False,
            "output": None,
            "partial": False,
        }

    async def run(self, initial_input: str, request_id: Optional[str] = None) -> PipelineResult:
        """
        Execute every step in order.

        Args:
            initial_input: Input of the first step
            request_id: Optional identifier used in log lines

        Returns:
            PipelineResult with exactly one StepResult per step
        """
        _log = f"[request={request_id or 'unknown'}] [graph=pipeline] [api=run] "
        logger.info(
            f"{_log}Pipeline starting | steps={[s.role.name for s in self.steps]}"
        )

        final_state = await self._graph.ainvoke(
            self.initial_state(initial_input, request_id),
            config={"recursion_limit": len(self.steps) + 5},
        )

        result = PipelineResult(
            status=PipelineStatus(final_state["status"]),
            steps=final_state["step_results"],
            output=final_state["output"] or "",
            partial=final_state["partial"],
            degraded=final_state["degraded"],
            notes=final_state["notes"],
        )
        logger.info(
            f"{_log}Pipeline finished | status={result.status.value}, "
            f"steps={len(result.steps)}, partial={result.partial}"
        )
        return result
