"""
Step and finalize nodes for the pipeline LangGraph workflow.

Each step node runs exactly one agent call. A failed step never stops the
pipeline: it records the failure, marks the run degraded and carries a
placeholder forward so the next step still runs.
"""

import logging
from typing import Any, Callable, Coroutine, Dict

from agentflow.shared.config import OrchestratorConfig
from agentflow.shared.contracts.agent_result import AGENT_RESULT_ADAPTER, failure_placeholder
from agentflow.shared.llm.capability import AgentCapability, invoke_guarded
from agentflow.workflow.prompts import PARTIAL_TEMPLATE, build_step_input
from agentflow.workflow.schemas import (
    PipelineState,
    PipelineStatus,
    StepResult,
    WorkflowStep,
)


logger = logging.getLogger(__name__)

StepNode = Callable[[PipelineState], Coroutine[Any, Any, Dict[str, Any]]]


def make_step_node(
    index: int,
    step: WorkflowStep,
    capability: AgentCapability,
    settings: OrchestratorConfig,
) -> StepNode:
    """
    Build the node function for one pipeline step.

    Args:
        index: Position of the step in execution order (0-based)
        step: Step definition
        capability: Agent capability to call
        settings: Timeouts

    Returns:
        Async node function returning state updates
    """
    timeout = step.role.timeout or settings.step_timeout

    async def step_node(state: PipelineState) -> Dict[str, Any]:
        request_id = state.get("request_id") or "unknown"
        _log = f"[request={request_id}] [graph=pipeline] [node=step_{index + 1}] "

        logger.info(
            f"{_log}Entering node | ordinal={step.ordinal}, role={step.role.name}, "
            f"degraded_so_far={state.get('degraded', False)}"
        )
        step_input = build_step_input(
            step,
            initial_input=state["initial_input"],
            carried=state["carried"],
            first=index == 0,
        )
        result = await invoke_guarded(capability, step.role, step_input, timeout)
        record = StepResult(
            ordinal=step.ordinal,
            role=step.role.name,
            description=step.description,
            result=result,
        ).model_dump()

        if result.ok:
            logger.info(f"{_log}Step complete | chars={len(result.text)}")
            return {
                "carried": result.text,
                "last_success": result.text,
                "last_success_ordinal": step.ordinal,
                "step_results": [record],
                "status": PipelineStatus.RUNNING.value,
            }

        placeholder = failure_placeholder(result)
        logger.warning(
            f"{_log}Step failed ({result.describe()}) -> carrying '{placeholder}' forward"
        )
        return {
            "carried": placeholder,
            "step_results": [record],
            "notes": [f"Step {step.ordinal} ({step.description}) failed: {result.describe()}"],
            "degraded": True,
            "status": PipelineStatus.RUNNING.value,
        }

    step_node.__name__ = f"step_{index + 1}"
    return step_node


def finalize_node(state: PipelineState) -> Dict[str, Any]:
    """
    Choose the pipeline output and terminal status.

    The final step's text is the output when it succeeded. Otherwise the
    last successful step's text is returned behind a partial annotation.
    """
    request_id = state.get("request_id") or "unknown"
    _log = f"[request={request_id}] [graph=pipeline] [node=finalize] "

    last = state["step_results"][-1]
    last_result = AGENT_RESULT_ADAPTER.validate_python(last["result"])
    degraded = state.get("degraded", False)
    status = PipelineStatus.DEGRADED if degraded else PipelineStatus.COMPLETED

    if last_result.ok:
        logger.info(
            f"{_log}Pipeline complete | steps={len(state['step_results'])}, status={status.value}"
        )
        return {"output": last_result.text, "partial": False, "status": status.value}

    if state.get("last_success") is not None:
        source = f"showing output of step {state['last_success_ordinal']}"
        body = state["last_success"]
    else:
        source = "no step succeeded"
        body = state["carried"]
    annotation = PARTIAL_TEMPLATE.format(
        ordinal=last["ordinal"],
        description=last["description"],
        kind=last_result.kind.value,
        source=source,
    )
    logger.warning(
        f"{_log}Final step failed -> partial output | steps={len(state['step_results'])}, "
        f"status={status.value}"
    )
    return {
        "output": f"{annotation}\n\n{body}",
        "partial": True,
        "status": status.value,
    }
