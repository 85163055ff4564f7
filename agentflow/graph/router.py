"""
Routing logic for the capstone graph.

Determines which node runs next based on the populated state.
"""

import logging
from typing import Literal

from agentflow.graph.schemas import BranchKind
from agentflow.graph.state import CapstoneState


logger = logging.getLogger(__name__)


_BRANCH_NODES = {
    BranchKind.SPECIALIST.value: "specialist",
    BranchKind.PARALLEL.value: "research",
    BranchKind.PIPELINE.value: "workflow",
}


def select_branch(
    state: CapstoneState,
) -> Literal["specialist", "research", "workflow"]:
    """
    Pick the branch node for the classified category.

    Args:
        state: Current capstone state (branch populated by classify)

    Returns:
        Name of the next node to execute
    """
    request_id = state.get("request_id", "unknown")
    _log = f"[request={request_id}] [graph=capstone] [router=select_branch] "

    node = _BRANCH_NODES[state["branch"]]
    logger.info(
        f"{_log}Routing to '{node}' | category={state.get('category')}, "
        f"followup={state.get('followup', False)}"
    )
    return node


def after_research(
    state: CapstoneState,
) -> Literal["workflow", "assemble"]:
    """
    Decide whether research feeds a planning pipeline.

    Args:
        state: Current capstone state

    Returns:
        "workflow" when the category plan has follow-up steps, else "assemble"
    """
    request_id = state.get("request_id", "unknown")
    _log = f"[request={request_id}] [graph=capstone] [router=after_research] "

    has_research = state.get("research") is not None
    if state.get("followup"):
        logger.info(f"{_log}Routing to 'workflow' | research_available={has_research}")
        return "workflow"

    logger.info(f"{_log}Routing to 'assemble' | research_available={has_research}")
    return "assemble"
