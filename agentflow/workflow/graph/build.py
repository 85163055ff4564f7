"""
Graph construction for the sequential pipeline.

Builds a LangGraph workflow with one node per step, chained strictly in
sequence order, followed by a finalize node.
"""

from typing import Optional, Sequence

from langgraph.graph import StateGraph, END

from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.llm.capability import AgentCapability
from agentflow.workflow.nodes.step import finalize_node, make_step_node
from agentflow.workflow.schemas import PipelineState, WorkflowStep, validate_steps


def step_node_name(index: int) -> str:
    return f"step_{index + 1}"


def create_pipeline_graph(
    steps: Sequence[WorkflowStep],
    capability: AgentCapability,
    settings: Optional[OrchestratorConfig] = None,
):
    """
    Create and compile the LangGraph workflow for a pipeline.

    The graph structure is:
        Entry -> step_1 -> step_2 -> ... -> step_N -> finalize -> END

    Args:
        steps: Ordered, non-empty step definitions
        capability: Agent capability used by every step
        settings: Optional configuration. Uses DEFAULT_CONFIG if not provided.

    Returns:
        Compiled LangGraph application ready for execution.

    Raises:
        ConfigurationError: If the step list is empty or out of order
    """
    if settings is None:
        settings = DEFAULT_CONFIG
    ordered = validate_steps(steps)

    graph = StateGraph(PipelineState)

    for index, step in enumerate(ordered):
        graph.add_node(step_node_name(index), make_step_node(index, step, capability, settings))
    graph.add_node("finalize", finalize_node)

    graph.set_entry_point(step_node_name(0))
    for index in range(1, len(ordered)):
        graph.add_edge(step_node_name(index - 1), step_node_name(index))
    graph.add_edge(step_node_name(len(ordered) - 1), "finalize")
    graph.add_edge("finalize", END)

    app = graph.compile()

    return app
