"""
Capstone graph construction.

Builds the top-level graph that routes a request, runs the chosen branch,
optionally feeds research into planning, and assembles the response.
"""

import logging

from langgraph.graph import StateGraph, END

from agentflow.graph.nodes import CapstoneNodes
from agentflow.graph.router import after_research, select_branch
from agentflow.graph.state import CapstoneState


logger = logging.getLogger(__name__)


def create_capstone_graph(nodes: CapstoneNodes):
    """
    Create and compile the capstone graph.

    The graph structure is:
        Entry -> classify -> select_branch
          -> "specialist" -> specialist -> assemble
          -> "research"   -> gather_research -> after_research
                                             -> "workflow" -> workflow -> assemble
                                             -> "assemble"
          -> "workflow"   -> workflow   -> assemble
        assemble -> END

    Args:
        nodes: Node functions bound to the orchestrator's engines

    Returns:
        Compiled LangGraph application ready for execution.
    """
    graph = StateGraph(CapstoneState)

    # Add nodes
    graph.add_node("classify", nodes.classify)
    graph.add_node("specialist", nodes.specialist)
    graph.add_node("gather_research", nodes.research)
    graph.add_node("workflow", nodes.workflow)
    graph.add_node("assemble", nodes.assemble)

    graph.set_entry_point("classify")

    # After classification, branch on the category plan
    graph.add_conditional_edges(
        "classify",
        select_branch,
        {
            "specialist": "specialist",
            "research": "gather_research",
            "workflow": "workflow",
        },
    )

    # Research feeds planning when the plan has follow-up steps
    graph.add_conditional_edges(
        "gather_research",
        after_research,
        {
            "workflow": "workflow",
            "assemble": "assemble",
        },
    )

    graph.add_edge("specialist", "assemble")
    graph.add_edge("workflow", "assemble")
    graph.add_edge("assemble", END)

    app = graph.compile()

    return app
