"""Pipeline nodes."""

from agentflow.workflow.nodes.step import finalize_node, make_step_node

__all__ = ["finalize_node", "make_step_node"]
