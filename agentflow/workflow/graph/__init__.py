"""Pipeline graph construction."""

from agentflow.workflow.graph.build import create_pipeline_graph

__all__ = ["create_pipeline_graph"]
