"""
Capstone orchestrator graph.

Composes routing, fan-out research and sequential planning into one
request-scoped execution:
    classify -> {specialist | research [-> workflow] | workflow} -> assemble
"""

from agentflow.graph.build import create_capstone_graph
from agentflow.graph.config import CapstoneConfig, CategoryPlan
from agentflow.graph.orchestrator import CapstoneOrchestrator
from agentflow.graph.schemas import BranchKind, BranchResult, ExecutionRecord, ResponseStatus

__all__ = [
    "create_capstone_graph",
    "CapstoneConfig",
    "CategoryPlan",
    "CapstoneOrchestrator",
    "BranchKind",
    "BranchResult",
    "ExecutionRecord",
    "ResponseStatus",
]
